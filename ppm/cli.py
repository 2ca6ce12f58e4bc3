import argparse
import logging
import sys

from ppm.colour import Rgb
from ppm.compare import compare_images
from ppm.error import ImageError
from ppm.image import Image, load

logger = logging.getLogger(__name__)


def gradient(width, height):
    # Red rises along x, green along y, blue stays at half intensity
    image = Image(width, height)
    for x in range(width):
        for y in range(height):
            pixel = image.get_mut(x, y)
            pixel.r = x / width
            pixel.g = y / height
            pixel.b = 0.5
    return image


def cmd_gradient(args):
    height = args.height if args.height is not None else args.width
    gradient(args.width, height).save(args.output)
    print(f"Output written to {args.output}")
    return 0


def cmd_info(args):
    image = load(args.input)
    print(f"Image dimensions: {image.width}x{image.height}")
    print(f"Maxval: {image.maxval}")
    return 0


def cmd_dump(args):
    image = load(args.input)
    for y in range(image.height):
        row = [image.get(x, y).as_bytes(image.maxval) for x in range(image.width)]
        print(" ".join(f"{r} {g} {b}" for r, g, b in row))
    return 0


def cmd_cat(args):
    load(args.input).write(sys.stdout)
    return 0


def cmd_compare(args):
    differences, similarity_with_tolerance, similarity_exact = compare_images(
        load(args.first), load(args.second), tolerance=args.tolerance
    )
    print(f"Similarity with tolerance ({args.tolerance}): {similarity_with_tolerance:.2f}%")
    print(f"Exact similarity (no tolerance): {similarity_exact:.2f}%")
    if args.show_differences:
        for index, num1, num2 in differences:
            print(f"Index {index}: {args.first} has {num1}, {args.second} has {num2}")
    return 1 if differences else 0


def build_parser():
    parser = argparse.ArgumentParser(prog="ppm", description="Create, inspect and compare ASCII PPM (P3) images.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sub = subparsers.add_parser("gradient", help="Write a red/green gradient image")
    sub.add_argument("output", type=str, help="Path to the output .ppm file")
    sub.add_argument("--width", type=int, default=64, help="Image width (default: 64)")
    sub.add_argument("--height", type=int, default=None, help="Image height (default: same as width)")
    sub.set_defaults(func=cmd_gradient)

    sub = subparsers.add_parser("info", help="Print the dimensions and maxval of an image")
    sub.add_argument("input", type=str, help="Path to the input .ppm file")
    sub.set_defaults(func=cmd_info)

    sub = subparsers.add_parser("dump", help="Print the channel values of an image, one row per line")
    sub.add_argument("input", type=str, help="Path to the input .ppm file")
    sub.set_defaults(func=cmd_dump)

    sub = subparsers.add_parser("cat", help="Decode an image and write it back to stdout")
    sub.add_argument("input", type=str, help="Path to the input .ppm file")
    sub.set_defaults(func=cmd_cat)

    sub = subparsers.add_parser("compare", help="Compare two images channel by channel")
    sub.add_argument("first", type=str, help="Path to the reference .ppm file")
    sub.add_argument("second", type=str, help="Path to the .ppm file to check")
    sub.add_argument("--tolerance", type=int, default=0, help="Acceptable channel difference (default: 0)")
    sub.add_argument("--show-differences", action="store_true", help="Print every channel that differs")
    sub.set_defaults(func=cmd_compare)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    try:
        return args.func(args)
    except ImageError as err:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
