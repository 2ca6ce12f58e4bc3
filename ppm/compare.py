import numpy as np

from ppm.error import InvalidDimensions


def _channels(image, maxval):
    return np.array([colour.as_bytes(maxval) for colour in image.values()], dtype=np.int64).ravel()


def compare_images(first, second, tolerance=0):
    """
    Compares two images channel by channel.

    Both images are measured in the first image's maxval, so the same
    colours stored at different maxvals compare equal.

    Args:
        first (Image): Reference image.
        second (Image): Image to check against the reference.
        tolerance (int): Acceptable difference between channel values.

    Returns:
        tuple: Differences as (index, first value, second value) over the
        flattened row-major channels, and the similarity percentages with
        and without tolerance.
    """
    if first.dimensions() != second.dimensions():
        raise InvalidDimensions(second.width, second.height)

    numbers1 = _channels(first, first.maxval)
    numbers2 = _channels(second, first.maxval)
    delta = np.abs(numbers1 - numbers2)

    differences = [
        (int(i), int(numbers1[i]), int(numbers2[i]))
        for i in np.flatnonzero(delta > tolerance)
    ]

    total_comparisons = len(delta)
    within_tolerance = total_comparisons - len(differences)
    exact_matches = int(np.count_nonzero(delta == 0))

    similarity_with_tolerance = (within_tolerance / total_comparisons) * 100
    similarity_exact = (exact_matches / total_comparisons) * 100

    return differences, similarity_with_tolerance, similarity_exact
