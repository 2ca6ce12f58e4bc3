import math

# The maximum value for a single RGB component in an 8 bit image
RGB_MAX = 255

# Largest maxval a PPM header may declare
MAXVAL_LIMIT = 65535


def clamp(value, low=0.0, high=1.0):
    # NaN fails every comparison, pin it to the low end
    if math.isnan(value):
        return low
    value = high if value > high else value
    value = low if value < low else value
    return value


def float_to_byte(value, maxval=RGB_MAX):
    """
    Converts a channel in [0.0, 1.0] to an integer in [0, maxval].
    Rounds half up, so 1.0 maps to maxval exactly.
    """
    return int(clamp(value) * maxval + 0.5)


def byte_to_float(value, maxval=RGB_MAX):
    """
    Converts an integer channel in [0, maxval] to a float in [0.0, 1.0].
    """
    return value / maxval
