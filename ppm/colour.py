from ppm.util import RGB_MAX, byte_to_float, clamp, float_to_byte


class Rgb:
    """
    An RGB pixel with channels in [0.0, 1.0].

    Channels outside the range are clamped, both on construction and on
    assignment, so decoded or computed values can never leave it.
    """

    __slots__ = ("_r", "_g", "_b")

    def __init__(self, r, g, b):
        self.r = r
        self.g = g
        self.b = b

    @property
    def r(self):
        return self._r

    @r.setter
    def r(self, value):
        self._r = clamp(float(value))

    @property
    def g(self):
        return self._g

    @g.setter
    def g(self, value):
        self._g = clamp(float(value))

    @property
    def b(self):
        return self._b

    @b.setter
    def b(self, value):
        self._b = clamp(float(value))

    @classmethod
    def black(cls):
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls):
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def from_bytes(cls, r, g, b, maxval=RGB_MAX):
        return cls(
            byte_to_float(r, maxval),
            byte_to_float(g, maxval),
            byte_to_float(b, maxval),
        )

    def as_bytes(self, maxval=RGB_MAX):
        return (
            float_to_byte(self._r, maxval),
            float_to_byte(self._g, maxval),
            float_to_byte(self._b, maxval),
        )

    def copy(self):
        return Rgb(self._r, self._g, self._b)

    def __iter__(self):
        return iter((self._r, self._g, self._b))

    def __eq__(self, other):
        if not isinstance(other, Rgb):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __repr__(self):
        return f"Rgb({self._r!r}, {self._g!r}, {self._b!r})"
