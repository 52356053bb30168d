"""Named colors and their packed RGB values."""

from typing import NamedTuple

# Packed 0xRRGGBB values matching the project format's built-in color constants
NAMED_COLORS: dict[str, int] = {
    "black": 0x000000,
    "blue": 0x0000FF,
    "cyan": 0x00FFFF,
    "darkgray": 0x444444,
    "darkgrey": 0x444444,
    "gray": 0x888888,
    "grey": 0x888888,
    "green": 0x00FF00,
    "lightgray": 0xCCCCCC,
    "lightgrey": 0xCCCCCC,
    "magenta": 0xFF00FF,
    "orange": 0xFFC800,
    "pink": 0xFFAFAF,
    "red": 0xFF0000,
    "white": 0xFFFFFF,
    "yellow": 0xFFFF00,
}

DEFAULT_COLOR_NAME = "white"


class Color(NamedTuple):
    """A resolved color."""

    name: str
    packed: int

    @property
    def red(self) -> int:
        return (self.packed >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.packed >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.packed & 0xFF

    @property
    def channels(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def argb(self) -> int:
        """Opaque ARGB integer, as used by literal color blocks."""
        return 0xFF000000 | self.packed


DEFAULT_COLOR = Color(DEFAULT_COLOR_NAME, NAMED_COLORS[DEFAULT_COLOR_NAME])


def resolve_color(name: str | None) -> Color:
    """Resolve a color name; unknown names resolve to DEFAULT_COLOR."""
    key = (name or "").strip().lower().replace(" ", "")
    packed = NAMED_COLORS.get(key)
    if packed is None:
        return DEFAULT_COLOR
    return Color(key, packed)
