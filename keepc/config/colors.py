from types import SimpleNamespace

from colour import Color


def hsl_to_hex(hsl_string: str) -> str:
    """
    Convert a CSS-style HSL string to an RGB hex string, e.g.
    "hsl(134, 43%, 60%)" -> "#6dbd6d".
    """
    hue, saturation, lightness = (
        float(value.strip().rstrip("%")) for value in hsl_string[4:-1].split(",")
    )
    return Color(hsl=(hue / 360, saturation / 100, lightness / 100)).hex_l


# Prompt colors, tuned for dark terminals.
terminal = SimpleNamespace(
    black_light=hsl_to_hex("hsl(0, 0%, 73%)"),
    green_light=hsl_to_hex("hsl(134, 53%, 73%)"),
    yellow_dark=hsl_to_hex("hsl(44, 54%, 55%)"),
    cursor=hsl_to_hex("hsl(305, 84%, 68%)"),
    input=hsl_to_hex("hsl(305, 92%, 95%)"),
)


## Tests


def test_hsl_to_hex():
    assert hsl_to_hex("hsl(0, 0%, 100%)") == "#ffffff"
    assert hsl_to_hex("hsl(0, 0%, 0%)") == "#000000"
    assert hsl_to_hex("hsl(0, 100%, 50%)") == "#ff0000"
    assert terminal.input.startswith("#") and len(terminal.input) == 7
