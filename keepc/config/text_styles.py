"""
Colors, symbols and rich styles for console output.
"""

from rich.highlighter import _combine_regex, RegexHighlighter
from rich.style import Style

## Colors

COLOR_HEADING = "bold bright_green"

COLOR_COMMAND = "bright_green"

COLOR_DESCRIPTION = "blue"

COLOR_INDEX = "bright_yellow"

COLOR_STATUS = "yellow"

COLOR_KEY = "bright_blue"

COLOR_PATH = "cyan"

COLOR_HINT = "bright_black"

COLOR_ERROR = "bright_red"


## Symbols

PROMPT_FORM = "❯❯"

COMMAND_PREFIX = "$ "

EMOJI_WARN = "△"

EMOJI_ERROR = EMOJI_WARN + EMOJI_WARN


## Rich setup


class KeepcHighlighter(RegexHighlighter):
    """
    Highlights warnings, paths, quoted strings and `code` in log lines.
    """

    base_style = "keepc."
    highlights = [
        r"(?P<warn>△+)",
        _combine_regex(
            r"(?P<path>\B(/[-\w._+]+)*\/)(?P<filename>[-\w._+]*)?",
            r"(?<![\\\w])(?P<str>'.*?(?<!\\)'|\".*?(?<!\\)\")",
            r"(?P<code_span>`[^`\n]+`)",
        ),
    ]


RICH_STYLES = {
    "keepc.warn": Style(color=COLOR_ERROR, bold=True),
    "keepc.path": Style(color=COLOR_PATH),
    "keepc.filename": Style(color=COLOR_PATH, bold=True),
    "keepc.str": Style(color=COLOR_KEY, italic=False, bold=False),
    "keepc.code_span": Style(color=COLOR_COMMAND, italic=False),
}
