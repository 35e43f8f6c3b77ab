import sys
from typing import List, Optional, Protocol

from InquirerPy.prompts.input import InputPrompt
from InquirerPy.utils import InquirerPyStyle

from keepc.config import colors
from keepc.config.text_styles import PROMPT_FORM
from keepc.shell_ui.shell_output import cprint

custom_style = InquirerPyStyle(
    {
        "questionmark": colors.terminal.green_light,
        "answermark": colors.terminal.black_light,
        "answer": colors.terminal.input,
        "input": colors.terminal.input,
        "question": f"{colors.terminal.green_light} bold",
        "answered_question": colors.terminal.black_light,
        "instruction": colors.terminal.black_light,
        "long_instruction": colors.terminal.black_light,
        "pointer": colors.terminal.cursor,
        "separator": "",
        "skipped": colors.terminal.black_light,
        "validator": "",
        "marker": colors.terminal.yellow_dark,
    }
)


class Prompter(Protocol):
    """
    Something that can ask the user for a line of text.
    """

    def read_line(self, message: str) -> str: ...


def prompt_simple_string(prompt_text: str = "", prompt_symbol: str = f"{PROMPT_FORM}") -> str:
    """
    Simple prompt from the user for a simple string.
    """
    prompt_text = prompt_text.strip()
    sep = "\n" if len(prompt_text) > 40 else " "
    prompt_message = f"{prompt_text}{sep}{prompt_symbol}"
    try:
        response = InputPrompt(message=prompt_message, style=custom_style).execute()
    except EOFError:
        return ""
    return response or ""


class ConsolePrompter:
    """
    Reads from the terminal. Uses an interactive prompt if stdin is a TTY and
    otherwise reads one plain line from stdin, so piped input works.
    """

    def read_line(self, message: str) -> str:
        if sys.stdin.isatty():
            return prompt_simple_string(message)

        cprint(message, end="")
        line = sys.stdin.readline()
        return line.rstrip("\r\n")


class ScriptedPrompter:
    """
    Replies with canned responses, in order, and records the prompts it was given.
    Once responses run out, replies are empty, like EOF on stdin.
    """

    def __init__(self, responses: Optional[List[str]] = None):
        self.responses = list(responses or [])
        self.prompts: List[str] = []

    def read_line(self, message: str) -> str:
        self.prompts.append(message)
        if self.responses:
            return self.responses.pop(0)
        return ""


## Tests


def test_scripted_prompter():
    prompter = ScriptedPrompter(["2", "yes"])
    assert prompter.read_line("Pick: ") == "2"
    assert prompter.read_line("Sure? ") == "yes"
    assert prompter.read_line("More? ") == ""
    assert prompter.prompts == ["Pick: ", "Sure? ", "More? "]
