"""
Line-oriented request/response used by the review workflow.

The workflow only talks to a Prompter, so a front end other than the
terminal can feed it the same single-character commands.
"""
import sys
from abc import ABC, abstractmethod
from typing import Optional

from ..exceptions import InvalidInputError


class Prompter(ABC):
    @abstractmethod
    def ask(self, prompt: str) -> str:
        """Shows the prompt and returns one line of input without its newline."""

    def pause(self) -> None:
        self.ask("Press Enter to continue...")


class ConsolePrompter(Prompter):
    """Blocks on stdin for each answer; end of input aborts the session."""

    def __init__(self, stream=None, out=None):
        self.stream = stream or sys.stdin
        self.out = out or sys.stdout

    def ask(self, prompt: str) -> str:
        self.out.write(prompt)
        self.out.flush()
        try:
            line = self.stream.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidInputError(f"Cannot read interactive input: {e}") from e
        if line == "":
            raise InvalidInputError("Interactive input closed")
        return line.rstrip("\r\n")


def first_char(answer: str) -> Optional[str]:
    """The command character of an answer, or None for a blank line."""
    answer = answer.strip()
    return answer[0] if answer else None


def is_yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


def is_no(answer: str) -> bool:
    return answer.strip().lower() in ("n", "no")
