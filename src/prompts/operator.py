"""
Line-based operator prompts.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence, TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, InvalidResponse, Prompt

IDENTIFIER_PATTERN = re.compile(r"^[0-9a-f]{24}$")

_YES = {"y", "yes"}
_NO = {"n", "no"}


class YesNoConfirm(Confirm):
    """Confirm that also accepts yes/no in any case."""

    validate_error_message = "[prompt.invalid](y/n)"

    def process_response(self, value: str) -> bool:
        answer = value.strip().lower()
        if answer in _YES:
            return True
        if answer in _NO:
            return False
        raise InvalidResponse(self.validate_error_message)


class IdentifierPrompt(Prompt):
    """Prompt for an item id: 24 lowercase hex characters."""

    validate_error_message = "[prompt.invalid]Item id must be 24 hexadecimal characters"

    def process_response(self, value: str) -> str:
        answer = value.strip().lower()
        if not IDENTIFIER_PATTERN.match(answer):
            raise InvalidResponse(self.validate_error_message)
        return answer


class OperatorPrompt:
    """Ask the operator questions and print progress to the console."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None) -> None:
        self.console = console or Console()
        self.stream = stream

    def ask(self, question: str) -> str:
        return Prompt.ask(_styled(question), console=self.console, stream=self.stream)

    def choose(self, question: str, choices: Sequence[str]) -> str:
        """Re-prompt until one of the choices is given."""
        return Prompt.ask(
            _styled(question),
            console=self.console,
            choices=list(choices),
            stream=self.stream,
        )

    def confirm(self, question: str) -> bool:
        return YesNoConfirm.ask(_styled(question), console=self.console, stream=self.stream)

    def ask_identifier(self, question: str) -> str:
        return IdentifierPrompt.ask(_styled(question), console=self.console, stream=self.stream)

    def collect_list(self, item_question: str, more_question: str) -> list[str]:
        """Collect one or more answers, asking after each whether to add another."""
        values = [self.ask(item_question)]
        while self.confirm(more_question):
            values.append(self.ask(item_question))
        return values

    def info(self, message: str) -> None:
        self.console.print(message, style="cyan", markup=False, highlight=False)

    def success(self, message: str) -> None:
        self.console.print(message, style="green", markup=False, highlight=False)

    def error(self, message: str) -> None:
        self.console.print(message, style="bold red", markup=False, highlight=False)


def _styled(question: str) -> str:
    return f"[magenta]{escape(question)}[/magenta]"
