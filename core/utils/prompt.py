"""Console prompting for interactive parameter selection."""

import sys
from typing import Callable, Optional, TextIO

from core.exceptions import ConfigurationError


class ConsolePrompter:
    """Reads operator answers and writes menus.

    Menus go to stderr so that stdout only carries the final endpoint.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        stream: Optional[TextIO] = None,
    ):
        self._input = input_func
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def say(self, text: str = "") -> None:
        print(text, file=self.stream)

    def ask(self, prompt: str) -> str:
        """Show a prompt and return the stripped answer."""
        self.stream.write(prompt)
        self.stream.flush()
        try:
            answer = self._input("")
        except EOFError:
            raise ConfigurationError("No answer given (end of input)") from None
        return (answer or "").strip()
