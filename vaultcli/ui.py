"""
Terminal output abstraction used by commands.

- ConsoleUi writes through rich consoles: output/info to stdout,
  error/warn to stderr. output() and write() carry server data and go to
  the console file verbatim; the other methods print with markup, emoji
  codes and highlighting disabled.
- MockUi records everything into in-memory buffers for tests.
"""
import io
from typing import Protocol

from rich.console import Console


class Ui(Protocol):
    def output(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warn(self, message: str) -> None: ...
    def write(self, message: str) -> None: ...
    def render(self, renderable, *, stderr: bool = False) -> None: ...


class ConsoleUi:
    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout or Console(soft_wrap=True, markup=False, emoji=False, highlight=False)
        self.stderr = stderr or Console(stderr=True, soft_wrap=True, markup=False, emoji=False, highlight=False)

    @staticmethod
    def _verbatim(console, text, /):
        # no markup, emoji codes, tab expansion or control-code stripping
        console.file.write(text)
        console.file.flush()

    def output(self, message):
        self._verbatim(self.stdout, message + "\n")

    def info(self, message):
        self.stdout.print(message, markup=False, emoji=False, highlight=False)

    def error(self, message):
        self.stderr.print(message, style="red", markup=False, emoji=False, highlight=False)

    def warn(self, message):
        self.stderr.print(message, style="yellow", markup=False, emoji=False, highlight=False)

    def write(self, message):
        """
        Write to stdout verbatim, without a trailing newline.
        """
        self._verbatim(self.stdout, message)

    def render(self, renderable, *, stderr=False):
        (self.stderr if stderr else self.stdout).print(renderable)


class MockUi:
    def __init__(self):
        self.output_writer = io.StringIO()
        self.error_writer = io.StringIO()

    def output(self, message):
        self.output_writer.write(message + "\n")

    def info(self, message):
        self.output_writer.write(message + "\n")

    def error(self, message):
        self.error_writer.write(message + "\n")

    def warn(self, message):
        self.error_writer.write(message + "\n")

    def write(self, message):
        self.output_writer.write(message)

    def render(self, renderable, *, stderr=False):
        console = Console(file=io.StringIO(), width=120, color_system=None)
        console.print(renderable)
        (self.error_writer if stderr else self.output_writer).write(console.file.getvalue())


__all__ = (
    "Ui",
    "ConsoleUi",
    "MockUi",
)
