"""
vaultcli faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  failure. Codes are grouped by domain so logs and searches stay predictable.
- CommandException: base type carrying a short static context message plus
  free-form options, rendering itself through rich.
- Concrete faults for each failure class of the command layer:
  • flag parsing (unknown flag, bad syntax, missing or invalid value, help),
  • flag registration (duplicate names),
  • environment reading, client construction and token helpers.

Wrapping
- Faults raised because of another exception are chained with
  ``raise Fault("context") from cause``; str(fault) then reads
  "context: cause" while the underlying exception stays reachable through
  __cause__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping
    - flags (111xx)
      • BAD_FLAG_SYNTAX, UNKNOWN_FLAG, MISSING_FLAG_VALUE, INVALID_FLAG_VALUE,
        HELP_REQUESTED, DUPLICATED_FLAG
    - environment (112xx)
      • ENVIRONMENT_READ
    - client (113xx)
      • CLIENT_CREATE, TOKEN_HELPER, REQUEST
    """
    # --- flag errors (111xx) ---
    BAD_FLAG_SYNTAX    = 11111
    UNKNOWN_FLAG       = 11112
    MISSING_FLAG_VALUE = 11113
    INVALID_FLAG_VALUE = 11114
    HELP_REQUESTED     = 11115
    DUPLICATED_FLAG    = 11116

    # --- environment errors (112xx) ---
    ENVIRONMENT_READ   = 11201

    # --- client errors (113xx) ---
    CLIENT_CREATE      = 11301
    TOKEN_HELPER       = 11302
    REQUEST            = 11303


class CommandException(Exception):
    """
    Base fault: a static context message plus options describing the failure.

    Subclasses pin a default ``code`` and ``title``; callers may add any
    further context (flag name, offending value, hint) as keyword options.
    """
    code = FaultCode.CLIENT_CREATE
    title = "command failed"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        message = self.message if self.message is not Unset else self.title
        if self.__cause__ is not None:
            return "%s: %s" % (message, self.__cause__)
        return message

    def __rich__(self):
        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

        header = Text.assemble(
            "[ ",
            Text(self.options.get("prog", "vaultcli"), styles["prog-name"]),
            " — ",
            Text(str(self.code.value), styles["code"]),
            " | ",
            Text(self.title.title(), styles["error-title"]),
            " ]",
        )
        renders = [header, Text(str(self), styles["error-message"])]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(Text(" → ", styles["hint-arrow"]), Text(hint, styles["hint"])))
        return Group(*renders)


class FlagParseError(CommandException):
    code = FaultCode.BAD_FLAG_SYNTAX
    title = "invalid command-line flags"


class BadFlagSyntaxError(FlagParseError):
    code = FaultCode.BAD_FLAG_SYNTAX
    title = "bad flag syntax"


class UnknownFlagError(FlagParseError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"


class MissingValueError(FlagParseError):
    code = FaultCode.MISSING_FLAG_VALUE
    title = "missing flag value"


class InvalidValueError(FlagParseError):
    code = FaultCode.INVALID_FLAG_VALUE
    title = "invalid flag value"


class HelpRequested(FlagParseError):
    code = FaultCode.HELP_REQUESTED
    title = "help requested"


class DuplicateFlagError(CommandException, ValueError):
    code = FaultCode.DUPLICATED_FLAG
    title = "duplicated flag"


class EnvironmentReadError(CommandException):
    code = FaultCode.ENVIRONMENT_READ
    title = "environment error"


class ClientCreateError(CommandException):
    code = FaultCode.CLIENT_CREATE
    title = "client error"


class TokenHelperError(CommandException):
    code = FaultCode.TOKEN_HELPER
    title = "token helper error"


class RequestError(CommandException):
    code = FaultCode.REQUEST
    title = "request failed"


__all__ = (
    "FaultCode",
    "CommandException",
    "FlagParseError",
    "BadFlagSyntaxError",
    "UnknownFlagError",
    "MissingValueError",
    "InvalidValueError",
    "HelpRequested",
    "DuplicateFlagError",
    "EnvironmentReadError",
    "ClientCreateError",
    "TokenHelperError",
    "RequestError",
)
