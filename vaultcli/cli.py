"""
Command-line entry point.

    $ vaultcli read -format=json secret/my-secret

Logging goes to stderr; its level comes from VAULT_LOG_LEVEL (default
"warning").
"""
import logging
import os
import sys

from .commands import COMMANDS
from .faults import CommandException
from .token import default_token_helper
from .ui import ConsoleUi

ENV_LOG_LEVEL = "VAULT_LOG_LEVEL"


def configure_logging(level=None, /, environ=None):
    """
    Install a stderr handler on the "vaultcli" logger; safe to call repeatedly.
    """
    environ = os.environ if environ is None else environ
    name = (level or environ.get(ENV_LOG_LEVEL, "") or "warning").upper()

    logger = logging.getLogger("vaultcli")
    logger.setLevel(getattr(logging, name, logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_vaultcli", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    handler._vaultcli = True
    logger.addHandler(handler)
    return logger


def usage():
    width = max(map(len, COMMANDS))
    lines = ["Usage: vaultcli <command> [args]", "", "Commands:"]
    for name, command in sorted(COMMANDS.items()):
        lines.append("    %s    %s" % (name.ljust(width), command.synopsis))
    return "\n".join(lines)


def main(argv=None, /, ui=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    ui = ui or ConsoleUi()
    configure_logging()

    if not argv or argv[0] in ("-h", "-help", "--help"):
        ui.output(usage())
        return 0 if argv else 1

    name, *arguments = argv
    if (factory := COMMANDS.get(name)) is None:
        ui.error("Unknown command: %s" % name)
        ui.output(usage())
        return 1

    command = factory(ui, token_helper=default_token_helper)
    try:
        return command.run(arguments)
    except CommandException as e:
        ui.render(e, stderr=True)
        return 1
    finally:
        command.close()


__all__ = (
    "configure_logging",
    "main",
    "usage",
)
