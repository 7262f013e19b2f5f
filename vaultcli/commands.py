"""
Subcommands.

Each subcommand declares its option groups through flags() and implements
run(args) -> exit status. Status 1 means a usage problem (bad flags, wrong
number of arguments), status 2 a problem talking to the server.
"""
import textwrap

from .base import BaseCommand, FlagSetBit
from .completion import PredictAnything
from .faults import CommandException, FlagParseError, HelpRequested
from .format import output_data, print_field


class ReadCommand(BaseCommand):
    synopsis = "Read data and retrieves secrets"

    def flags(self):
        return self.flag_set(FlagSetBit.HTTP | FlagSetBit.OUTPUT_FIELD | FlagSetBit.OUTPUT_FORMAT)

    def autocomplete_args(self):
        return PredictAnything

    def autocomplete_flags(self):
        return self.flags().completions()

    def help(self):
        text = textwrap.dedent("""\
            Usage: vaultcli read [options] PATH

              Reads data from the server at the given path. This can be used to read
              secrets, generate dynamic credentials, get configuration details, and
              more.

              Read a secret from the static secrets engine:

                  $ vaultcli read secret/my-secret
            """)
        return text + "\n" + self.flags().help()

    def run(self, args):
        flags = self.flags()

        try:
            flags.parse(args)
        except HelpRequested:
            self.ui.output(self.help())
            return 0
        except FlagParseError:
            # the parser already reported the problem through ui.error
            return 1

        match flags.args():
            case [path]:
                pass
            case arguments:
                self.ui.error("Incorrect number of arguments (expected 1, got %d)" % len(arguments))
                return 1

        try:
            client = self.client()
        except CommandException as e:
            self.ui.render(e, stderr=True)
            return 2

        try:
            secret = client.read(path)
        except CommandException as e:
            self.ui.render(e, stderr=True)
            return 2
        finally:
            if client is not self._client:
                client.close()

        if secret is None:
            self.ui.error("No value found at %s" % path)
            return 2

        data = secret.get("data") or {}
        if self.flag_field:
            try:
                print_field(self.ui, data, self.flag_field)
            except KeyError:
                self.ui.error("Field %r not present in secret" % self.flag_field)
                return 1
            return 0

        try:
            output_data(self.ui, data, self.flag_format)
        except ValueError as e:
            self.ui.error(str(e))
            return 1
        return 0


COMMANDS = {
    "read": ReadCommand,
}


__all__ = (
    "ReadCommand",
    "COMMANDS",
)
