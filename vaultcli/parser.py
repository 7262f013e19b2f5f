"""
Token-consuming flag parser.

A Parser owns the registry of bindings for one command and performs the
single parsing pass over its arguments. Option groups never parse; they
register their bindings into the Parser owned by their FlagSets.

Grammar
- "-name" / "--name": boolean flags set to true; other flags take the next
  token as their value.
- "-name=value" / "--name=value": inline value for any flag.
- Parsing stops at the first non-flag token or a lone "-"; a "--" token is
  consumed and stops parsing too. Everything left is available from args().
- "-h" / "-help" request help unless a flag with that name is registered.

Diagnostics
- Every failure is written as one line to the parser's output before the
  matching FlagParseError is raised.
"""
import logging

from .faults import *

logger = logging.getLogger(__name__)


class Parser:
    def __init__(self, name="", /, output=None):
        self.name = name
        self.output = output
        self._bindings = {}
        self._actual = {}
        self._args = []
        self._parsed = False

    def check(self, binding, /):
        """
        Raise DuplicateFlagError when the binding's name is already taken.
        """
        if binding.name in self._bindings:
            raise DuplicateFlagError(
                "flag redefined: -%s" % binding.name,
                flag=binding.name,
                hint="give every option a unique name across all option groups",
            )

    def register(self, binding, /):
        self.check(binding)
        self._bindings[binding.name] = binding

    def lookup(self, name, /):
        return self._bindings.get(name)

    def parsed(self):
        return self._parsed

    def args(self):
        return list(self._args)

    def is_set(self, name, /):
        return name in self._actual

    def visit(self, fn, /):
        """
        Call fn for every flag set on the command line, in lexical order.
        """
        for name in sorted(self._actual):
            fn(self._actual[name])

    def visit_all(self, fn, /):
        for name in sorted(self._bindings):
            fn(self._bindings[name])

    def parse(self, arguments, /):
        self._parsed = True
        self._args = list(arguments)
        while self._parse_one():
            pass

    def _fail(self, fault, /):
        if self.output is not None:
            self.output.write(str(fault) + "\n")
        raise fault

    def _parse_one(self):
        if not self._args:
            return False

        token = self._args[0]
        if len(token) < 2 or token[0] != "-":
            return False

        dashes = 1
        if token[1] == "-":
            dashes += 1
            if len(token) == 2:
                # "--" terminates the flags
                self._args.pop(0)
                return False

        name = token[dashes:]
        if not name or name[0] in "-=":
            self._fail(BadFlagSyntaxError("bad flag syntax: %s" % token, token=token))

        self._args.pop(0)
        name, separator, value = name.partition("=")
        inline = bool(separator)

        if (binding := self._bindings.get(name)) is None:
            if name in ("help", "h"):
                raise HelpRequested("flag: help requested")
            self._fail(UnknownFlagError(
                "flag provided but not defined: -%s" % name,
                flag=name,
                hint="run the command with -help to see the accepted flags",
            ))

        if binding.is_bool:
            if not inline:
                value = "true"
            try:
                binding.set(value)
            except ValueError as e:
                self._fail(InvalidValueError(
                    'invalid boolean value "%s" for -%s: %s' % (value, name, e),
                    flag=name,
                    value=value,
                ))
        else:
            if not inline:
                if not self._args:
                    self._fail(MissingValueError("flag needs an argument: -%s" % name, flag=name))
                value = self._args.pop(0)
            try:
                binding.set(value)
            except ValueError as e:
                self._fail(InvalidValueError(
                    'invalid value "%s" for flag -%s: %s' % (value, name, e),
                    flag=name,
                    value=value,
                ))

        logger.debug("flag -%s set from the command line", name)
        self._actual[name] = binding
        return True


__all__ = (
    "Parser",
)
