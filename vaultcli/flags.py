"""
Grouped flag sets: option groups sharing one parsing pass.

Overview
- FlagSet: a named option group ("HTTP Options"). It holds its bindings in
  registration order and never parses; once attached to a FlagSets, every
  binding it receives is registered into the FlagSets' parser.
- FlagSets: the grouped parser. It owns
  • the single Parser every group registers into,
  • the ordered groups (registration order is help order),
  • the hidden-name set,
  • the merged completion table keyed by "-name",
  • the diagnostic channel forwarding parser errors to Ui.error.

Registration (per binding, in order)
1. seed the target from the binding's environment variable or default;
2. register the binding with the parser (duplicates are rejected);
3. record the completion predictor under "-name";
4. keep the usage for help rendering.

Help layout
    HTTP Options:

      -address=<string>
          Address of the Vault server.

Names are indented by 2 spaces, usage text is wrapped at MAX_LINE_LENGTH
columns including its 6-space indent.
"""
import io
import os
from types import MappingProxyType

from .bindings import *
from .diagnostics import DiagnosticChannel
from .faults import DuplicateFlagError
from .parser import Parser
from .utils import MAX_LINE_LENGTH, normalize, wrap_at_length

# Indentation of usage text below a flag name.
USAGE_INDENT = 6


def _print_flag_title(out, title, /):
    out.write("%s\n\n" % title)


def _print_flag_detail(out, binding, /):
    example = binding.example() if isinstance(binding, Example) else ""

    if example:
        out.write("  -%s=<%s>\n" % (binding.name, example))
    else:
        out.write("  -%s\n" % binding.name)

    out.write("%s\n\n" % wrap_at_length(normalize(binding.usage), USAGE_INDENT))


class FlagSet:
    """
    A named group of bindings shown together in help.
    """

    def __init__(self, name, /):
        if not isinstance(name, str) or not name.strip():
            raise TypeError("FlagSet() name must be a non-empty string")
        self._name = name
        self._bindings = []
        self._owner = None

    @property
    def name(self):
        return self._name

    @property
    def bindings(self):
        return tuple(self._bindings)

    def _attach(self, owner, /):
        if self._owner is not None:
            raise ValueError("flag set %r already belongs to a parser" % self._name)
        # all or nothing: a rejected group leaves no binding behind
        names = set()
        for binding in self._bindings:
            if binding.name in names:
                raise DuplicateFlagError(
                    "flag redefined: -%s" % binding.name,
                    flag=binding.name,
                    hint="give every option a unique name across all option groups",
                )
            owner._check(binding)
            names.add(binding.name)
        for binding in self._bindings:
            owner._register(binding)
        self._owner = owner

    def var(self, binding, /):
        """
        Add a binding to this group, registering it when the group is attached.
        """
        if not isinstance(binding, Binding):
            raise TypeError("var() argument must be a binding")
        if self._owner is not None:
            self._owner._register(binding)
        self._bindings.append(binding)
        return binding

    def string_var(self, *args, **kwargs):
        return self.var(StringVar(*args, **kwargs))

    def bool_var(self, *args, **kwargs):
        return self.var(BoolVar(*args, **kwargs))

    def int_var(self, *args, **kwargs):
        return self.var(IntVar(*args, **kwargs))

    def duration_var(self, *args, **kwargs):
        return self.var(DurationVar(*args, **kwargs))

    def string_slice_var(self, *args, **kwargs):
        return self.var(StringSliceVar(*args, **kwargs))

    def string_map_var(self, *args, **kwargs):
        return self.var(StringMapVar(*args, **kwargs))

    def visit(self, fn, /):
        """
        Call fn for each binding of this group set on the command line.
        """
        for binding in self._bindings:
            if self._owner is not None and self._owner.is_set(binding.name):
                fn(binding)

    def visit_all(self, fn, /):
        for binding in self._bindings:
            fn(binding)

    def __repr__(self):
        return "FlagSet(%r, %s)" % (self._name, [binding.name for binding in self._bindings])


class FlagSets:
    """
    The grouped parser: every group's bindings feed one Parser.

    Parameters
    - ui: receives parser diagnostics through its error() method.
    - environ: mapping consulted when seeding bindings (os.environ by default).
    """

    def __init__(self, ui, /, environ=None):
        self._flag_sets = []
        self._hiddens = set()
        self._completions = {}
        self._environ = os.environ if environ is None else environ
        self._channel = DiagnosticChannel(ui.error)
        self._parser = Parser(output=self._channel)

    def new_flag_set(self, name, /):
        flag_set = FlagSet(name)
        self.add_flag_set(flag_set)
        return flag_set

    def add_flag_set(self, flag_set, /):
        if not isinstance(flag_set, FlagSet):
            raise TypeError("add_flag_set() argument must be a FlagSet")
        flag_set._attach(self)
        self._flag_sets.append(flag_set)

    @property
    def flag_sets(self):
        return tuple(self._flag_sets)

    def _check(self, binding, /):
        self._parser.check(binding)

    def _register(self, binding, /):
        self._parser.check(binding)
        binding.seed(self._environ)
        self._parser.register(binding)
        self._completions["-" + binding.name] = binding.completion
        if binding.hidden:
            self.hide_flag(binding.name)

    def completions(self):
        return MappingProxyType(self._completions)

    def parse(self, arguments, /):
        """
        Parse arguments against every registered binding.

        Diagnostics are flushed to the UI before this returns or raises.
        """
        try:
            self._parser.parse(arguments)
        finally:
            self._channel.flush()

    def args(self):
        return self._parser.args()

    def is_set(self, name, /):
        return self._parser.is_set(name)

    def visit(self, fn, /):
        self._parser.visit(fn)

    def hide_flag(self, name, /):
        """
        Exclude a flag from help while keeping it parseable.
        """
        self._hiddens.add(name)

    def hidden_flag(self, name, /):
        return name in self._hiddens

    def help(self):
        """
        Render help grouped by flag set, skipping hidden flags.
        """
        out = io.StringIO()

        for flag_set in self._flag_sets:
            _print_flag_title(out, flag_set.name + ":")
            for binding in flag_set.bindings:
                if self.hidden_flag(binding.name):
                    continue
                _print_flag_detail(out, binding)

        return out.getvalue().rstrip("\n")

    def close(self):
        self._channel.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


__all__ = (
    "FlagSet",
    "FlagSets",
    "MAX_LINE_LENGTH",
    "USAGE_INDENT",
)
