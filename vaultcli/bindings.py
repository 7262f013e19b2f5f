r"""
vaultcli option bindings.

Overview
- A binding describes one command-line option: its name, the storage cell it
  writes into, a static default, an optional environment variable, a
  completion predictor and free-text usage.
- Variants per value type share one contract:
  • StringVar: plain text.
  • BoolVar: presence flag; accepts a bare "-name" or "-name=<bool>".
  • DurationVar: "<number><unit>" durations, stored as timedelta.
  • IntVar: base-10 integers.
  • StringSliceVar: repeatable, comma-separated values, stored as a list.
  • StringMapVar: repeatable "key=value" pairs, stored as a dict.

Lifecycle
- seed(environ): writes the effective default (environment value when the
  variable is set and valid, static default otherwise) into the target.
- set(text): converts one command-line value and writes it; conversion
  failures raise ValueError and leave the target untouched.

Capabilities
- Example: bindings that can describe their value placeholder for help
  ("-address=<string>") inherit from Example and implement example().
  Help rendering checks isinstance(binding, Example); nothing else is
  inferred from the binding's shape.

Quick example:
    >>> StringVar(
    ...     "address",
    ...     target=Ref(command, "flag_address"),
    ...     default="https://127.0.0.1:8200",
    ...     env_var="VAULT_ADDR",
    ...     completion=PredictAnything,
    ...     usage="Address of the Vault server.",
    ... )
"""
import datetime
import functools
import logging
import operator
import re
from abc import ABC, ABCMeta, abstractmethod

from .completion import Predictor, PredictAnything
from .utils import *

logger = logging.getLogger(__name__)


class BindingType(ABCMeta):
    """
    Metaclass giving bindings a typename and stable representations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with
      hyphens), e.g. "string-var", and used in messages.
    - Every name listed in __introspectable__ is published as a read-only
      property mirroring the private "_name" field.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Example(ABC):
    """
    Capability: the binding can name a placeholder for its value in help.
    """

    @abstractmethod
    def example(self):
        ...


class Binding(metaclass=BindingType):
    """
    One named, typed command-line option.

    Parameters
    - name: str
      Flag name without dashes ("tls-skip-verify"); unique per parser.
    - target: Ref
      Storage cell that seeding and parsing write into.
    - default: Any
      Value used when neither the environment nor the command line set one.
    - env_var: str
      Environment variable consulted at registration; "" disables it.
    - completion: Predictor
      Suggestions for shell completion; never affects parsing.
    - usage: str
      Help text; whitespace is normalized when rendered.
    - hidden: bool
      When True, the owning parser hides the flag from help.
    """

    __introspectable__ = (
        "name",
        "target",
        "default",
        "env_var",
        "completion",
        "usage",
        "hidden",
    )

    is_bool = False

    def __init__(
            self,
            name,
            /,
            target,
            default=Unset,
            env_var="",
            completion=PredictAnything,
            usage="",
            *,
            hidden=False
    ):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[^\W_](-?[^\W_]+)*", name := name.strip()):
            raise ValueError(f"{type(self).__typename__} 'name' must be a valid flag name")
        if not isinstance(target, Ref):
            raise TypeError(f"{type(self).__typename__} 'target' must be a Ref")
        if not isinstance(env_var, str):
            raise TypeError(f"{type(self).__typename__} 'env_var' must be a string")
        if not isinstance(completion, Predictor):
            raise TypeError(f"{type(self).__typename__} 'completion' must be a predictor")
        if not isinstance(usage, str):
            raise TypeError(f"{type(self).__typename__} 'usage' must be a string")

        self._name = name
        self._target = target
        self._default = self.coerce(coalesce(default, self.zero()))
        self._env_var = env_var
        self._completion = completion
        self._usage = usage
        self._hidden = bool(hidden)

    def zero(self):
        """
        Value of an unset binding when no default is given.
        """
        return ""

    def coerce(self, value):
        """
        Normalize a Python default value into the stored representation.
        """
        return value

    @abstractmethod
    def convert(self, text):
        """
        Convert command-line or environment text; raise ValueError on failure.
        """

    def seed(self, environ):
        """
        Write the effective default into the target.

        The environment value wins over the static default when the variable
        is set; a value that does not convert is ignored with a warning.
        """
        value = self.default
        if self.env_var and (text := environ.get(self.env_var)) is not None:
            try:
                value = self.convert(text)
            except ValueError as e:
                logger.warning("ignoring %s for -%s: %s", self.env_var, self.name, e)
            else:
                logger.debug("-%s seeded from %s", self.name, self.env_var)
        self.target.set(value)

    def set(self, text):
        self.target.set(self.convert(text))

    def value(self):
        return self.target.get()

    def text(self):
        return str(self.value())


class StringVar(Binding, Example):
    def convert(self, text):
        return text

    def example(self):
        return "string"


class BoolVar(Binding):
    is_bool = True

    def zero(self):
        return False

    def coerce(self, value):
        return bool(value)

    def convert(self, text):
        return parse_bool(text)

    def text(self):
        return "true" if self.value() else "false"


class IntVar(Binding, Example):
    def zero(self):
        return 0

    def coerce(self, value):
        return int(value)

    def convert(self, text):
        return int(text, 10)

    def example(self):
        return "int"


class DurationVar(Binding, Example):
    """
    Duration option stored as a timedelta.

    Defaults may be given as a timedelta or as a number of seconds.
    """

    def zero(self):
        return datetime.timedelta()

    def coerce(self, value):
        if isinstance(value, datetime.timedelta):
            return value
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError(f"{type(self).__typename__} 'default' must be a timedelta or a number of seconds")
        return datetime.timedelta(seconds=value)

    def convert(self, text):
        return parse_duration(text.strip())

    def text(self):
        return format_duration(self.value())

    def example(self):
        return "duration"


class StringSliceVar(Binding, Example):
    """
    Repeatable option collecting a list of strings.

    Each occurrence may carry several comma-separated values. The first
    command-line occurrence replaces the effective default; later ones append.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._changed = False

    def zero(self):
        return []

    def coerce(self, value):
        return list(value)

    def convert(self, text):
        return [item.strip() for item in text.split(",") if item.strip()]

    def seed(self, environ):
        super().seed(environ)
        self._changed = False

    def set(self, text):
        values = self.convert(text)
        if self._changed:
            values = self.value() + values
        self.target.set(values)
        self._changed = True

    def text(self):
        return ",".join(self.value())

    def example(self):
        return "string"


class StringMapVar(Binding, Example):
    """
    Repeatable "key=value" option collecting a dict.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._changed = False

    def zero(self):
        return {}

    def coerce(self, value):
        return dict(value)

    def convert(self, text):
        key, separator, value = text.partition("=")
        if not separator or not key.strip():
            raise ValueError("%r must be formatted as key=value" % text)
        return {key.strip(): value}

    def seed(self, environ):
        super().seed(environ)
        self._changed = False

    def set(self, text):
        values = self.convert(text)
        if self._changed:
            values = self.value() | values
        self.target.set(values)
        self._changed = True

    def text(self):
        return ",".join("%s=%s" % item for item in sorted(self.value().items()))

    def example(self):
        return "key=value"


__all__ = (
    "Binding",
    "Example",
    "StringVar",
    "BoolVar",
    "IntVar",
    "DurationVar",
    "StringSliceVar",
    "StringMapVar",
)
