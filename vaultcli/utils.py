"""
vaultcli utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the bindings, the parser and the client
  bootstrap so they agree on text and value semantics.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving legitimate falsey values.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr).

- Ref(owner, name)
  • A storage cell pointing at an attribute of another object; bindings write
    parsed values through it.

- normalize(text) / wrap(text, limit) / wrap_at_length(text, pad)
  • Help text shaping: whitespace collapsing and minimal-raggedness wrapping.

- parse_duration(text) / format_duration(delta) / parse_bool(text)
  • Value codecs shared by flag values and environment reading.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> format_duration(parse_duration("90s"))
    '1m30s'
"""
import builtins
import datetime
import functools
import re
from typing import final

# Maximum width of any help line.
MAX_LINE_LENGTH = 78

# Penalty applied to lines that overflow the wrapping limit.
_OVERFLOW_PENALTY = 100000

_WHITESPACE = re.compile(r"\s+")

_DURATION = re.compile(r"(?P<number>\d+(\.\d*)?|\.\d+)(?P<unit>ns|us|µs|ms|s|m|h)")

# Microseconds per duration unit.
_UNITS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for “not provided”; see UnsetType.
"""


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Containers are copied on the way out so callers cannot mutate the backing
    state through the public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, list | dict | set):
            return type(value)(value)
        return value

    return property(getter)


class Ref:
    """
    A mutable storage cell that lives on another object.

    Bindings never own their values: they write through a Ref into an
    attribute of the command that declared them, so the command reads plain
    attributes after parsing.

        >>> ref = Ref(command, "flag_address")
        >>> ref.set("https://vault:8200")
        >>> command.flag_address
        'https://vault:8200'
    """

    __slots__ = ("owner", "name")

    def __init__(self, owner, name, /):
        if not isinstance(name, str) or not name:
            raise TypeError("Ref() name must be a non-empty string")
        self.owner = owner
        self.name = name

    def get(self, default=Unset, /):
        if default is Unset:
            return getattr(self.owner, self.name)
        return getattr(self.owner, self.name, default)

    def set(self, value, /):
        setattr(self.owner, self.name, value)

    def __repr__(self):
        return "Ref(%s.%s)" % (type(self.owner).__name__, self.name)


def normalize(text, /):
    """
    Collapse every run of whitespace into a single space.
    """
    return _WHITESPACE.sub(" ", text)


def wrap(text, limit, /):
    """
    Wrap text into lines of at most ``limit`` columns with minimal raggedness.

    Words are whitespace-separated and never broken. The chosen breaks
    minimize the sum of the squared unused space of every line except the
    last one. A line may only overflow when it holds a word wider than the
    limit; every overflowing line pays a large penalty, which keeps their
    number low but still lets short neighbouring words join them.
    """
    words = text.split()
    count = len(words)
    if not count:
        return ""

    # lengths[i][j]: width of words[i..j] joined by single spaces
    lengths = [[0] * count for _ in range(count)]
    for i in range(count):
        lengths[i][i] = len(words[i])
        for j in range(i + 1, count):
            lengths[i][j] = lengths[i][j - 1] + 1 + len(words[j])

    breaks = [0] * count
    costs = [2 ** 31 - 1] * count
    for i in reversed(range(count)):
        if lengths[i][count - 1] <= limit or i == count - 1:
            costs[i] = 0
            breaks[i] = count
            continue
        for j in range(i + 1, count):
            unused = limit - lengths[i][j - 1]
            cost = unused * unused + costs[j]
            if lengths[i][j - 1] > limit:
                cost += _OVERFLOW_PENALTY
            if cost < costs[i]:
                costs[i] = cost
                breaks[i] = j

    lines = []
    index = 0
    while index < count:
        lines.append(" ".join(words[index:breaks[index]]))
        index = breaks[index]
    return "\n".join(lines)


def wrap_at_length(text, pad, /):
    """
    Wrap text at MAX_LINE_LENGTH, left-padding every line by ``pad`` spaces.
    """
    lines = wrap(text, MAX_LINE_LENGTH - pad).split("\n")
    return "\n".join(" " * pad + line for line in lines)


def parse_duration(text, /):
    """
    Parse a duration such as "30s", "5m", "1h30m" or "1.5h" into a timedelta.

    A bare integer is read as a number of seconds; every other value needs a
    unit suffix. Raises ValueError on anything else.
    """
    if not isinstance(text, str):
        raise TypeError("parse_duration() argument must be a string")

    source = text
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    # bare integers are seconds
    if text.isdigit():
        return datetime.timedelta(seconds=int(text)) * sign
    if not text:
        raise ValueError("invalid duration %r" % source)

    total = datetime.timedelta()
    position = 0
    while position < len(text):
        if not (match := _DURATION.match(text, position)):
            raise ValueError("invalid duration %r" % source)
        part = datetime.timedelta(microseconds=float(match["number"]) * _UNITS[match["unit"]])
        if not part and float(match["number"]):
            raise ValueError("duration %r is below microsecond resolution" % source)
        total += part
        position = match.end()

    return total * sign


def format_duration(delta, /):
    """
    Render a timedelta compactly as hours, minutes and seconds.

    Zero components are omitted, so 300 seconds renders as "5m" and 5400
    seconds as "1h30m". Sub-second parts render as decimal seconds ("1.5s",
    "0.000001s"). The zero duration renders as "0s".
    """
    if not isinstance(delta, datetime.timedelta):
        raise TypeError("format_duration() argument must be a timedelta")

    sign = "-" if delta < datetime.timedelta() else ""
    total = abs(delta)
    micros = total // datetime.timedelta(microseconds=1)
    if not micros:
        return "0s"

    hours, micros = divmod(micros, 3_600_000_000)
    minutes, micros = divmod(micros, 60_000_000)
    seconds, micros = divmod(micros, 1_000_000)

    parts = []
    if hours:
        parts.append("%dh" % hours)
    if minutes:
        parts.append("%dm" % minutes)
    if seconds or micros:
        parts.append(("%d.%06d" % (seconds, micros)).rstrip("0").rstrip(".") + "s")
    return sign + "".join(parts)


def parse_bool(text, /):
    """
    Parse the classic boolean spellings (1, t, true, 0, f, false, any case).
    """
    match text.strip().lower():
        case "1" | "t" | "true":
            return True
        case "0" | "f" | "false":
            return False
        case _:
            raise ValueError("invalid boolean %r" % text)



__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "normalize",
    "wrap",
    "wrap_at_length",
    "parse_duration",
    "format_duration",
    "parse_bool",

    # Types
    "UnsetType",
    "Ref",

    # Constants
    "Unset",
    "MAX_LINE_LENGTH",
)
