r"""
Pennant values: kinds, codecs and bound destinations.

Overview
- Kind
  • Closed tag over the supported primitive kinds (bool, string, signed and
    unsigned integers of word and 64-bit width, float64, duration) plus one
    open kind (VALUE) for user types implementing the value protocol.

- Value protocol (SupportsValue)
  • __str__(self) -> str: textual encoding (shown as default, used by visitors).
  • __parse__(self, token, /): decode a token and mutate self; raise ValueError
    (or TypeError) when the token is not acceptable.
  • __boolean__(self) -> bool (optional): when true, the flag behaves like a
    boolean switch (a bare marker passes "true" and no value token is consumed).

- Codecs
  • decode(kind, token) / encode(kind, value): textual rules per primitive kind.
  • Integers accept base prefixes (0x, 0o, 0b, legacy leading 0 for octal) and
    underscores, and are range-checked against their width.
  • Durations follow the "1h2m3.5s" notation (ns, us, µs, ms, s, m, h) and are
    materialized as datetime.timedelta (microsecond resolution, nanoseconds round).

- Destination[_T]
  • The typed storage cell a flag writes into. define() hands it out; callers
    read destination.value after parsing.

- infer(value, kind=Unset)
  • Resolve the Kind of a default value, or validate an explicit kind against it.

Notes
- A word is 64 bits wide (INT has the range of INT64, UINT of UINT64).
- Decoding never accepts surrounding whitespace or non-ASCII digits.
"""
import copy
import re
from datetime import timedelta
from enum import StrEnum
from fractions import Fraction

from .faults import FaultCode, UnsupportedTypeError
from .utils import Unset


class Kind(StrEnum):
    BOOL     = "bool"
    STRING   = "string"
    INT      = "int"
    INT64    = "int64"
    UINT     = "uint"
    UINT64   = "uint64"
    FLOAT    = "float64"
    DURATION = "duration"
    VALUE    = "value"


_BOOLEANS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}

_BOUNDS = {
    Kind.INT: (-(1 << 63), (1 << 63) - 1),
    Kind.INT64: (-(1 << 63), (1 << 63) - 1),
    Kind.UINT: (0, (1 << 64) - 1),
    Kind.UINT64: (0, (1 << 64) - 1),
}

# nanoseconds per unit; "ms" must be tried before "m" and "s"
_UNITS = {
    "ns": 1,
    "us": 10 ** 3,
    "µs": 10 ** 3,  # U+00B5 micro sign
    "μs": 10 ** 3,  # U+03BC greek small letter mu
    "ms": 10 ** 6,
    "s": 10 ** 9,
    "m": 60 * 10 ** 9,
    "h": 3600 * 10 ** 9,
}

_SEGMENT = r"([0-9]+\.?[0-9]*|\.[0-9]+)(%s)" % "|".join(map(re.escape, _UNITS))


def _parse_bool(token):
    try:
        return _BOOLEANS[token]
    except KeyError:
        raise ValueError("invalid syntax") from None


def _parse_integer(kind, token):
    low, high = _BOUNDS[kind]
    if not token or not token.isascii() or token != token.strip() or (low == 0 and token[0] in "+-"):
        raise ValueError("invalid syntax")
    try:
        if match := re.fullmatch(r"([+-]?)0([0-7_]+)", token):
            value = int(match[1] + "0o" + match[2], 0)
        else:
            value = int(token, 0)
    except ValueError:
        raise ValueError("invalid syntax") from None
    if not low <= value <= high:
        raise ValueError("value out of range")
    return value


def _parse_float(token):
    if not token.isascii() or token != token.strip():
        raise ValueError("invalid syntax")
    try:
        return float(token)
    except ValueError:
        raise ValueError("invalid syntax") from None


def _parse_duration(token):
    source = token
    sign = -1 if token[:1] == "-" else 1
    token = token[1:] if token[:1] in ("-", "+") else token
    if token == "0":
        return timedelta(0)
    if not token or not re.fullmatch("(?:%s)+" % _SEGMENT, token):
        raise ValueError("invalid duration %r" % source)
    nanoseconds = sum(Fraction(number) * _UNITS[unit] for number, unit in re.findall(_SEGMENT, token))
    try:
        return timedelta(microseconds=sign * round(nanoseconds / 1000))
    except OverflowError:
        raise ValueError("duration %r out of range" % source) from None


def _decimal(value, scale):
    whole, fraction = divmod(value, scale)
    digits = str(fraction).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return "%d.%s" % (whole, digits) if digits else str(whole)


def _format_duration(value):
    nanoseconds = ((value.days * 86400 + value.seconds) * 10 ** 6 + value.microseconds) * 1000
    if not nanoseconds:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    nanoseconds = abs(nanoseconds)
    if nanoseconds < 10 ** 9:
        if nanoseconds < 10 ** 3:
            return "%s%dns" % (sign, nanoseconds)
        if nanoseconds < 10 ** 6:
            return sign + _decimal(nanoseconds, 10 ** 3) + "µs"
        return sign + _decimal(nanoseconds, 10 ** 6) + "ms"
    hours, rest = divmod(nanoseconds, _UNITS["h"])
    minutes, rest = divmod(rest, _UNITS["m"])
    result = sign
    if hours:
        result += "%dh" % hours
    if hours or minutes:
        result += "%dm" % minutes
    return result + _decimal(rest, 10 ** 9) + "s"


def decode(kind, token, /):
    """
    decode a textual token according to a primitive kind.

    raises
    - ValueError when the token does not satisfy the kind's syntax or range.
    - TypeError for Kind.VALUE (custom values decode themselves).
    """
    match Kind(kind):
        case Kind.BOOL:
            return _parse_bool(token)
        case Kind.STRING:
            return token
        case Kind.INT | Kind.INT64 | Kind.UINT | Kind.UINT64 as kind:
            return _parse_integer(kind, token)
        case Kind.FLOAT:
            return _parse_float(token)
        case Kind.DURATION:
            return _parse_duration(token)
        case _:
            raise TypeError("decode() does not handle custom values")


def encode(kind, value, /):
    """
    encode a value into its textual form according to its kind.
    """
    match Kind(kind):
        case Kind.BOOL:
            return "true" if value else "false"
        case Kind.DURATION:
            return _format_duration(value)
        case _:
            return str(value)


def infer(value, kind=Unset, /):
    """
    resolve (or validate) the kind of a default value.

    resolution (kind is Unset)
    - bool → BOOL, str → STRING, int → INT, float → FLOAT, timedelta → DURATION,
      any object with a callable __parse__ → VALUE.

    validation (explicit kind)
    - the default must be an instance of the kind's Python type; integer kinds
      must be in range (unsigned kinds reject negatives); FLOAT also accepts int.

    raises
    - UnsupportedTypeError for anything else (a coding defect, raised on the spot).
    """
    def unsupported(message):
        return UnsupportedTypeError(
            message,
            title="unsupported flag type",
            code=FaultCode.UNSUPPORTED_TYPE,
            hint="use bool, str, int, float, timedelta or a type implementing __parse__ and __str__",
            value=value,
        )

    if kind is Unset:
        match value:
            case bool():
                return Kind.BOOL
            case str():
                return Kind.STRING
            case int():
                return Kind.INT
            case float():
                return Kind.FLOAT
            case timedelta():
                return Kind.DURATION
            case _ if callable(getattr(value, "__parse__", None)):
                return Kind.VALUE
        raise unsupported("flag default of type %r is not supported" % type(value).__name__)

    try:
        kind = Kind(kind)
    except ValueError:
        raise unsupported("unknown flag kind %r" % (kind,)) from None

    match kind:
        case Kind.BOOL:
            compatible = isinstance(value, bool)
        case Kind.STRING:
            compatible = isinstance(value, str)
        case Kind.INT | Kind.INT64 | Kind.UINT | Kind.UINT64:
            compatible = isinstance(value, int) and not isinstance(value, bool)
            if compatible and not _BOUNDS[kind][0] <= value <= _BOUNDS[kind][1]:
                raise unsupported("flag default %r is out of range for %s" % (value, kind))
        case Kind.FLOAT:
            compatible = isinstance(value, int | float) and not isinstance(value, bool)
        case Kind.DURATION:
            compatible = isinstance(value, timedelta)
        case _:
            compatible = callable(getattr(value, "__parse__", None))

    if not compatible:
        raise unsupported("flag default of type %r does not fit kind %s" % (type(value).__name__, kind))
    return kind


class Destination[_T]:
    """
    typed storage cell bound to one flag (shared by its long name and shorthand).

    attributes
    - kind: Kind tag selecting the codec.
    - value: current value; parsing writes here, callers read here.
    - default: value the cell was seeded with.
    - boolean: True when a bare marker sets the flag (no value token consumed).

    custom values (Kind.VALUE) are shallow-copied on construction, so the cell
    owns its storage and the caller's default object is left untouched.
    """
    __slots__ = ("_kind", "_value", "_default")

    def __init__(self, kind, value, /):
        self._kind = Kind(kind)
        if self._kind is Kind.FLOAT:
            value = float(value)
        self._default = value
        self._value = copy.copy(value) if self._kind is Kind.VALUE else value

    @property
    def kind(self):
        return self._kind

    @property
    def default(self):
        return self._default

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value

    @property
    def boolean(self):
        if self._kind is Kind.VALUE:
            check = getattr(self._value, "__boolean__", None)
            return bool(check()) if callable(check) else False
        return self._kind is Kind.BOOL

    def __parse__(self, token, /):
        """
        decode token and store it; ValueError/TypeError propagate untouched.
        """
        if self._kind is Kind.VALUE:
            self._value.__parse__(token)
        else:
            self._value = decode(self._kind, token)

    def __str__(self):
        return encode(self._kind, self._value)

    def __repr__(self):
        return "%s(kind=%s, value=%r)" % (type(self).__name__, self._kind, self._value)

    def __rich_repr__(self):
        yield "kind", self._kind
        yield "value", self._value
        yield "default", self._default


__all__ = (
    "Kind",
    "Destination",
    "decode",
    "encode",
    "infer",
)
