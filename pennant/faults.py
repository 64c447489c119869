"""
Pennant faults (errors and warnings), error policies and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- ErrorPolicy: what a flag set does when parsing fails (return, exit, abort).
- FlagException / FlagWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting the policy).
- getdoc(): optional description lookup for a code from the host application.

Two families of errors
- Definition faults (duplicate identifiers, unsupported defaults, bad names)
  are coding defects. They are raised on the spot and never go through a policy.
- Parse faults (unknown flag, malformed token or value, missing value, help)
  are user input problems. They are surfaced through trigger() and the flag
  set's ErrorPolicy decides their fate.

Integration
- FlagSet.trigger(fault, **ctx) injects the flag set and its policy, then calls trigger().
- Under ErrorPolicy.EXIT faults are rendered via rich on the flag set's output console.
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - parsing (111xx)
      • MALFORMED_TOKEN, UNKNOWN_FLAG, MISSING_VALUE, MALFORMED_VALUE, HELP_REQUESTED
    - definition (112xx)
      • DUPLICATED_FLAG, UNSUPPORTED_TYPE, INVALID_NAME
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE

    codes are discoverable (searchable in logs and docs) and normalized to a string
    via normalize() so hosts can remap them if desired.
    """
    # --- parsing errors (111xx) ---
    MALFORMED_TOKEN             = 11111
    UNKNOWN_FLAG                = 11112
    MISSING_VALUE               = 11117
    MALFORMED_VALUE             = 11126
    HELP_REQUESTED              = 11151

    # --- definition errors (112xx) ---
    DUPLICATED_FLAG             = 11211
    UNSUPPORTED_TYPE            = 11212
    INVALID_NAME                = 11213

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ErrorPolicy(IntEnum):
    """
    behavior of FlagSet.parse when parsing fails.

    - RETURN: parse() returns the fault to the caller.
    - EXIT: the fault and the usage text are written to the flag set's output,
      then the process exits with status 2 (status 0 for a help request).
    - ABORT: the fault is raised.
    """
    RETURN = 0
    EXIT   = 1
    ABORT  = 2


def _styles(palette):
    return defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))


def _assemble(fault, palette, title):
    styles = _styles(palette)
    colorful = fault.options.get("colorful", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    flagset = fault.options.get("flagset")
    prog = text(getattr(__import__("__main__"), "__prog__", getattr(flagset, "name", "")), styler("prog-name"))
    code = fault.options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if code else "", styler("code")),
        " | ",
        text(fault.options.get("title", "").title(), styler(title)),
        " ]"
    )
    message = text(fault.message, styler(title.replace("title", "message")))
    if not fault.options.get("hint"):
        return Group(header, message)
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options["hint"], styler("hint")))
    return Group(header, message, hint)


class FlagException(Exception):
    status = 2

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _assemble(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title")

    def __trigger__(self):
        match self.options.get("policy", ErrorPolicy.ABORT):
            case ErrorPolicy.RETURN:
                return self
            case ErrorPolicy.EXIT:
                flagset = self.options["flagset"]
                flagset.console.print(self)
                flagset.usage()
                sys.exit(self.status)
            case _:
                raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedTokenError(FlagException): ...
class UnknownFlagError(FlagException): ...
class MissingValueError(FlagException): ...
class MalformedValueError(FlagException): ...


class HelpRequestedError(FlagException):
    status = 0

    def __trigger__(self):
        # usage was already written by the parser
        if self.options.get("policy", ErrorPolicy.ABORT) is ErrorPolicy.EXIT:
            sys.exit(self.status)
        return super().__trigger__()


class DuplicateFlagError(FlagException, ValueError): ...
class UnsupportedTypeError(FlagException, TypeError): ...
class InvalidNameError(FlagException, ValueError): ...


class FlagWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _assemble(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title")

    def __trigger__(self):
        if self.options.get("policy") is not ErrorPolicy.EXIT:
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options["flagset"].console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(FlagWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - the result of __trigger__ is returned (the fault itself under ErrorPolicy.RETURN).

    typical options
    - flagset, policy, colorful, title, code, hint, docs, and any other context
      the reporter may want to show (e.g., input/index/suggestions).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ErrorPolicy",
    "FlagException",
    "MalformedTokenError",
    "UnknownFlagError",
    "MissingValueError",
    "MalformedValueError",
    "HelpRequestedError",
    "DuplicateFlagError",
    "UnsupportedTypeError",
    "InvalidNameError",
    "FlagWarning",
    "EmptyValueWarning",
    "trigger",
    "getdoc",
)
