"""
Top-level facade: the default flag set and its convenience entry points.

This module owns one FlagSets context (flagsets) and the default flag set
(CommandLine) registered in it with ErrorPolicy.EXIT. The default set is named
after __prog__ in __main__ when defined, otherwise after sys.argv[0].

    from pennant import flag, parse, args

    n = flag("n", "", 1234, "help message for flag `n`")
    names = flag("names", "s", Names(), "comma separated `names`")
    parse()
    print(n.value, names.value, args())

Sub flag sets created with flagset() join the same context, so parse() routes
"tool sub -x" to the set named "sub".
"""
import os.path
import sys

from .faults import ErrorPolicy
from .flags import FlagSets
from .utils import Unset, coalesce

flagsets = FlagSets()

CommandLine = flagsets.flagset(
    getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) if sys.argv else ""),
    ErrorPolicy.EXIT,
)


def flag(name, shorthand, value, usage, /, *, kind=Unset):
    """define a flag on CommandLine; see FlagSet.define."""
    return CommandLine.define(name, shorthand, value, usage, kind=kind)


def setflag(flagset, name, shorthand, value, usage, /, *, kind=Unset):
    """define a flag on the given flag set; see FlagSet.define."""
    return flagset.define(name, shorthand, value, usage, kind=kind)


def flagset(name, policy=ErrorPolicy.RETURN, /, **options):
    """create a flag set registered in the facade's context (replacing any set with that name)."""
    return flagsets.flagset(name, policy, **options)


def parse(tokens=Unset, /):
    """parse tokens (sys.argv[1:] by default) into CommandLine or the set named by the first token."""
    return flagsets.parse(CommandLine, coalesce(tokens, sys.argv[1:]))


def args():
    """positional arguments of CommandLine."""
    return CommandLine.args()


def usage():
    """write the usage text of CommandLine to its output."""
    CommandLine.usage()


__all__ = (
    "flagsets",
    "CommandLine",
    "flag",
    "setflag",
    "flagset",
    "parse",
    "args",
    "usage",
)
