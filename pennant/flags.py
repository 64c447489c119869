r"""
Pennant flag sets: define, parse and describe command-line flags.

What this module provides
- FlagSet: a named registry of flags. Each flag has a long name and/or a
  one-character shorthand bound to a typed Destination; the set parses token
  lists into those destinations and keeps the leftover positional arguments.
- FlagSets: an explicit registry of named flag sets (the dispatch context).
  When the first token names a registered set, parsing is routed to it.

Quick start
    from datetime import timedelta
    from pennant import FlagSet, ErrorPolicy

    flags = FlagSet("tool", ErrorPolicy.RETURN)
    verbose = flags.define("verbose", "v", False, "print more")
    retries = flags.define("retries", "r", 3, "retry `count`")
    timeout = flags.define("timeout", "", timedelta(seconds=5), "request `duration`")

    if fault := flags.parse(["-v", "--retries=5", "input.txt"]):
        ...  # RETURN policy hands the fault back
    print(verbose.value, retries.value, flags.args())  # True 5 ['input.txt']

Token grammar (one left-to-right pass)
- "--" ends flag processing. After it, tokens starting with '-' are still
  dropped, and so is the token following the marker of a non-boolean flag.
- "" and any token not starting with '-' are positional; a lone "-" is neither
  a flag nor a positional.
- "-name", "--name", "-name=value", "--name=value" are flag markers; one and two
  dashes are equivalent. Three dashes or an empty name are malformed.
- boolean flags are set by a bare marker and only take the inline form.
- other flags take the inline value or else the next token (even "-5").

Aliasing
- a long name and its shorthand share ONE Destination: a value parsed through
  "-v" is visible through the destination returned for "--verbose".

Threading
- flag sets are not synchronized. Define flags and create sets during startup,
  then parse once, from a single thread.
"""
import difflib
import re
import sys
from collections import deque
from collections.abc import Mapping

from rich.console import Console

from .faults import *
from .rendering import describe, render
from .utils import *
from .values import Destination, infer

_HELP = ("h", "help")


class FlagSet:
    """
    a named set of flags with its own error policy and output sink.

    parameters
    - name: str (positional-only), shown in the usage synopsis and used as the
      dispatch key when the set is registered in a FlagSets context.
    - policy: ErrorPolicy (positional-only), RETURN by default.
    - output: writable text stream for usage and fault rendering (stderr by default).
    - colorful: apply the usage/fault palette when the output is a terminal.
    - context: FlagSets to register this set into.

    identifiers are unique within a set; redefining one raises DuplicateFlagError.
    """

    name = mirror("name")
    policy = mirror("policy")
    descriptors = mirror("descriptors")
    colorful = mirror("colorful")
    parsed = mirror("parsed")

    def __init__(self, name="", policy=ErrorPolicy.RETURN, /, *, output=Unset, colorful=True, context=Unset):
        if not isinstance(name, str):
            raise TypeError("flag set name must be a string")
        self._name = name
        self._policy = ErrorPolicy(policy)
        self._output = coalesce(output, None)
        self._colorful = bool(colorful)
        self._bindings = {}
        self._descriptors = []
        self._actual = {}
        self._positionals = []
        self._parsed = False
        self._tokens = deque()
        self._index = 0
        if context is not Unset:
            context.register(self)

    def __repr__(self):
        return "%s(%r, %s)" % (type(self).__name__, self._name, self._policy.name)

    def __rich_repr__(self):
        yield self._name
        yield "policy", self._policy
        yield "flags", sorted(self._bindings)

    @property
    def output(self):
        """output sink; falls back to the current sys.stderr when unset."""
        return self._output if self._output is not None else sys.stderr

    @output.setter
    def output(self, output):
        self._output = output

    @property
    def console(self):
        """rich console writing verbatim to output (no markup, highlight, wrapping)."""
        return Console(
            file=self.output,
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
            no_color=not self._colorful,
        )

    # -- definition ---------------------------------------------------------

    def _validate(self, name, shorthand):
        def invalid(message, hint):
            return InvalidNameError(
                message,
                title="invalid flag name",
                code=FaultCode.INVALID_NAME,
                hint=hint,
                flagset=self,
                input=name or shorthand,
            )

        if not isinstance(name, str) or not isinstance(shorthand, str):
            raise invalid("flag name and shorthand must be strings", "pass \"\" to omit one of them")
        if not name and not shorthand:
            raise invalid("flag needs a name or a shorthand", "give the flag at least one identifier")
        if len(shorthand) > 1:
            raise invalid("shorthand %r is longer than one character" % shorthand, "use a single character")
        for identifier in filter(None, (name, shorthand)):
            if not re.fullmatch(r"[^\s=-][^\s=]*", identifier):
                raise invalid(
                    "bad flag name %r" % identifier,
                    "names must not start with '-' or contain '=' or whitespace",
                )
        for identifier in filter(None, (name, shorthand)):
            if identifier in self._bindings:
                raise DuplicateFlagError(
                    "flag redefined: %s" % identifier,
                    title="duplicated flag",
                    code=FaultCode.DUPLICATED_FLAG,
                    hint="every name and shorthand must be unique within %r" % self._name,
                    flagset=self,
                    input=identifier,
                )

    def define(self, name, shorthand, value, usage, /, *, kind=Unset):
        """
        define a flag and return its Destination.

        rules
        - shorthand equal to name is dropped.
        - the kind is inferred from value (see values.infer) unless kind= is given.
        - name and shorthand are both bound to the same Destination.
        - a None value defines no destination and returns None.
        - exactly one Descriptor is appended per call.

        raises (always, regardless of policy)
        - InvalidNameError, DuplicateFlagError, UnsupportedTypeError
        """
        if name == shorthand:
            shorthand = ""
        self._validate(name, shorthand)
        if not isinstance(usage, str):
            raise TypeError("flag usage must be a string")

        destination = None if value is None else Destination(infer(value, kind), value)
        self._descriptors.append(describe(name, shorthand, usage))
        if destination is None:
            return None

        for identifier in filter(None, (name, shorthand)):
            self._bindings[identifier] = destination
        return destination

    def lookup(self, identifier, /):
        """return the Destination bound to identifier, or None."""
        return self._bindings.get(identifier)

    def set(self, identifier, token, /):
        """
        assign token to a flag programmatically (marks it as set).

        raises UnknownFlagError or MalformedValueError directly; the policy does not apply.
        """
        destination = self._bindings.get(identifier)
        if destination is None:
            raise UnknownFlagError(
                "no such flag -%s" % identifier,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                flagset=self,
                input=identifier,
            )
        try:
            destination.__parse__(token)
        except (ValueError, TypeError) as exception:
            raise MalformedValueError(
                "invalid value %r for flag -%s: %s" % (token, identifier, exception),
                title="invalid value",
                code=FaultCode.MALFORMED_VALUE,
                flagset=self,
                input=identifier,
                value=token,
            ) from exception
        self._actual[identifier] = destination

    def visit(self, function, /):
        """call function(identifier, destination) for every flag set, in lexicographic order."""
        for identifier in sorted(self._actual):
            function(identifier, self._actual[identifier])

    def visitall(self, function, /):
        """call function(identifier, destination) for every defined flag, in lexicographic order."""
        for identifier in sorted(self._bindings):
            function(identifier, self._bindings[identifier])

    def nflag(self):
        return len(self._actual)

    # -- positionals ---------------------------------------------------------

    def args(self):
        """positional arguments left after parsing, in their original order."""
        return list(self._positionals)

    def narg(self):
        return len(self._positionals)

    def arg(self, index, /):
        """the index-th positional argument, or "" when out of range."""
        if 0 <= index < len(self._positionals):
            return self._positionals[index]
        return ""

    # -- usage ---------------------------------------------------------------

    def styles(self):
        """
        the usage palette, overridable through __styles__ in __main__.

        palette keys
        - usage-label, program-name, flag-name, hint, flag-usage
        """
        return {
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "flag-name": "bold #22C55E",  # GREEN for flags
            "hint": "bold #FFD600",  # AMBER for value hints
            "flag-usage": "#9CA3AF",  # Muted gray
        } | getattr(__import__("__main__"), "__styles__", {})

    def render(self):
        """the usage text as a rich Text (styled when colorful)."""
        return render(self._name, self._descriptors, styles=self.styles() if self._colorful else None)

    def usage(self):
        """write the usage text to output (verbatim plain text unless output is a terminal)."""
        console = self.console
        if console.is_terminal:
            console.print(self.render(), end="")
        else:
            self.output.write(self.render().plain)

    # -- parsing -------------------------------------------------------------

    def trigger(self, fault, /, **options):
        """surface a fault under this set's policy; returns the fault under RETURN."""
        return trigger(fault, **options, flagset=self, policy=self._policy, colorful=self._colorful)

    def _resolve(self, token):
        """
        parse one flag marker (and its value); return a fault or None.

        shape: -{1,2}<name>[=<value>] where name does not start with '-' or '='.
        """
        match = re.fullmatch(r"(?P<dashes>--?)(?P<input>[^-=][^=]*)(=(?P<value>.*))?", token, re.DOTALL)

        if not match:
            return self.trigger(MalformedTokenError(
                "bad flag syntax: %s" % token,
                title="malformed flag",
                code=FaultCode.MALFORMED_TOKEN,
                hint="flags look like -name, --name, -name=value or --name=value",
                token=token,
                index=self._index,
                docs=getdoc(FaultCode.MALFORMED_TOKEN),
            ))

        input = match["input"]
        value = match["value"]  # None without '=', '' for 'name='

        try:
            destination = self._bindings[input]
        except KeyError:
            if input in _HELP:
                self.usage()
                return self.trigger(HelpRequestedError(
                    "help requested",
                    title="help requested",
                    code=FaultCode.HELP_REQUESTED,
                    input=input,
                    index=self._index,
                ))
            suggestions = difflib.get_close_matches(input, self._bindings.keys(), 5)
            try:
                hint = "did you mean %r? you can also run '%s -help' to see all flags" % (suggestions[0], self._name)
            except IndexError:
                hint = "try '%s -help' to see all flags" % self._name
            return self.trigger(UnknownFlagError(
                "flag provided but not defined: %s%s" % (match["dashes"], input),
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint=hint,
                input=input,
                index=self._index,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_FLAG),
            ))

        if destination.boolean:
            value = "true" if value is None else value
        elif value is None:
            if not self._tokens:
                return self.trigger(MissingValueError(
                    "flag needs an argument: %s%s" % (match["dashes"], input),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass a value after the flag (for example: %s%s=<value>)" % (match["dashes"], input),
                    input=input,
                    index=self._index,
                    docs=getdoc(FaultCode.MISSING_VALUE),
                ))
            value = self._tokens.popleft()
            self._index += 1
        elif not value:
            self.trigger(EmptyValueWarning(
                "empty inline value for flag %s%s" % (match["dashes"], input),
                title="empty inline value",
                code=FaultCode.EMPTY_INLINE_VALUE,
                hint="add a value after '=' (for example: %s%s=<value>)" % (match["dashes"], input),
                input=input,
                index=self._index,
                docs=getdoc(FaultCode.EMPTY_INLINE_VALUE),
            ))

        try:
            destination.__parse__(value)
        except (ValueError, TypeError) as exception:
            return self.trigger(MalformedValueError(
                "invalid value %r for flag %s%s: %s" % (value, match["dashes"], input, exception),
                title="invalid value",
                code=FaultCode.MALFORMED_VALUE,
                hint="check the expected form of %s%s in '%s -help'" % (match["dashes"], input, self._name),
                input=input,
                value=value,
                index=self._index,
                exception=exception,
                docs=getdoc(FaultCode.MALFORMED_VALUE),
            ))

        self._actual[input] = destination
        return None

    def _operands(self, tokens):
        """
        filter the tokens after "--": dashed tokens are dropped, and so is a token
        following a marker of a defined non-boolean flag (the value it would take).
        """
        operands = []
        for index, token in enumerate(tokens):
            if token.startswith("-"):
                continue
            if token and index and tokens[index - 1].startswith("-") and "=" not in tokens[index - 1]:
                destination = self._bindings.get(tokens[index - 1].lstrip("-"))
                if destination is not None and not destination.boolean:
                    continue
            operands.append(token)
        return operands

    def parse(self, tokens, /):
        """
        parse tokens into the bound destinations and collect positionals.

        returns
        - None on success.
        - the fault under ErrorPolicy.RETURN; parsing stops at the first fault
          and assignments made before it are kept.
        (EXIT terminates the process, ABORT raises the fault.)
        """
        if isinstance(tokens, str):
            raise TypeError("parse() argument must be a sequence of strings, not a string")

        self._parsed = True
        self._positionals = []
        self._tokens = deque(tokens)
        self._index = 0

        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1

            if token == "--":
                self._positionals.extend(self._operands(list(self._tokens)))
                self._tokens.clear()
                break

            if not token.startswith("-"):
                self._positionals.append(token)
                continue

            if token == "-":
                continue

            if fault := self._resolve(token):
                self._tokens.clear()
                return fault

        return None


class FlagSets(Mapping):
    """
    registry of named flag sets used to dispatch on the first token.

    registering a set under a name that is already taken replaces the
    earlier entry (names are unique per context, not checked).
    """

    def __init__(self):
        self._flagsets = {}

    def __getitem__(self, name, /):
        return self._flagsets[name]

    def __iter__(self):
        return iter(self._flagsets)

    def __len__(self):
        return len(self._flagsets)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, list(self._flagsets))

    def register(self, flagset, /):
        """record flagset under its name and return it."""
        if not isinstance(flagset, FlagSet):
            raise TypeError("register() argument must be a flag set")
        self._flagsets[flagset.name] = flagset
        return flagset

    def flagset(self, name="", policy=ErrorPolicy.RETURN, /, **options):
        """create a FlagSet registered in this context."""
        return FlagSet(name, policy, context=self, **options)

    def parse(self, flagset, tokens, /):
        """
        parse tokens with flagset, or with the set named by the first token.

        dispatch happens only when there is more than one token and the first
        one is a registered name; that token is consumed.
        """
        tokens = list(tokens)
        if len(tokens) > 1 and tokens[0] in self._flagsets:
            return self._flagsets[tokens[0]].parse(tokens[1:])
        return flagset.parse(tokens)


__all__ = (
    "FlagSet",
    "FlagSets",
)
