"""
Usage rendering: descriptors, value hints and the two-part help text.

Layout
    usage: tool [-a --aa] [-b --bb=<n>] [-c --cc] [-d --dd]
                [-e --ee]
        -a --aa         Usage for a
        -b --bb         Usage for `<n>`
        ...

- Synopsis: "usage: <name>" followed by one bracketed group per descriptor,
  shorthand first; "=<hint>" is appended when the usage text carries a
  backtick-quoted hint. After the 4th, 8th, ... descriptor position the line
  wraps and is indented to the width of "usage: <name>".
- Table: one line per descriptor; the compound identifier is right-aligned to
  len(compound)+4 and the usage text to len(usage)-len(compound)+16 (printf
  "%*s" semantics, negative widths left-align).
- Placeholder descriptors (no identifiers) are skipped in both parts but still
  count as positions for the wrap rule.

Styling
- render() returns a rich Text; styles apply only when a palette is passed.
  The plain text never depends on styling.
"""
from collections import defaultdict
from typing import NamedTuple

from rich.text import Text


class Descriptor(NamedTuple):
    """display metadata of one flag definition; Descriptor() is the empty placeholder."""
    longhand: str = ""
    shorthand: str = ""
    usage: str = ""
    hint: str = ""


def extract(usage, /):
    """
    return the text between the first and second backtick of usage, or "".
    """
    start = usage.find("`")
    if start < 0:
        return ""
    stop = usage.find("`", start + 1)
    if stop < 0:
        return ""
    return usage[start + 1:stop]


def describe(name, shorthand, usage, /):
    """
    build the descriptor of a definition; a one-character name is shown as a shorthand.
    """
    if len(name) == 1:
        shorthand, name = name, ""
    return Descriptor(name, shorthand, usage, extract(usage))


def compound(descriptor, /):
    """the identifier column of a descriptor, e.g. "-t --test"."""
    parts = []
    if descriptor.shorthand:
        parts.append("-" + descriptor.shorthand)
    if descriptor.longhand:
        parts.append("--" + descriptor.longhand)
    return " ".join(parts)


def render(name, descriptors, /, *, styles=None):
    """
    render the usage text of a flag set.

    parameters
    - name: program or flag set name shown after "usage: ".
    - descriptors: iterable of Descriptor in definition order.
    - styles: optional palette mapping (see FlagSet.usage); None renders unstyled.

    returns
    - rich.text.Text holding synopsis, "\\n", then the description table.
    """
    palette = defaultdict(str, styles or {})

    synopsis = Text()
    synopsis.append("usage", palette["usage-label"]).append(": ")
    synopsis.append(name, palette["program-name"])
    offset = len(synopsis)

    table = Text()

    for index, descriptor in enumerate(descriptors):
        if not descriptor.shorthand and not descriptor.longhand:
            continue

        identifiers = compound(descriptor)

        synopsis.append(" [").append(identifiers, palette["flag-name"])
        if descriptor.hint:
            synopsis.append("=").append(descriptor.hint, palette["hint"])
        synopsis.append("]")

        if (index + 1) % 4 == 0:
            synopsis.append("\n%*s" % (offset, ""))

        table.append("%*s" % (len(identifiers) + 4, identifiers), palette["flag-name"])
        table.append("%*s" % (len(descriptor.usage) - len(identifiers) + 16, descriptor.usage), palette["flag-usage"])
        table.append("\n")

    return Text.assemble(synopsis, "\n", table)


__all__ = (
    "Descriptor",
    "extract",
    "describe",
    "compound",
    "render",
)
