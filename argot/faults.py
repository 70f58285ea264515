"""
Argot faults (resolution errors) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing problem.
- CommandException: base type carrying a message plus options (code, title,
  hint, prog, colorful, fancy, styles, ...) that renders itself through rich.
- Soft faults (collected during a resolution pass, never raised by it):
  • UnknownOptionError  → "Unknown option: '<name>'"
  • MissingValueError   → "Missing value for option '<name>'"
  • InvalidValueError   → "<name>: Invalid value '<value>'"
- Hard faults (raised immediately from configuration/lookup calls):
  • ArgumentNotFoundError, also a LookupError so `except KeyError`-style
    callers can catch it as a lookup failure.
- CommandExit: ExceptionGroup bundling the soft faults of a failed run.

Rendering
- str(fault) is the plain message; the exact wording is part of the API.
- __rich__ renders "[ prog — code | title ]", the message and a "→ hint" line,
  optionally inside a Panel (fancy=True). Palette entries can be overridden
  with the `styles` option.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registry (1110x): ARGUMENT_NOT_FOUND
    - resolution (1111x): UNKNOWN_OPTION, MISSING_VALUE
    - validation (1112x): INVALID_VALUE
    """
    # --- registry errors ---
    ARGUMENT_NOT_FOUND = 11101

    # --- resolution errors ---
    UNKNOWN_OPTION     = 11112
    MISSING_VALUE      = 11117

    # --- validation errors ---
    INVALID_VALUE      = 11124


_palette = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
    "exit-title": "bold #FF4DA6",
}


def _styler(options):
    styles = defaultdict(str, _palette | dict(options.get("styles") or {}))

    def styler(style):
        return styles[style] if options.get("colorful", True) else ""
    return styler


def _text(fragment, style=""):
    if not fragment:
        return Text("")
    if isinstance(fragment, Text):
        return fragment
    return Text(str(fragment), style)


class CommandException(Exception):
    """
    Base class of every argot fault.

    The message is positional; everything else travels as keyword options and is
    exposed read-only through `options`.
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message or ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styler = _styler(self.options)

        code = self.code.value if self.code is not None else "-"
        header = Text.assemble(
            "[ ",
            _text(self.options.get("prog") or "argot", styler("prog-name")),
            " — ",
            _text(code, styler("code")),
            " | ",
            _text((self.options.get("title") or "error").title(), styler("error-title")),
            " ]"
        )
        message = _text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(_text(" → ", styler("hint-arrow")), _text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ArgumentNotFoundError(CommandException, LookupError): ...
class UnknownOptionError(CommandException): ...
class MissingValueError(CommandException): ...
class InvalidValueError(CommandException): ...


class CommandExit(ExceptionGroup):
    """
    Bundle of the soft faults that made a run fail.

    Raised by the entry point outside shell mode; in shell mode it is rendered
    instead (see Command.__invoke__).
    """

    def __new__(cls, exceptions, /, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, /, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return CommandExit(exceptions, **self.options)

    def __rich__(self):
        styler = _styler(self.options)

        header = Text.assemble(
            "[ ",
            _text(self.options.get("prog") or "argot", styler("prog-name")),
            " — ",
            _text(self.message.title(), styler("exit-title")),
            " ]"
        )
        renders = list(self.exceptions)

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)


def unknown(name, /, **options):
    """
    Build the fault for a token whose name has no registry entry.
    """
    return UnknownOptionError(
        "Unknown option: '%s'" % name,
        code=FaultCode.UNKNOWN_OPTION,
        title="unknown option",
        name=name,
        **options
    )


def missing(name, /, **options):
    """
    Build the fault for a value-needing or required argument left without value.
    """
    return MissingValueError(
        "Missing value for option '%s'" % name,
        code=FaultCode.MISSING_VALUE,
        title="missing value",
        name=name,
        **options
    )


def invalid(name, value, /, **options):
    """
    Build the fault for a value rejected by validation.
    """
    return InvalidValueError(
        "%s: Invalid value '%s'" % (name, value),
        code=FaultCode.INVALID_VALUE,
        title="invalid value",
        name=name,
        value=value,
        **options
    )


def notfound(name, /, **options):
    """
    Build the hard fault for a lookup of an unregistered argument name.
    """
    return ArgumentNotFoundError(
        "argument %r is not registered" % name,
        code=FaultCode.ARGUMENT_NOT_FOUND,
        title="argument not found",
        name=name,
        hint="register it first with Command.register(%r, ...)" % name,
        **options
    )


__all__ = (
    "FaultCode",
    "CommandException",
    "ArgumentNotFoundError",
    "UnknownOptionError",
    "MissingValueError",
    "InvalidValueError",
    "CommandExit",
)
