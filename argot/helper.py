"""
Argot help page.

render(command, error=Unset) builds a rich renderable made of:
- the command's info line and, when given, an "error: ..." line;
- a usage line: program name, named arguments (optional ones bracketed), then
  positional arguments by position, then the default argument;
- one section per argument kind ("flags", "options", "collections", "sets"),
  each row listing every name of an argument (aliases included) with its
  placeholder, description, default and "(required)" marker;
- an "examples" section: each description followed by "<name> <prompt>".

Palette keys
- info, error-label, error, usage-label, program-name, flag-name, option-name,
  metavar, choice, section-label, argument-description, default, required,
  examples-label, examples-dot, example-description, example, panel-title

Styling is disabled with colorful=False; individual entries are overridden
through the command's `styles` option.
"""
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import Flag, Option, Collection, Set, Alias
from .utils import *

_palette = {
    "info": "bold #E6E6F0",
    "error-label": "bold #FF4DA6",
    "error": "#FF4DA6",

    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",

    "flag-name": "bold #22C55E",
    "option-name": "bold #00E6FF",
    "metavar": "bold #FFD600",
    "choice": "bold #FF4D94",

    "section-label": "bold #FFFFFF",
    "argument-description": "#9CA3AF",
    "default": "italic #737373",
    "required": "bold #EF4444",

    "examples-label": "bold #22C55E",
    "examples-dot": "#22C55E dim",
    "example-description": "#E5E7EB",
    "example": "#36C5F0",

    "panel-title": "bold #FF4D94",
}

# Section order on the help page.
_kinds = (Flag, Option, Collection, Set)


def _kind(argument):
    for kind in type(argument).__mro__:
        if kind in _kinds:
            return kind
    return type(argument)


def render(command, error=Unset, /):
    """
    Build the help page of `command` as a rich renderable.
    """
    styles = defaultdict(str, _palette | command.styles)

    def styler(style):
        return styles[style] if command.colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not command.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styler(style))

    registry = command.registry
    prefix = command.prefix

    def placeholder(argument):
        if isinstance(argument, Alias):
            argument = argument.target
        if isinstance(argument, Set):
            return Text.assemble("{", Text(",").join(text(choice, "choice") for choice in argument.choices), "}")
        if argument.metavar is None:
            return Text("")
        return Text.assemble("<", text(argument.metavar, "metavar"), ">")

    def named(name, argument):
        if isinstance(argument, Alias):
            argument = argument.target
        return text(prefix + name, "flag-name" if isinstance(argument, Flag) else "option-name")

    def shape(argument, segment):
        if argument.multiple:
            segment = Text.assemble(segment, " ...")
        if not argument.required:
            segment = Text.assemble("[", segment, "]")
        return segment

    renders = []

    if command.info:
        renders.append(text(command.info, "info"))

    if error:
        renders.append(Text.assemble(text("error", "error-label"), ": ", text(error, "error")))

    # usage: named arguments, then positional ones, then the default argument
    segments = []
    positionals = []
    default = registry.get(registry.default)
    if isinstance(default, Alias):
        default = default.target
    for name, argument in registry.canonical():
        if argument is default:
            continue
        if argument.position is not None:
            positionals.append((argument.position, name, argument))
        elif argument.needs_value:
            segments.append(shape(argument, Text.assemble(named(name, argument), " ", placeholder(argument))))
        else:
            segments.append(shape(argument, named(name, argument)))

    for _, name, argument in sorted(positionals, key=lambda x: x[0]):
        segments.append(shape(argument, placeholder(argument) or named(name, argument)))

    if (name := registry.default) is not None:
        argument = registry[name]
        segments.append(shape(argument, placeholder(argument) or named(name, argument)))

    usage = Text.assemble(text("usage", "usage-label"), ": ", text(command.name, "program-name"))
    for segment in segments:
        usage.append(" ").append(segment)
    renders.append(usage)

    # argument sections
    sections = {}
    for name, argument in registry.canonical():
        sections.setdefault(_kind(argument), []).append((name, argument))

    for kind in sorted(sections, key=lambda x: _kinds.index(x) if x in _kinds else len(_kinds)):
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()

        for name, argument in sections[kind]:
            names = Text(", ").join(named(alias, argument) for alias in (name, *registry.aliases(name)))
            if metavar := placeholder(argument):
                names.append(" ").append(metavar)

            descr = Text()
            if argument.descr:
                descr.append(text(argument.descr, "argument-description"))
            if argument.default not in (None, False):
                descr.append(" " if descr else "").append(text(f"(default: {argument.default})", "default"))
            if argument.required:
                descr.append(" " if descr else "").append(text("(required)", "required"))

            table.add_row(Text.assemble("  ", names), descr)

        renders.append(Text(""))
        renders.append(Text.assemble(text(pluralize(kind.__typename__), "section-label"), ":"))
        renders.append(table)

    if command.examples:
        renders.append(Text(""))
        renders.append(Text.assemble(text("examples", "examples-label"), ":"))
        for description, prompt in command.examples:
            renders.append(Text.assemble(text(" • ", "examples-dot"), text(description, "example-description")))
            renders.append(Text.assemble("   ", text(f"{command.name} {prompt}".rstrip(), "example")))

    renderable = Group(*renders)

    if command.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{command.name} help".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


__all__ = (
    "render",
)
