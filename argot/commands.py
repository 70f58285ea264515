"""
Argot command layer: declare arguments, resolve command lines, run processors.

What this module provides
- Command: owns a Registry of argument specs and turns a prompt (a raw string
  or an iterable of tokens) into assigned values plus a list of errors.
  • register/alias/default: declare the surface.
  • resolve(prompt): one resolution pass followed by one validation pass.
  • getvalue/trygetvalue: read results by name (aliases included).
  • process(): hand every final value to its argument's processor.
  • help()/example(): rich-based help page with worked examples.
- invoke(obj, prompt): entry point for anything implementing __invoke__.

Resolution in short
- Tokens are visited left to right with their index.
- Prefixed tokens (-x, --x, /x) name an argument; bare tokens bind to the
  argument declared at their position, else to the default argument.
- Value-needing kinds take an inline value (=, :) or consume the next token when
  that token does not name a registered argument.
- Problems (unknown names, missing values, rejected values) are collected as
  faults and never stop the pass; each distinct message is kept once.

Quick start
    from argot import Command, Flag, Option, Collection, invoke

    command = Command("tool", "tool 1.0 - copies things")
    command.register("verbose", Flag(descr="print more"))
    command.register("count", Option("1", validator=str.isdigit))
    command.register("files", Collection(position=0))
    command.alias("verbose", "v")
    command.default = "files"

    if __name__ == "__main__":
        invoke(command)
"""
import functools
import logging
import operator
import os
import re
import sys
from collections.abc import Iterable, Mapping

from rich.console import Console
from rich.text import Text

from . import faults
from . import helper
from .faults import CommandExit
from .registry import Registry
from .tokens import split, is_named, extract_name, extract_value
from .utils import *

logger = logging.getLogger(__name__)


class CommandType(type):
    """
    Metaclass adding __typename__, read-only metadata properties and a compact
    repr to Command classes (same conventions as the argument specs).
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize Command constructor options in place.

    - name: Unset → basename of sys.argv[0] (or "argot"); non-empty str.
    - info: Unset → None; non-empty str or rich Text.
    - console: Unset → a fresh rich Console; otherwise a Console.
    - prefix: one of "-", "--", "/".
    - shell/fancy/colorful: booleans.
    - styles: Unset → {}; mapping of palette keys to rich style strings.
    """
    if metadata["name"] is Unset:
        metadata["name"] = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argot"
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(info := metadata["info"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'info' must be a string")
    elif isinstance(info, str) and not (info := info.strip()):
        raise ValueError(f"{cls.__typename__} 'info' cannot be empty")
    metadata["info"] = coalesce(info)

    if not isinstance(console := metadata["console"], Console | Unset):
        raise TypeError(f"{cls.__typename__} 'console' must be a rich console")
    metadata["console"] = Console() if console is Unset else console

    if not isinstance(prefix := metadata["prefix"], str):
        raise TypeError(f"{cls.__typename__} 'prefix' must be a string")
    elif prefix not in ("-", "--", "/"):
        raise ValueError(f"{cls.__typename__} 'prefix' must be one of '-', '--' or '/'")

    for option in ("shell", "fancy", "colorful"):
        if not isinstance(metadata[option], bool):
            raise TypeError(f"{cls.__typename__} '{option}' must be a boolean")

    if not isinstance(styles := metadata["styles"], Mapping | Unset):
        raise TypeError(f"{cls.__typename__} 'styles' must be a mapping")
    for key, style in dict(coalesce(styles, {})).items():
        if not isinstance(key, str) or not isinstance(style, str):
            raise TypeError(f"{cls.__typename__} 'styles' must map strings to strings")
    metadata["styles"] = dict(coalesce(styles, {}))


@functools.cache
def _ordinal(number):
    """
    Return an ordinal label for a 1-based position ("first", ..., "tenth", "11th", "22nd").
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th, 111th, ...
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokenize(prompt):
    if isinstance(prompt, str):
        return split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = []
        for item in prompt:
            if not isinstance(item, str):
                raise TypeError("resolve() argument must be a string or an iterable of strings")
            if item := item.strip():
                tokens.append(item)
        return tokens
    raise TypeError("resolve() argument must be a string or an iterable of strings")


class Command(metaclass=CommandType):
    """
    A command-line surface: argument declarations plus the state of the last
    resolution pass.

    Lifecycle
    - Declare arguments with register()/alias() and optionally pick a default
      argument (the catch-all for unclaimed tokens).
    - Call resolve(prompt) as many times as needed; every pass starts from the
      declared defaults, so passes are independent and repeatable.
    - Read values with getvalue()/trygetvalue(), or let process() push them to
      the processors attached to each argument.

    A Command is not thread-safe; use one instance per concurrent parse.
    """

    __introspectable__ = (
        "name",
        "info",
        "prefix",
        "shell",
        "fancy",
        "colorful",
        "styles",
    )

    __displayable__ = (
        "name",
        "info",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(
            self,
            name=Unset,
            info=Unset,
            /,
            *,
            console=Unset,
            prefix="-",
            shell=False,
            fancy=False,
            colorful=True,
            styles=Unset,
    ):
        metadata = {
            "name": name,
            "info": info,
            "console": console,
            "prefix": prefix,
            "shell": shell,
            "fancy": fancy,
            "colorful": colorful,
            "styles": styles,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._registry = Registry()
        self._examples = []
        self._faults = []

    @property
    def console(self):
        return self._console

    @property
    def registry(self):
        return self._registry

    @property
    def examples(self):
        """
        Registered (description, prompt) pairs, in registration order.
        """
        return tuple(self._examples)

    @property
    def faults(self):
        """
        Distinct faults of the last resolution pass, in order of first occurrence.
        """
        return tuple(self._faults)

    @property
    def errors(self):
        """
        Messages of the last pass's faults (same order as `faults`).
        """
        return [str(fault) for fault in self._faults]

    def register(self, name, argument, /):
        """
        Declare `argument` under `name` and return the argument.

        An existing name is replaced.
        """
        return self._registry.register(name, argument)

    def alias(self, original, alias, /):
        """
        Make `alias` another name for the registered argument `original`.

        Raises ArgumentNotFoundError when `original` is not registered.
        """
        argument = self._registry.alias(original, alias)
        logger.debug("aliased %r to %r", alias, original)
        return argument

    @property
    def default(self):
        """
        Name of the default argument (receives unclaimed tokens), or None.
        """
        return self._registry.default

    @default.setter
    def default(self, name):
        self._registry.default = name
        logger.debug("default argument set to %r", name)

    def getvalue(self, name, /):
        """
        Return the current value of the argument registered as `name`.

        Raises ArgumentNotFoundError for unknown names.
        """
        return self._registry[name].value

    def trygetvalue(self, name, /):
        """
        Return (value, True) for a registered name, (None, False) otherwise.
        """
        if not isinstance(name, str) or (argument := self._registry.get(name)) is None:
            return None, False
        return argument.value, True

    def example(self, description, prompt, /):
        if not isinstance(description, str) or not isinstance(prompt, str):
            raise TypeError("example() arguments must be strings")
        elif not description.strip():
            raise ValueError("example() description cannot be empty")
        self._examples.append((description.strip(), prompt.strip()))

    def _options(self, **options):
        return {
            "prog": self._name,
            "colorful": self._colorful,
            "fancy": self._fancy,
            "styles": self._styles,
        } | options

    def _record(self, fault):
        if str(fault) in map(str, self._faults):
            return
        self._faults.append(fault)

    def _eligible(self, defaulted):
        if (name := self._registry.default) is None:
            return False
        return not defaulted or self._registry[name].multiple

    def _resolve(self, tokens):
        defaulted = False
        index = 0

        while index < len(tokens):
            token = tokens[index]
            name = extract_name(token)
            value = Unset

            if not is_named(token) and name not in self._registry:
                if (positional := self._registry.positional(index)) is not None:
                    name, value = positional, token
                elif self._eligible(defaulted):
                    name, value, defaulted = self._registry.default, token, True

            if (argument := self._registry.get(name)) is None:
                if self._eligible(defaulted):
                    name, defaulted = self._registry.default, True
                    argument = self._registry[name]
                else:
                    self._record(faults.unknown(
                        name, **self._options(index=index, hint=f"at {_ordinal(index + 1)} position")
                    ))
                    index += 1
                    continue

            if argument.needs_value:
                if value is Unset:
                    value = extract_value(token)
                if value is None and index + 1 < len(tokens) and extract_name(tokens[index + 1]) not in self._registry:
                    index += 1
                    value = tokens[index]

                if value is None:
                    self._record(faults.missing(
                        name, **self._options(index=index, hint=f"at {_ordinal(index + 1)} position")
                    ))
                else:
                    argument.assign(value)
            else:
                argument.assign(True)

            index += 1

    def _validate(self):
        for name, argument in self._registry.canonical():
            if argument.required and argument.missing:
                self._record(faults.missing(name, **self._options(hint="this argument is required")))
                continue

            for value in argument.rejected():
                if choices := getattr(argument, "choices", None):
                    options = self._options(hint="expected one of: %s" % ", ".join(choices))
                else:
                    options = self._options()
                self._record(faults.invalid(name, value, **options))

    def resolve(self, prompt, /):
        """
        Resolve `prompt` against the declared arguments.

        Parameters
        - prompt: a raw command line (split honoring quotes) or an iterable of
          tokens (each trimmed; blank items dropped).

        Returns
        - (success, errors): success is True when neither resolution nor
          validation produced a fault; errors lists the distinct messages.
        """
        tokens = _tokenize(prompt)

        self._registry.reset()
        self._faults.clear()

        logger.debug("resolving %d tokens", len(tokens))
        self._resolve(tokens)
        self._validate()
        logger.debug("resolution finished with %d faults", len(self._faults))

        return not self._faults, self.errors

    def process(self):
        """
        Call each argument's processor with its final value, in registration order.

        Aliases are skipped; exceptions raised by processors propagate.
        """
        for name, argument in self._registry.canonical():
            if argument.processor is None:
                continue
            logger.debug("processing %r", name)
            argument.processor(argument.value)

    def help(self, error=Unset, /):
        """
        Print the help page (optionally headed by `error`) to the command's console.
        """
        self._console.print(helper.render(self, error))

    def __invoke__(self, prompt=Unset):
        """
        Run this command as a program.

        Parameters
        - prompt: Unset (use sys.argv[1:]), a raw string or an iterable of tokens.

        Behavior
        - On success, run the processors.
        - On failure with shell=True, print the faults and the help page, then
          exit with status 1; otherwise raise CommandExit with the faults.
        """
        success, errors = self.resolve(sys.argv[1:] if prompt is Unset else prompt)
        if success:
            self.process()
            return

        if self._shell:
            for fault in self._faults:
                self._console.print(fault)
            self.help()
            sys.exit(1)

        raise CommandExit(self._faults, **self._options())


def invoke(object, prompt=Unset, /):
    """
    Run any object implementing __invoke__(prompt) (e.g. a Command).

    Parameters
    - object: the command-like object.
    - prompt: Unset (read sys.argv[1:]), a raw string or an iterable of tokens.

    Raises
    - TypeError: when `object` does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        object.__invoke__(prompt)
        return

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Command",
    "invoke",
)

# Not part of the public API.
del CommandType
