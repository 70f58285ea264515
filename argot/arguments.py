r"""
Argot argument specifications.

Overview
- Kinds (a closed family, dispatched through methods rather than type checks)
  • Flag: presence-only switch; value is a bool, True once seen.
  • Option: named argument carrying one string value; later occurrences win.
  • Collection: Option that accumulates every occurrence, in order.
  • Set: Option whose value must be one of a fixed tuple of choices.
  • Alias: forwarding reference to another argument; owns no state.

- Behavior hooks (overridden per kind)
  • needs_value: whether resolution must find a value for the argument.
  • multiple: whether repeated assignment accumulates instead of overwriting.
  • assign(value): store a resolved value.
  • reset(): go back to the default (collections empty themselves).
  • validate(value): kind-specific acceptance of one candidate value.
  • rejected(): the held values that fail validate().

- Introspection & representation
  • ArgumentType metaclass provides __typename__ ("flag", "option", ...), stable
    __repr__/__rich_repr__, and read-only properties for every name listed in
    __introspectable__ (see utils.mirror).

Metadata (sanitized on construction)
- default: bool for Flag, str | None for Option/Set, always None for Collection.
  Forced to None when required is True.
- required: bool.
- position: Unset | int >= 0 (bool rejected). Unset becomes None.
- descr: Unset | str | Text, non-empty after trimming. Unset becomes None.
- metavar: Unset | str, non-empty after trimming. Unset becomes the kind's
  placeholder ("OPTION", "COLLECTION", "SET"); flags have none.
- validator / processor: Unset | callable. Unset becomes None. Both stay
  writable attributes after construction.
- choices (Set only): iterable of non-empty strings without duplicates.

Quick example:
    >>> verbose = Flag(descr="print more")
    >>> output = Option("out.txt", descr="target file", metavar="FILE")
    >>> inputs = Collection(position=0)
    >>> mode = Set(("fast", "safe"), "safe")
    >>> output.assign("result.txt"); output.value
    'result.txt'

Public API
- Classes: Argument, Flag, Option, Collection, Set, Alias
"""
import functools
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass giving argument specs a typename, a readable repr and read-only
    metadata properties.

    Conventions
    - __typename__ is the class name split on camel-case humps with hyphens
      and lowercased; it labels messages and help sections.
    - names listed in a class's own __introspectable__ become properties over
      "_<name>" backing fields (mirror()).
    - __displayable__ (if set) narrows what __rich_repr__ yields; otherwise
      __introspectable__ is used.
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
            """
            Return a concise representation, e.g. option(default='42', required=False, ...).
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the metadata shared by every kind.

    Mutates `metadata` in place:
    - required: coerced to bool; when True, default is forced to None.
    - position: Unset → None; otherwise a non-negative int (bool is rejected).
    - descr: Unset → None; otherwise a non-empty (trimmed) str or a rich Text.
    - metavar: Unset → the class placeholder; otherwise a non-empty (trimmed) str.
    - validator/processor: Unset → None; otherwise callables.

    Raises
    - TypeError: wrong type for any field.
    - ValueError: empty strings or negative positions.
    """
    metadata["required"] = bool(metadata["required"])
    if metadata["required"]:
        metadata["default"] = None

    position = metadata["position"]
    if position is not Unset:
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(f"{cls.__typename__} 'position' must be an integer")
        if position < 0:
            raise ValueError(f"{cls.__typename__} 'position' must be zero or positive")
    metadata["position"] = coalesce(position)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar, cls.__placeholder__)

    for hook in ("validator", "processor"):
        if metadata[hook] is not Unset and not callable(metadata[hook]):
            raise TypeError(f"{cls.__typename__} '{hook}' must be callable")
        metadata[hook] = coalesce(metadata[hook])


def _sanitize_choices(cls, metadata, /):
    """
    Internal: validate Set choices and freeze them into a tuple.

    - choices: iterable (not a bare string) of non-empty strings, no duplicates,
      at least one entry.
    - default: when not None it must be one of the choices.
    """
    if isinstance(choices := metadata["choices"], str) or not isinstance(choices, Iterable):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")

    sanitized = []
    for choice in choices:
        if not isinstance(choice, str):
            raise TypeError(f"{cls.__typename__} 'choices' must be strings")
        elif not choice:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain empty strings")
        elif choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)

    if not sanitized:
        raise ValueError(f"{cls.__typename__} must specify at least one choice")
    metadata["choices"] = tuple(sanitized)

    if metadata["default"] is not None and metadata["default"] not in sanitized:
        raise ValueError(f"{cls.__typename__} 'default' must be one of its choices")


class Argument(metaclass=ArgumentType):
    """
    Base of every argument kind.

    Holds the sanitized metadata and the live value. Subclasses decide how a
    value is assigned, reset and validated; the base behaves like a scalar.

    The base class is not meant to be registered directly: use Flag, Option,
    Collection, Set or Alias.
    """

    __introspectable__ = (
        "default",
        "required",
        "position",
        "descr",
        "metavar",
    )

    __placeholder__ = None

    needs_value = False
    multiple = False

    def __init__(
            self,
            default=None,
            /,
            *,
            required=False,
            position=Unset,
            descr=Unset,
            metavar=Unset,
            validator=Unset,
            processor=Unset,
    ):
        if type(self) is Argument:
            raise TypeError("type 'Argument' cannot be instantiated directly")

        metadata = {
            "default": default,
            "required": required,
            "position": position,
            "descr": descr,
            "metavar": metavar,
            "validator": validator,
            "processor": processor,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self.reset()

    @property
    def validator(self):
        """
        Optional predicate called with one candidate value; falsy means invalid.
        """
        return self._validator

    @validator.setter
    def validator(self, validator):
        if validator is not None and not callable(validator):
            raise TypeError(f"{type(self).__typename__} 'validator' must be callable")
        self._validator = validator

    @property
    def processor(self):
        """
        Optional callback receiving the final value when the command processes.
        """
        return self._processor

    @processor.setter
    def processor(self, processor):
        if processor is not None and not callable(processor):
            raise TypeError(f"{type(self).__typename__} 'processor' must be callable")
        self._processor = processor

    @property
    def value(self):
        return self._value

    @property
    def missing(self):
        """
        True when the argument holds no value at all (neither default nor resolved).
        """
        return self._value is None

    def assign(self, value, /):
        self._value = value

    def reset(self):
        self._value = self._default

    def validate(self, value, /):
        return True

    def rejected(self):
        """
        Yield the held values that fail validation (nothing when missing).
        """
        if not self.missing and not self.validate(self._value):
            yield self._value


class Flag(Argument):
    """
    Presence-only argument.

    Written as -name, --name or /name on the command line; seeing it sets the
    value to True. The default is False unless given; a required flag has no
    default and fails validation until it appears.
    """

    def __init__(self, default=False, /, **options):
        if not isinstance(default, bool):
            raise TypeError("flag 'default' must be a boolean")
        super().__init__(default, **options)

    def validate(self, value, /):
        return not self.required or isinstance(value, bool)


class Option(Argument):
    """
    Named argument carrying one string value.

    Accepted spellings (all equivalent):
        /name=VALUE  /name:VALUE  /name VALUE
        --name=VALUE --name:VALUE --name VALUE
        -name=VALUE  -name:VALUE  -name VALUE

    A later occurrence overwrites an earlier one. The optional validator is
    called with the final value.
    """

    __placeholder__ = "OPTION"

    needs_value = True

    def __init__(self, default=None, /, **options):
        if not isinstance(default, str | None):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")
        super().__init__(default, **options)

    def validate(self, value, /):
        if self._validator is None:
            return True
        return bool(self._validator(value))


class Collection(Option):
    """
    Option accumulating one value per occurrence.

    `/name=a /name=b` yields ["a", "b"]. Reading `value` returns a copy of the
    accumulated list; reset() empties it. The validator (if any) is applied to
    each item separately.
    """

    __placeholder__ = "COLLECTION"

    multiple = True

    def __init__(self, /, **options):
        self._values = []
        super().__init__(None, **options)

    @property
    def value(self):
        return list(self._values)

    @property
    def missing(self):
        return not self._values

    def assign(self, value, /):
        self._values.append(value)

    def reset(self):
        self._values.clear()

    def rejected(self):
        for value in self._values:
            if not self.validate(value):
                yield value


class Set(Option):
    """
    Option restricted to a fixed tuple of choices.

    A value is valid when it is one of `choices` and, if a validator is set,
    the validator accepts it too.
    """

    __introspectable__ = (
        "choices",
        "default",
        "required",
        "position",
        "descr",
        "metavar",
    )

    __placeholder__ = "SET"

    def __init__(self, choices, default=None, /, **options):
        metadata = {"choices": choices, "default": default}
        _sanitize_choices(type(self), metadata)
        self._choices = metadata["choices"]
        super().__init__(default, **options)

    def validate(self, value, /):
        return value in self._choices and super().validate(value)


class Alias(Argument):
    """
    Named forwarding reference to another argument.

    Every read and write goes to `target`: the alias has no value, default or
    metadata of its own. An alias of an alias points at the final target, so
    `target` is never an Alias. Validation skips aliases; their target is
    validated once under its own name.
    """

    __displayable__ = ("target",)

    def __init__(self, target, /):
        if not isinstance(target, Argument):
            raise TypeError("alias target must be an argument")
        self._target = target.target if isinstance(target, Alias) else target

    @property
    def target(self):
        return self._target

    default = property(lambda self: self._target.default)
    required = property(lambda self: self._target.required)
    position = property(lambda self: self._target.position)
    descr = property(lambda self: self._target.descr)
    metavar = property(lambda self: self._target.metavar)
    needs_value = property(lambda self: self._target.needs_value)
    multiple = property(lambda self: self._target.multiple)
    value = property(lambda self: self._target.value)
    missing = property(lambda self: self._target.missing)

    @property
    def validator(self):
        return self._target.validator

    @validator.setter
    def validator(self, validator):
        self._target.validator = validator

    @property
    def processor(self):
        return self._target.processor

    @processor.setter
    def processor(self, processor):
        self._target.processor = processor

    def assign(self, value, /):
        self._target.assign(value)

    def reset(self):
        self._target.reset()

    def validate(self, value, /):
        return self._target.validate(value)

    def rejected(self):
        return self._target.rejected()


__all__ = (
    "Argument",
    "Flag",
    "Option",
    "Collection",
    "Set",
    "Alias",
)

# Not part of the public API.
del ArgumentType
