"""
Argot utilities (small helpers shared by the other modules).

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “parameter not provided”, distinct from None.
    Arguments legitimately hold None as “no value”, so None cannot double as
    the “not passed” marker for constructor keywords.

- coalesce(value, default=None)
  • Materialize Unset into a concrete default; every other value (None, "", 0,
    False) passes through untouched.

- rename(callable, name) / @rename("name")
  • Give generated callables a readable __name__/__qualname__.

- mirror("attr")
  • Read-only property over a private backing field (self._attr); containers are
    handed out as fresh copies so callers cannot mutate argument state.

- pluralize(text)
  • English pluralizer used for help section labels ("flag" → "flags").

Stability
- Names listed in __all__ are supported; everything else is internal.
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping
from collections.abc import Set as AbstractSet
from typing import final


@final
class UnsetType:
    """
    Sentinel type for “not provided”.

    - bool(Unset) is False, repr(Unset) is "Unset".
    - UnsetType() always returns the same object.
    - Subclassing is refused.
    """

    def __or__(self, other, /):
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

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    >>> coalesce(Unset, "OPTION")
    'OPTION'
    >>> coalesce(None, "OPTION") is None
    True
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    Assign __name__/__qualname__ to a callable.

    Forms
    - rename(callable, name) → the same callable, renamed in place.
    - rename(name)           → decorator applying the name later.
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
                raise TypeError("rename() first argument must be an updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    # Fresh container copies, recursively; scalars are returned as-is.
    if isinstance(object, Sequence) and not isinstance(object, str):
        return type(object)(map(_detach, object)) if isinstance(object, tuple) else list(map(_detach, object))
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, AbstractSet):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Build a read-only property exposing the backing attribute "_{name}".

    Lists, mappings and sets are copied on every read; tuples keep their type.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of `text`, keeping its casing and any leading words.

    Only regular English endings are handled (s/sh/ch/x/z → +es, consonant+y →
    ies, f/fe → ves); this is enough for labels such as "flag", "option",
    "collection", "set" or "alias".

    >>> pluralize("flag")
    'flags'
    >>> pluralize("alias")
    'aliases'
    >>> pluralize("Entry")
    'Entries'
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not (match := re.search(r"(\S+)(\s*)$", text)):
        return text

    head, word, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = word.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    elif lower.endswith("fe") and len(lower) > 2:
        plural = lower[:-2] + "ves"
    elif lower.endswith("f") and len(lower) > 1:
        plural = lower[:-1] + "ves"
    else:
        plural = lower + "s"

    if word.isupper():
        plural = plural.upper()
    elif word[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


Unset = UnsetType()
"""
The “not provided” sentinel. Use it as a keyword default where None is a real
value, then resolve it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
