"""
Argot registry: the name → argument table behind a Command.

- Names are case-sensitive and unique; registering an existing name replaces it.
- Aliases are ordinary entries holding an Alias; they resolve to their target
  and are skipped wherever every argument must be visited exactly once
  (canonical(), positional lookups).
- At most one registered name may be the default argument: the catch-all that
  receives tokens nothing else claims.
"""
import logging

from .arguments import Argument, Alias
from .faults import notfound
from .tokens import PREFIXES, SEPARATORS

logger = logging.getLogger(__name__)


def _sanitize_name(name, /):
    if not isinstance(name, str):
        raise TypeError("argument name must be a string")
    elif not name:
        raise ValueError("argument name cannot be empty")
    elif any(char.isspace() for char in name):
        raise ValueError("argument name cannot contain whitespace")
    elif name[0] in PREFIXES:
        raise ValueError("argument name cannot start with %r" % name[0])
    elif any(char in SEPARATORS for char in name):
        raise ValueError("argument name cannot contain '=' or ':'")
    return name


class Registry:
    """
    Insertion-ordered table of argument specs.

    Iteration, items() and canonical() follow registration order; replacing a
    name keeps its original slot.
    """

    def __init__(self):
        self._arguments = {}
        self._default = None

    def register(self, name, argument, /):
        """
        Store `argument` under `name` and return it.
        """
        _sanitize_name(name)
        if not isinstance(argument, Argument):
            raise TypeError("register() second argument must be an argument")
        if name in self._arguments:
            logger.debug("replacing argument %r", name)
        self._arguments[name] = argument
        logger.debug("registered %s %r", type(argument).__typename__, name)
        return argument

    def alias(self, original, alias, /):
        """
        Register `alias` as another name for the already registered `original`.
        """
        target = self[original]
        return self.register(alias, Alias(target))

    @property
    def default(self):
        return self._default

    @default.setter
    def default(self, name):
        if name is not None and name not in self._arguments:
            raise notfound(name)
        self._default = name

    def get(self, name, default=None, /):
        return self._arguments.get(name, default)

    def __getitem__(self, name):
        try:
            return self._arguments[name]
        except KeyError:
            raise notfound(name) from None

    def __contains__(self, name):
        return name in self._arguments

    def __iter__(self):
        return iter(self._arguments)

    def __len__(self):
        return len(self._arguments)

    def items(self):
        return self._arguments.items()

    def canonical(self):
        """
        Yield (name, argument) for every entry that is not an alias.
        """
        for name, argument in self._arguments.items():
            if not isinstance(argument, Alias):
                yield name, argument

    def aliases(self, name, /):
        """
        Return the alias names pointing at the argument registered as `name`.
        """
        target = self[name]
        return [
            alias for alias, argument in self._arguments.items()
            if isinstance(argument, Alias) and argument.target is target
        ]

    def positional(self, index, /):
        """
        Return the name of the argument bound to token position `index`, or None.
        """
        for name, argument in self.canonical():
            if argument.position == index:
                return name
        return None

    def reset(self):
        for _, argument in self.canonical():
            argument.reset()

    def __repr__(self):
        return "Registry(%s)" % ", ".join(map(repr, self._arguments))


__all__ = (
    "Registry",
)
