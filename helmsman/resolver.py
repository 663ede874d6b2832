"""
Helmsman argument resolver: find the active command in a raw argument vector.

Every step is a pure function over (registry, args):

1. flagless(args): the tokens not starting with "-", joined by single spaces.
2. candidates(registry, text): registered names (commands and aliases) that
   the flagless text starts with, followed by end-of-text or whitespace.
3. resolve(registry, args): the longest candidate, or None.
4. strip(args, name): args with each word of `name` removed once (first
   occurrence), everything else kept in order.
5. residual(registry, args, name): strip() with the alias arguments, if any,
   spliced in front.

Invocation bundles the steps for one run and memoizes them, so the active
command is computed once and never recomputed.
"""
import re
from functools import cached_property

from .faults import InvalidCommandError
from .utils import *


def flagless(args, /):
    return " ".join(arg for arg in args if not arg.startswith("-"))


def candidates(registry, text, /):
    """
    Names matching the start of `text`, shortest first (ties by name).
    """
    return sorted(
        (name for name in registry.names if re.match(r"%s(?!\S)" % re.escape(name), text)),
        key=lambda name: (len(name), name),
    )


def resolve(registry, args, /):
    """
    Return the longest registered name the arguments start with, or None.
    """
    if matches := candidates(registry, flagless(args)):
        return matches[-1]
    return None


def strip(args, name, /):
    """
    Remove each word of `name` at most once, preserving the order of the rest.

        >>> strip(["install", "--force", "gem", "rake"], "install gem")
        ['--force', 'rake']
    """
    words = (name or "").split()
    removed = []
    residual = []
    for arg in args:
        if arg in words and arg not in removed:
            removed.append(arg)
        else:
            residual.append(arg)
    return residual


def residual(registry, args, name, /):
    if name is not None and registry.alias(name):
        return [*registry.aliases[name], *strip(args, name)]
    return strip(args, name)


class Invocation:
    """
    One run's view of the argument vector.

    Attributes (computed on first access, then cached)
    - flagless: str
    - name: matched command or alias name, None when nothing matched.
    - command: the active Command, the default command when nothing matched and
      the flagless text is non-empty, or None.
    - residual: arguments left for the option parser.
    """

    def __init__(self, registry, args, /):
        self.registry = registry
        self.args = tuple(args)

    @cached_property
    def flagless(self):
        return flagless(self.args)

    @cached_property
    def name(self):
        return resolve(self.registry, self.args)

    @cached_property
    def command(self):
        """
        Raises
        - InvalidCommandError: an alias without its target, a default command
          that was never declared, or positional words naming no command.
        """
        if self.name is not None:
            return self.registry.lookup(self.name)
        if not self.flagless:
            return None
        if (default := self.registry.default) is None:
            raise InvalidCommandError(f"invalid command {self.flagless.split()[0]!r}", name=self.flagless)
        if (command := self.registry.lookup(default)) is None:
            raise InvalidCommandError(f"invalid default command {default!r}", name=default)
        return command

    @cached_property
    def residual(self):
        return residual(self.registry, self.args, self.name)

    @property
    def alias(self):
        return self.name is not None and self.registry.alias(self.name)

    def __repr__(self):
        return "invocation(args=%r, name=%r)" % (self.args, self.name)


__all__ = (
    "Invocation",
    "flagless",
    "candidates",
    "resolve",
    "residual",
)
