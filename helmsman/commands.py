"""
Helmsman command layer: declare commands, validate positional arity, dispatch handlers.

What this module provides
- Command: a named unit bundling
  • a syntax string ("prog install gem <name> [version] [extras...]"),
  • display metadata (descr, summary, examples, priority, hidden),
  • an ordered list of OptionSpec,
  • a handler reference.
- Handler references (closed variant, see dispatch())
  • a plain callable                    → handler(args, options, config)
  • InstanceMethod(object, "method")    → object.method(args, options, config)
  • ClassCtor(cls, "method")            → cls().method(args, options, config)
- dispatch(handler, args, options, config): the single resolution point.

Lifecycle
- A Command is created once at registration time and accumulates options and
  examples while the host sets it up. Once the registry is finalized the
  command is frozen: further mutation raises AttributeError.

Arity
- Syntax tokens following the command's full name describe the positionals
  (the program name may repeat a command word: "gem install gem <name>").
  "[x]" is optional; a token ending in "..." or "...]" is variadic.
- validate(args) raises CommandUsageError on too many/too few arguments. The
  help command is exempt.

Groups
- A command whose name is a prefix of other commands ("remote" for
  "remote add", "remote remove") is a group. The registry records the nested
  command names on it when finalized. Excess arguments on a group are
  reported as an unrecognised sub-command, and a group without a syntax
  accepts no positionals.

Quick start
    from helmsman.commands import Command

    install = Command("install gem", syntax="prog install gem <name> [version]")
    install.option("-f", "--force", "overwrite an existing install")

    @install.when_called
    def install_gem(args, options, config):
        ...

    install.run(["rake"], {}, None)
"""
import builtins
import functools
from collections import namedtuple

from rich.text import Text

from .faults import CommandError, CommandUsageError
from .options import OptionSpec
from .utils import *

InstanceMethod = namedtuple("InstanceMethod", ("object", "method"))
InstanceMethod.__doc__ = "Handler bound to an existing object: object.method(args, options, config)."

ClassCtor = namedtuple("ClassCtor", ("cls", "method"))
ClassCtor.__doc__ = "Handler class instantiated per dispatch: cls().method(args, options, config)."


def reference(*args):
    """
    Build a handler reference from the when_called(...) argument shapes.

    - (callable,)            → the callable itself (classes become ClassCtor(cls, "__call__"))
    - (object, "method")     → InstanceMethod(object, "method")
    - (cls, "method")        → ClassCtor(cls, "method")
    - (object,)              → InstanceMethod(object, "call") when object is not callable

    Raises
    - TypeError: no arguments, too many arguments, or a non-string method name.
    """
    match args:
        case ():
            raise TypeError("when_called() must be given an object, a class, or a callable")
        case (builtins.type() as cls,):
            return ClassCtor(cls, "__call__")
        case (handler,) if callable(handler):
            return handler
        case (object,):
            return InstanceMethod(object, "call")
        case (builtins.type() as cls, str(method)):
            return ClassCtor(cls, method)
        case (object, str(method)):
            return InstanceMethod(object, method)
        case (_, _):
            raise TypeError("when_called() method name must be a string")
        case _:
            raise TypeError("when_called() takes 1 to 2 arguments but %d were given" % len(args))


def dispatch(handler, args, options, config, /):
    """
    Invoke a handler reference with (args, options, config).

    The match is exhaustive over the handler variants; anything else is a
    programming error and raises TypeError.
    """
    match handler:
        case InstanceMethod(object, method):
            return getattr(object, method)(args, options, config)
        case ClassCtor(cls, method):
            return getattr(cls(), method)(args, options, config)
        case _ if callable(handler):
            return handler(args, options, config)
        case _:
            raise TypeError(f"unsupported handler reference {handler!r}")


@functools.total_ordering
class Command(metaclass=IntrospectiveType):
    """
    A registered command.

    Fields (read through properties; the writable ones accept assignment until
    the command is frozen)
    - name: str, words joined by single spaces ("install gem").
    - words: tuple[str, ...], the name tokens.
    - primary: str, the last word (used in usage messages).
    - syntax: str | None, usage template whose tokens after the command name are positionals.
    - descr / summary: display text.
    - examples: list of (description, command) pairs.
    - priority: int, display ordering only (ties broken by name).
    - hidden: bool, suppressed from general listings.
    - options: list of OptionSpec in declaration order.
    - handler: handler reference, Unset until when_called() is used.
    - subcommands: tuple[str, ...], names of the commands nested under this one.
    """

    __introspectable__ = (
        "name",
        "words",
        "syntax",
        "descr",
        "summary",
        "examples",
        "priority",
        "hidden",
        "options",
        "handler",
        "subcommands",
    )

    __writable__ = (
        "syntax",
        "descr",
        "summary",
        "priority",
        "hidden",
    )

    __displayable__ = (
        "name",
        "syntax",
        "priority",
        "hidden",
    )

    def __init__(self, name, /, syntax=Unset, descr=Unset, summary=Unset, *, priority=0, hidden=False):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not (words := tuple(name.split())):
            raise ValueError(f"{type(self).__typename__} 'name' cannot be empty")
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise TypeError(f"{type(self).__typename__} 'priority' must be an integer")

        self._frozen = False
        self._name = " ".join(words)
        self._words = words
        self._syntax = coalesce(syntax)
        self._descr = coalesce(descr)
        self._summary = coalesce(summary)
        self._examples = []
        self._priority = priority
        self._hidden = bool(hidden)
        self._options = []
        self._handler = Unset
        self._subcommands = ()

    @property
    def primary(self):
        return self._words[-1]

    @property
    def group(self):
        return bool(self._subcommands)

    @property
    def frozen(self):
        return self._frozen

    def freeze(self):
        """
        Lock the command; called when the registry is finalized.
        """
        self._frozen = True
        return self

    def nest(self, *names):
        """
        Record the names of the commands nested under this one, making it a group.
        """
        self._ensure_mutable("nest commands")
        for name in names:
            if not " ".join(name.split()).startswith(self._name + " "):
                raise ValueError(f"{type(self).__typename__} {name!r} is not nested under {self._name!r}")
        self._subcommands = tuple(sorted(set(self._subcommands) | {" ".join(name.split()) for name in names}))

    def _ensure_mutable(self, operation):
        if self._frozen:
            raise AttributeError(f"{type(self).__typename__} {self._name!r} is frozen, cannot {operation}")

    def option(self, *args, **kwargs):
        """
        Declare a command option.

        Accepts the positional declaration style: switch strings followed by an
        optional description, e.g. option("-f", "--file FILE", "input file",
        default="a.txt"). Keyword arguments are forwarded to OptionSpec.

        Returns the built OptionSpec.

        Raises
        - ValueError when a concrete switch is already declared by another option.
        """
        self._ensure_mutable("add options")
        spec = args[0] if len(args) == 1 and isinstance(args[0], OptionSpec) else OptionSpec.parse(*args, **kwargs)
        for other in self._options:
            if clash := set(other.names) & set(spec.names):
                raise ValueError(f"{type(self).__typename__} {self._name!r} switch {min(clash)!r} is already in use")
        self._options.append(spec)
        return spec

    def example(self, description, command, /):
        """
        Add a usage example, displayed by the help formatter.
        """
        self._ensure_mutable("add examples")
        for value in (description, command):
            if not isinstance(value, str | Text):
                raise TypeError(f"{type(self).__typename__} examples must be strings")
        self._examples.append((description, command))

    def when_called(self, *args):
        """
        Attach the handler.

        Forms
        - when_called(function)               (also usable as a decorator)
        - when_called(object, "method")
        - when_called(HandlerClass, "method") (instantiated per dispatch)

        Returns the first argument so the decorator form keeps the function.
        """
        self._ensure_mutable("change its handler")
        self._handler = reference(*args)
        return args[0]

    action = when_called

    @property
    def syntax_parts(self):
        """
        Positional tokens of the syntax: everything after the command's own
        (possibly multi-word) name.

        "gem install gem <name>" for "install gem" yields ["<name>"]. When the
        full name does not appear, everything after the first primary word is
        used instead; when neither appears, no tokens remain.
        """
        parts = (self._syntax or "").split()
        span = len(self._words)
        for index in range(len(parts) - span + 1):
            if tuple(parts[index:index + span]) == self._words:
                return parts[index + span:]
        while parts:
            part = parts.pop(0)
            if part == self.primary or not parts:
                break
        return parts

    @property
    def total_argument_count(self):
        return len(self.syntax_parts)

    @property
    def optional_argument_count(self):
        return sum(1 for part in self.syntax_parts if part.startswith("[") and part.endswith("]"))

    @property
    def required_argument_count(self):
        return self.total_argument_count - self.optional_argument_count

    @property
    def variadic(self):
        return any(part.endswith(("...]", "...")) for part in self.syntax_parts)

    def too_many_args(self, args, /):
        return not self.variadic and len(args) > self.total_argument_count

    def too_few_args(self, args, /):
        return len(args) < self.required_argument_count

    def validate(self, args, /):
        """
        Check the positional count against the syntax.

        Raises
        - CommandUsageError: excess or insufficient arguments. On a group the
          first excess argument is reported as an unrecognised sub-command.

        Commands without a syntax, and the help command, are not validated;
        a group without a syntax accepts no positionals.
        """
        if self.primary == "help" or (self._syntax is None and not self.group):
            return
        if self.too_many_args(args) and self.group:
            choices = ", ".join(name[len(self._name) + 1:] for name in self._subcommands)
            raise CommandUsageError(
                f"unrecognised command {args[self.total_argument_count]!r} for {self._name!r}, select from: {choices}",
                command=self,
            )
        elif self.too_many_args(args):
            raise CommandUsageError(f"excess arguments for command {self.primary!r}", command=self)
        if self.too_few_args(args):
            raise CommandUsageError(f"insufficient arguments for command {self.primary!r}", command=self)

    def run(self, args, options, config, /):
        """
        Validate arity, then dispatch to the handler with (args, options, config).
        """
        self.validate(args)
        if self._handler is Unset:
            raise CommandError(f"command {self._name!r} has no handler", command=self)
        return dispatch(self._handler, list(args), options, config)

    def __lt__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return (self._priority, self._name) < (other._priority, other._name)


__all__ = (
    "Command",
    "InstanceMethod",
    "ClassCtor",
    "reference",
    "dispatch",
)
