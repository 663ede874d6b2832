"""
Helmsman command registry.

Two phases
- RegistryBuilder: mutable, filled in while the host declares its program
  (commands, aliases, default command, global options, program metadata).
- Registry: produced once by RegistryBuilder.build(); read-only for the whole
  run. Building injects the "help" command (unless the host declared its own)
  and freezes every command.

Aliases
- alias("i", "install", "--force") maps "i" to the command named "install"
  and records ("--force",) to be spliced in front of the residual arguments.
- Targets are resolved lazily: declaring an alias to a command that does not
  exist (yet) is fine; looking it up raises InvalidCommandError. An alias whose
  target is itself an alias counts as a missing target.
"""
import os
import sys
from collections.abc import Mapping
from types import MappingProxyType

from .commands import Command
from .faults import InvalidCommandError
from .options import OptionSpec
from .utils import *

HELP = "help"

PROGRAM_KEYS = frozenset((
    "name",
    "version",
    "description",
    "config",
    "colorful",
    "help",
))


def _normalize(name, /):
    if not isinstance(name, str):
        raise TypeError("command names must be strings")
    elif not (name := " ".join(name.split())):
        raise ValueError("command names cannot be empty")
    return name


class CommandMapping(Mapping):
    """
    Read-only view of commands and aliases by name.

    Alias entries resolve to their target command on access; a missing target
    raises InvalidCommandError rather than KeyError.
    """
    __slots__ = ("_commands", "_targets")

    def __init__(self, commands, targets, /):
        self._commands = commands
        self._targets = targets

    def __getitem__(self, name):
        if name in self._targets:
            target = self._targets[name]
            if target not in self._commands:
                raise InvalidCommandError(f"invalid command {target!r} aliased by {name!r}", name=name)
            return self._commands[target]
        return self._commands[name]

    def __iter__(self):
        yield from self._commands
        yield from self._targets

    def __len__(self):
        return len(self._commands) + len(self._targets)

    def __contains__(self, name):
        return name in self._commands or name in self._targets

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, self)))


class Registry(metaclass=IntrospectiveType):
    """
    Immutable registry used during dispatch.

    Fields
    - commands: CommandMapping of name → Command (aliases included, resolved lazily).
    - aliases: mapping alias → tuple of extra arguments.
    - targets: mapping alias → target command name.
    - default: default command name or None.
    - options: tuple of global OptionSpec.
    - program: mapping of program metadata (name, version, description, config, colorful, help).
    - builtins: names of the commands injected by the framework.
    """

    __introspectable__ = (
        "aliases",
        "targets",
        "default",
        "options",
        "program",
        "builtins",
    )

    __displayable__ = (
        "commands",
        "default",
        "options",
    )

    def __init__(self, commands, targets, aliases, default, options, program, builtins, /):
        self._table = MappingProxyType(commands)
        self._targets = MappingProxyType(targets)
        self._aliases = MappingProxyType(aliases)
        self._default = default
        self._options = tuple(options)
        self._program = MappingProxyType(program)
        self._builtins = frozenset(builtins)

    @property
    def commands(self):
        return CommandMapping(self._table, self._targets)

    @property
    def names(self):
        """
        Every resolvable name: command names followed by alias names.
        """
        return (*self._table, *self._targets)

    def lookup(self, name, /):
        """
        Return the command registered (or aliased) under `name`, or None.

        Raises InvalidCommandError when `name` is an alias with a missing target.
        """
        try:
            return self.commands[" ".join(name.split())]
        except KeyError:
            return None

    def alias(self, name, /):
        """
        True when `name` is an alias rather than a command name.
        """
        return name in self._targets

    def builtin(self, command, /):
        return command.name in self._builtins and self._table.get(command.name) is command

    def listing(self):
        """
        Visible commands for help rendering, sorted by (priority, name).
        """
        return sorted(
            command
            for command in self._table.values()
            if not command.hidden
        )


class RegistryBuilder:
    """
    Collects the program declaration and finalizes it into a Registry.

        >>> builder = RegistryBuilder()
        >>> builder.program(version="1.0.0", description="Demo")
        >>> install = builder.command("install gem")
        >>> builder.alias("ig", "install gem", "--force")
        >>> registry = builder.build()
    """

    def __init__(self):
        self._commands = {}
        self._targets = {}
        self._aliases = {}
        self._default = None
        self._options = []
        self._program = {
            "name": os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "",
            "config": {},
            "colorful": True,
            "help": {},
        }

    def command(self, name, /):
        """
        Create or return the command named `name` (idempotent).
        """
        name = _normalize(name)
        if name in self._targets:
            raise ValueError(f"command name {name!r} is already used by an alias")
        if name not in self._commands:
            self._commands[name] = Command(name)
        return self._commands[name]

    def alias(self, alias, target, /, *args):
        """
        Record `alias` → `target`, with `args` prepended to the residual
        arguments whenever the alias is invoked.
        """
        alias, target = _normalize(alias), _normalize(target)
        if alias in self._commands:
            raise ValueError(f"alias name {alias!r} is already used by a command")
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError("alias arguments must be strings")
        self._targets[alias] = target
        self._aliases[alias] = args

    def default(self, name, /):
        self._default = _normalize(name)

    def option(self, *args, **kwargs):
        """
        Declare a global option (same declaration style as Command.option).
        """
        spec = args[0] if len(args) == 1 and isinstance(args[0], OptionSpec) else OptionSpec.parse(*args, **kwargs)
        for other in self._options:
            if clash := set(other.names) & set(spec.names):
                raise ValueError(f"global switch {min(clash)!r} is already in use")
        self._options.append(spec)
        return spec

    def program(self, **metadata):
        """
        Merge program metadata. The `help` key merges extra help blocks
        (title → text) rather than replacing them.
        """
        if unknown := set(metadata) - PROGRAM_KEYS:
            raise TypeError("unknown program keys: %s" % ", ".join(sorted(unknown)))
        if "help" in metadata:
            if not isinstance(blocks := metadata.pop("help"), Mapping):
                raise TypeError("program 'help' must be a mapping of title to text")
            self._program["help"] = {**self._program["help"], **blocks}
        self._program.update(metadata)
        return MappingProxyType(self._program)

    def _help(self):
        name = self._program["name"]
        command = Command(
            HELP,
            syntax=f"{name} {HELP} [command]",
            descr="Display global or [command] help documentation",
        )
        command.example("Display global help", f"{name} {HELP}")
        command.example("Display help for 'foo'", f"{name} {HELP} foo")
        return command

    def build(self):
        """
        Finalize into a Registry: inject "help", nest commands under the
        commands whose name prefixes theirs, freeze every command.
        """
        commands = dict(self._commands)
        builtins = set()
        if HELP not in commands and HELP not in self._targets:
            commands[HELP] = self._help()
            builtins.add(HELP)

        for command in commands.values():
            nested = {name for name in commands if name.startswith(command.name + " ")}
            if nested - set(command.subcommands):
                command.nest(*nested)
            command.freeze()

        return Registry(
            commands,
            dict(self._targets),
            dict(self._aliases),
            self._default,
            self._options,
            {**self._program, "help": dict(self._program["help"])},
            builtins,
        )


__all__ = (
    "Registry",
    "RegistryBuilder",
    "CommandMapping",
    "HELP",
)
