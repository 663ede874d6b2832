"""
Helmsman runner: dispatch one invocation and map failures to exit codes.

Runner.run()
1. require_program("version", "description").
2. Resolve the active command (Invocation, memoized).
3. Parse global then local switches over the residual arguments.
4. "--version" prints "<name> <version>" and exits 0; "--help" renders help
   for the active command (or global help) and exits 0.
5. With an active command: validate arity, dispatch the handler with
   (args, options, config). The built-in help command renders help instead.
   A group without a handler renders its own help.
   Without one: render global help.

Usage-shaped failures (unknown switch, invalid command, bad usage) leave
run() as a DeferredUsageError whose callback renders the active command's help
(or global help without the banner) to stderr.

Top level
- traceable(args): strip "--trace" when it appears before a literal "--".
- error_handler(trace, **options): classify whatever escapes the block,
  print the trace (when asked) and the single message line, then exit.

  | raised                      | surfaced as             | exit          |
  |-----------------------------|-------------------------|---------------|
  | DeferredUsageError          | usage + message         | 126           |
  | other CommandException      | message                 | its exit_code |
  | KeyboardInterrupt           | CommandInterrupt        | 130           |
  | any other Exception         | DelegatedCommandError   | 1 / exit_code |
"""
import contextlib
import copy
import sys

from rich.traceback import Traceback

from .faults import *
from .faults import console
from .help import HelpFormatter
from .parsing import TERMINATOR, parse
from .resolver import Invocation
from .utils import *

TRACE = "--trace"


class Runner:
    """
    One run of a program over an argument vector.

    Parameters
    - registry: finalized Registry.
    - args: argument vector without the program name.
    - formatter: HelpFormatter; built from the registry when omitted.
    """

    def __init__(self, registry, args, /, *, formatter=Unset):
        self.registry = registry
        self.invocation = Invocation(registry, args)
        self.formatter = coalesce(formatter, HelpFormatter(registry))
        self._active = None

    @property
    def active(self):
        """
        The active command once resolved, None before resolution or when none matched.
        """
        return self._active

    def require_program(self, *keys):
        """
        Raise CommandError when any program key is missing or empty.
        """
        for key in keys:
            if not self.registry.program.get(key):
                raise CommandError(f"program {key} required")

    def version(self):
        return self.formatter.render_version()

    def usage(self):
        """
        Print the usage text for the active command, or global help without banner.
        """
        if self._active is not None:
            renderable = self.formatter.render_command(self._active)
        else:
            renderable = self.formatter.render(banner=False)
        console.print("\nUsage:\n", renderable, highlight=False)

    def run_help_command(self, args, /):
        """
        Render global help, or help for the command named by `args` (multi-word allowed).
        """
        if not args:
            self.formatter.print(self.formatter.render())
            return
        if (command := self.registry.lookup(name := " ".join(args))) is None:
            raise InvalidCommandError(f"invalid command {name!r}", name=name)
        self.formatter.print(self.formatter.render_command(command))

    def run(self):
        self.require_program("version", "description")

        try:
            command = self._active = self.invocation.command

            arguments, options, faults = parse(
                self.registry.options,
                command.options if command is not None else (),
                self.invocation.residual,
            )
            if faults:
                raise faults[0]

            if options.version:
                self.formatter.print(self.version())
                sys.exit(0)
            elif options.help:
                self.run_help_command(command.words if command is not None else ())
                sys.exit(0)
            elif command is None:
                return self.run_help_command(())
            elif self.registry.builtin(command):
                return self.run_help_command(arguments)
            elif command.group and command.handler is Unset:
                command.validate(arguments)
                return self.run_help_command(command.words)

            return command.run(arguments, options, copy.copy(self.registry.program.get("config")))
        except USAGE_FAULTS as fault:
            raise DeferredUsageError(str(fault), fault=fault, usage=self.usage) from fault


def traceable(args, /):
    """
    Split off the "--trace" switch.

    Returns (args, trace). Only a "--trace" before the first "--" counts; the
    first such occurrence is removed, everything else is kept as typed.
    """
    args = list(args)
    for index, arg in enumerate(args):
        if arg == TERMINATOR:
            break
        if arg == TRACE:
            del args[index]
            return args, True
    return args, False


def classify(exception, /):
    """
    Map an exception escaping a run onto a CommandException.
    """
    match exception:
        case CommandException():
            return exception
        case KeyboardInterrupt():
            fault = CommandInterrupt("interrupted")
        case _:
            fault = DelegatedCommandError(str(exception) or type(exception).__name__, exception=exception)
    fault.__cause__ = exception
    return fault


@contextlib.contextmanager
def error_handler(trace=False, /, **options):
    """
    Surface anything escaping the block as one message line and exit.

    options are forwarded to trigger() (program, colorful, ...); shell mode is
    always on. SystemExit passes through untouched.
    """
    try:
        yield
    except (Exception, KeyboardInterrupt) as exception:
        if trace:
            console.print(Traceback.from_exception(type(exception), exception, exception.__traceback__))
        trigger(classify(exception), **options | {"shell": True})


__all__ = (
    "Runner",
    "traceable",
    "classify",
    "error_handler",
    "TRACE",
)
