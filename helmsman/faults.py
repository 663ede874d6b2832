"""
Helmsman faults (failure kinds, exit codes) and rendering.

Scope
- CommandException: base type carrying message + options; knows its exit code
  and how to render itself as the single “<program>: <message>” line.
- Failure kinds
  • UnknownSwitchError    → undeclared switch (exit 126, usage deferred)
  • InvalidCommandError   → resolved name not found in the registry (exit 126)
  • CommandUsageError     → arity mismatch and bad switch values (exit 126)
  • CommandInterrupt      → user cancel signal (exit 130)
  • DelegatedCommandError → anything else raised by a handler (exit 1 or its own exit_code)
- DeferredUsageError: wraps a usage-shaped failure together with a callback that
  renders usage text; the callback runs at top level, never inside the resolver.
- trigger(): central entry point to surface any fault.

Integration
- Low-level layers (resolver, parser, validator) only raise.
- The runner classifies and calls trigger(fault, shell=True, ...) which prints
  the usage (if deferred), then the message line to stderr, then exits.
- Outside shell mode trigger() re-raises, which keeps tests and embedding simple.
"""
import sys
from collections import defaultdict
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class CommandException(Exception):
    """
    Base of every classified failure.

    Class attributes
    - exit_code: process exit status used when the fault is triggered in shell mode.

    Options (immutable mapping, merged through __replace__)
    - program: str, prefix of the rendered line.
    - shell: bool, print and exit instead of raising.
    - colorful: bool, apply the style palette.
    - anything else the raiser wants to attach (input, command, ...).
    """
    exit_code = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "#2794d8",
            "error-message": "bold red",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        program = getattr(main, "__prog__", self.options.get("program") or "")

        if not program:
            return text(self, "error-message")
        return Text.assemble(text(program, "prog-name"), ": ", text(self, "error-message"))

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self, highlight=False, soft_wrap=True)
        sys.exit(self.exit_code)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replacement = type(self)(self.message, **{**self.options, **overrides})
        replacement.__cause__ = self.__cause__
        replacement.__traceback__ = self.__traceback__
        return replacement


class CommandError(CommandException):
    """
    Framework or program-level failure (missing program metadata, handler-less command).
    """


class UnknownSwitchError(CommandException):
    """
    A switch that neither the global nor the command options declare.

    options
    - input: the offending token exactly as typed.
    """
    exit_code = 126

    @property
    def input(self):
        return self.options.get("input")


class InvalidCommandError(CommandException):
    exit_code = 126


class CommandUsageError(CommandException):
    exit_code = 126


class MissingArgumentError(CommandUsageError):
    """
    A value-bearing switch given without its value.
    """


class InvalidArgumentError(CommandUsageError):
    """
    A switch value that fails conversion, lies outside its choices, or is given to a flag.
    """


class DelegatedCommandError(CommandException):
    """
    Anything a handler raised that is not a classified fault.

    The exit code is the wrapped exception's own `exit_code` attribute when it
    exposes one, otherwise 1.
    """

    @property
    def exit_code(self):
        try:
            return int(getattr(self.options["exception"], "exit_code"))
        except (KeyError, AttributeError, TypeError, ValueError):
            return 1


class CommandInterrupt(CommandException):
    exit_code = 130


class DeferredUsageError(CommandException):
    """
    Usage-shaped failure whose usage text is rendered at top level.

    options
    - fault: the wrapped UnknownSwitchError/InvalidCommandError/CommandUsageError.
    - usage: zero-argument callable printing the command (or global) usage.

    Triggering runs the usage callback first, then prints the message line,
    then exits 126.
    """
    exit_code = 126

    def __call__(self):
        if usage := self.options.get("usage"):
            usage()

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        self()
        console.print(self, highlight=False, soft_wrap=True)
        sys.exit(self.exit_code)


USAGE_FAULTS = (UnknownSwitchError, InvalidCommandError, CommandUsageError)
"""
The usage-shaped kinds: these are always surfaced together with usage text.
"""


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into a copy of the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the stderr console followed by sys.exit;
      otherwise the fault is raised.

    typical options
    - program, shell, colorful, and any context the renderer may want (input, command, ...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "CommandException",
    "CommandError",
    "UnknownSwitchError",
    "InvalidCommandError",
    "CommandUsageError",
    "MissingArgumentError",
    "InvalidArgumentError",
    "DelegatedCommandError",
    "CommandInterrupt",
    "DeferredUsageError",
    "USAGE_FAULTS",
    "trigger",
)
