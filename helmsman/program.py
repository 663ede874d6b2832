"""
Helmsman program façade.

Program is what a host script talks to:

    from helmsman import Program

    app = Program("gem", version="1.0.0", description="Gem manager")
    app.global_option("--verbose", "Print more")

    install = app.command("install gem", syntax="gem install gem <name> [version]", summary="Install a gem")
    install.option("-f", "--force", "Overwrite an existing install")

    @install.when_called
    def install_gem(args, options, config):
        ...

    app.alias_command("ig", "install gem", "--force")
    app.default_command("install gem")

    if __name__ == "__main__":
        app.run()

run() executes with error handling (message line + exit code); execute()
lets every exception propagate to the caller.
"""
import sys

from .registry import RegistryBuilder
from .runner import Runner, traceable, error_handler
from .utils import *


class Program:
    """
    Builder façade over RegistryBuilder plus the run entry points.

    Parameters
    - name: program name shown in help and error lines (defaults to the
      executable's base name).
    - metadata: forwarded to program() (version, description, config, colorful, help).
    """

    def __init__(self, name=Unset, /, **metadata):
        self._builder = RegistryBuilder()
        self._builder.option("-h", "--help", "Display help documentation")
        self._builder.option("--version", "Display version information")
        if name is not Unset:
            metadata["name"] = name
        self.program(**metadata)

    def program(self, **metadata):
        """
        Set program metadata; returns the current (read-only) metadata mapping.

        Keys: name, version (required to run), description (required to run),
        config (handed to handlers as a shallow copy), colorful, help (extra
        help blocks, title → text, merged across calls).
        """
        return self._builder.program(**metadata)

    def command(self, name, /, **attributes):
        """
        Create or return the command `name`; `attributes` (syntax, descr,
        summary, priority, hidden) are assigned on it.
        """
        command = self._builder.command(name)
        for attribute, value in attributes.items():
            if attribute not in type(command).__writable__:
                raise TypeError(f"command() got an unexpected keyword argument {attribute!r}")
            setattr(command, attribute, value)
        return command

    def global_option(self, *args, **kwargs):
        return self._builder.option(*args, **kwargs)

    def alias_command(self, alias, name, /, *args):
        """
        Make `alias` invoke `name` with `args` in front of the user's arguments.
        """
        self._builder.alias(alias, name, *args)

    def default_command(self, name, /):
        self._builder.default(name)

    def build(self):
        return self._builder.build()

    def execute(self, args=Unset, /):
        """
        Run without error handling: faults and handler exceptions propagate.
        """
        return Runner(self.build(), list(coalesce(args, sys.argv[1:]))).run()

    def run(self, args=Unset, /):
        """
        Run with error handling: "--trace" (before "--") prints the failure
        chain, every failure prints "<program>: <message>" and exits with its code.
        """
        args, trace = traceable(coalesce(args, sys.argv[1:]))
        metadata = self.program()
        with error_handler(trace, program=metadata["name"], colorful=metadata["colorful"]):
            return self.execute(args)


__all__ = (
    "Program",
)
