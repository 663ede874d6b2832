"""
Helmsman help rendering (rich).

HelpFormatter turns a Registry into console renderables:
- render(): global help. Program banner (name, version, description), the
  visible commands sorted by (priority, name), the global options and the
  extra help blocks declared with program(help={...}). With banner=False the
  banner is omitted (used as usage text after a failure).
- render_command(command): usage line from the command syntax, description,
  nested commands (for groups), options and examples.
- render_version(): "<name> <version>".

Styling
- Palette keys: program-name, program-version, description-section,
  usage-label, usage-section, group-label, command-name, command-summary,
  option-name, metavar, argument-description, examples-label, examples-dot,
  example, example-command, block-label, block-section.
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .utils import *


class HelpFormatter:
    """
    Render global and per-command help for a registry.

    Parameters
    - registry: Registry to describe.
    - colorful: apply the style palette (defaults to the program's `colorful`).
    - console: Console used by print(); a stdout Console by default.
    """

    def __init__(self, registry, /, *, colorful=Unset, console=Unset):
        self.registry = registry
        self.colorful = coalesce(colorful, registry.program.get("colorful", True))
        self.console = coalesce(console, Console())
        self.styles = defaultdict(str, {
            "program-name": "bold #2794d8",
            "program-version": "bold #00E6FF",
            "description-section": "italic #A3A3A3",

            "usage-label": "bold #00E6FF",
            "usage-section": "bold #36C5F0",

            "group-label": "bold #FFFFFF",
            "command-name": "bold #36C5F0",
            "command-summary": "#9CA3AF",
            "commands-table": "#4B5563",

            "option-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "argument-description": "#9CA3AF",

            "examples-label": "bold #22C55E",
            "examples-dot": "#22C55E dim",
            "example": "#E5E7EB",
            "example-command": "bold #E5E7EB",

            "block-label": "bold #FFFFFF",
            "block-section": "#D1D5DB",
        } | getattr(__import__("__main__"), "__styles__", {}))

    @property
    def name(self):
        return self.registry.program.get("name") or ""

    def styler(self, style):
        return self.styles[style] if self.colorful else ""

    def text(self, fragment, style=""):
        if isinstance(fragment, Text):
            return fragment if self.colorful else Text(fragment.plain)
        return Text(str(fragment), self.styler(style))

    def switches(self, spec):
        """
        "-f, --file FILE" styled: names in option-name, metavar in metavar.
        """
        section = Text(", ").join(self.text(switch.split(" ", 1)[0].split("=", 1)[0], "option-name") for switch in spec.switches)
        if spec.metavar:
            section.append(" ").append(self.text(spec.metavar, "metavar"))
        return section

    def options(self, label, specs):
        """
        Two-column table of switches and descriptions, or None when empty.
        """
        if not specs:
            return None
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for spec in specs:
            table.add_row(Text("  ") + self.switches(spec), self.text(spec.descr or "", "argument-description"))
        return Group(Text.assemble(self.text(label, "group-label"), ":"), table, Text())

    def render_version(self):
        return Text(" ").join((
            self.text(self.name, "program-name"),
            self.text(self.registry.program.get("version") or "", "program-version"),
        ))

    def render(self, *, banner=True):
        """
        Global help renderable.
        """
        renders = []

        if banner:
            head = Text()
            head.append(self.text(self.name, "program-name"))
            if version := self.registry.program.get("version"):
                head.append(" ").append(self.text(version, "program-version"))
            renders.append(head)
            if description := self.registry.program.get("description"):
                renders.append(self.text(description, "description-section"))
            renders.append(Text())

        usage = Text()
        usage.append(self.text("usage", "usage-label")).append(": ")
        usage.append(self.text(f"{self.name} <command> [options] [arguments]", "usage-section"))
        renders.append(usage)
        renders.append(Text())

        if commands := self.registry.listing():
            table = Table(
                "command", "summary",
                title=self.text("commands", "group-label"),
                title_justify="left",
                box=ROUNDED,
                style=self.styler("commands-table"),
                header_style=self.styler("group-label"),
            )
            for command in commands:
                table.add_row(
                    self.text(command.name, "command-name"),
                    self.text(command.summary or command.descr or "", "command-summary"),
                )
            renders.append(table)
            renders.append(Text())

        if aliases := self.registry.targets:
            section = Text.assemble(self.text("aliases", "group-label"), ":\n")
            for alias, target in aliases.items():
                section.append("  ").append(self.text(alias, "command-name")).append(" → ")
                section.append(Text(" ").join(self.text(word, "command-summary") for word in (target, *self.registry.aliases[alias])))
                section.append("\n")
            renders.append(section)

        if options := self.options("global options", self.registry.options):
            renders.append(options)

        for title, block in self.registry.program.get("help", {}).items():
            renders.append(Text.assemble(self.text(title, "block-label"), ":"))
            renders.append(Text("  ") + self.text(block, "block-section"))
            renders.append(Text())

        return Group(*renders)

    def render_command(self, command, /):
        """
        Per-command help renderable.
        """
        renders = []

        usage = Text()
        usage.append(self.text("usage", "usage-label")).append(": ")
        usage.append(self.text(command.syntax or f"{self.name} {command.name}", "usage-section"))
        renders.append(usage)
        renders.append(Text())

        if descr := command.descr or command.summary:
            renders.append(self.text(descr, "description-section"))
            renders.append(Text())

        if nested := [other for name in command.subcommands if (other := self.registry.lookup(name)) and not other.hidden]:
            table = Table.grid(padding=(0, 2))
            table.add_column(no_wrap=True)
            table.add_column()
            for other in nested:
                table.add_row(
                    Text("  ") + self.text(" ".join(other.words[len(command.words):]), "command-name"),
                    self.text(other.summary or other.descr or "", "command-summary"),
                )
            renders.append(Group(Text.assemble(self.text("commands", "group-label"), ":"), table, Text()))

        if options := self.options("options", command.options):
            renders.append(options)

        if command.examples:
            dot = self.text(" • ", "examples-dot")
            examples = Text.assemble(self.text("examples", "examples-label"), ":\n")
            for description, example in command.examples:
                examples.append(dot).append(self.text(description, "example")).append("\n")
                examples.append(" " * len(dot) * 2).append(self.text(example, "example-command")).append("\n")
            renders.append(examples)

        return Group(*renders)

    def print(self, renderable, /):
        self.console.print(renderable, highlight=False)


__all__ = (
    "HelpFormatter",
)
