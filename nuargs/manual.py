"""
nuargs manual: help and version rendering.

The Manual turns a Schema into rich renderables and prints them to the console
it is handed, so the parse engine never writes to a global stream.

Layout
- full help: about, usage, commands (built-in 'help' and 'version' first),
  options, then any extra section with its header upper-cased.
- command help: usage with the required metavars, description, required
  options, other options.
- version: "<prog> — <version>".

Styling
- Palette keys: about-section, usage-label, program-name, usage-section,
  group-label, command-name, option-name, flag-name, metavar,
  greedy-metavar, argument-description, default-label, default-value,
  section-label, section, program-version, panel-title.
- Define a mapping named __styles__ in __main__ to override any palette entry.
- colorful=False strips every style; fancy=True wraps the output in a panel.
"""
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import OptionKind

BUILTINS = (
    ("help", "show this help, or the help of the given command"),
    ("version", "show the program version"),
)


class Manual:
    """
    Help and version renderer for one schema.
    """

    def __init__(self, schema, /, *, colorful=False, fancy=False):
        self.schema = schema
        self.colorful = bool(colorful)
        self.fancy = bool(fancy)

    def _palette(self):
        styles = defaultdict(str, {
            # head
            "about-section": "italic #A3A3A3",
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",

            # groups
            "group-label": "bold #FFFFFF",
            "command-name": "bold #36C5F0",
            "option-name": "bold #00E6FF",
            "flag-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "greedy-metavar": "bold italic #FFD600",
            "argument-description": "#9CA3AF",
            "default-label": "dim",
            "default-value": "#E5E7EB",

            # extra sections
            "section-label": "bold #FFFFFF",
            "section": "#D1D5DB",

            # version
            "program-version": "bold #00E6FF",

            # panel
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        return styler, text

    def _metavar(self, option, /):
        styler, text = self._palette()
        if option.kind is OptionKind.MULTIPLE_VALUES:
            return text(option.metavar + "...", styler("greedy-metavar"))
        return text(option.metavar, styler("metavar"))

    def _options(self, identifiers, /):
        """
        Two-column grid listing the given options.
        """
        styler, text = self._palette()
        grid = Table.grid(padding=(0, 3))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for identifier in identifiers:
            option = self.schema.options[identifier]
            style = styler("flag-name" if option.kind is OptionKind.FLAG else "option-name")
            names = Text(", ").join(text(spelling, style) for spelling in option.spellings())
            if option.kind is not OptionKind.FLAG:
                names = Text.assemble(names, " ", self._metavar(option))
            descr = text(option.descr, styler("argument-description"))
            if option.default is not None:
                descr = Text.assemble(
                    descr,
                    " ",
                    text("(default: ", styler("default-label")),
                    text(repr(option.default), styler("default-value")),
                    text(")", styler("default-label")),
                )
            grid.add_row(Text("  ") + names, descr)
        return grid

    def _group(self, label, /):
        styler, text = self._palette()
        return Text.assemble("\n", text(label, styler("group-label")), ":")

    def _print(self, console, renders, title, /):
        styler, text = self._palette()
        renderable = Group(*renders)
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", title.upper(), " ]", style=styler("panel-title")),
                title_align="left",
            )
        console.print(renderable)

    def help(self, console, command=None, /):
        """
        Print the full help, or the help of `command` (a command identifier).
        """
        if command is not None:
            return self._command(console, command)

        styler, text = self._palette()
        prog = self.schema.prog
        renders = []

        if self.schema.about:
            renders.append(text(self.schema.about, styler("about-section")))
            renders.append(Text(""))

        renders.append(Text.assemble(
            text("usage", styler("usage-label")),
            ": ",
            text(prog, styler("program-name")),
            " ",
            text("<COMMAND> [OPTIONS...]", styler("usage-section")),
        ))

        renders.append(self._group("commands"))
        grid = Table.grid(padding=(0, 3))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for name, descr in BUILTINS:
            grid.add_row(Text("  ") + text(name, styler("command-name")), text(descr, styler("argument-description")))
        for command in self.schema.commands.values():
            grid.add_row(
                Text("  ") + text(command.name, styler("command-name")),
                text(command.descr, styler("argument-description")),
            )
        renders.append(grid)

        if self.schema.options:
            renders.append(self._group("options"))
            renders.append(self._options(self.schema.options))

        for header, section in self.schema.sections.items():
            renders.append(Text.assemble("\n", text(header.upper(), styler("section-label")), ":"))
            renders.append(Text("  ") + text(section, styler("section")))

        self._print(console, renders, f"{prog} help")

    def _command(self, console, command, /):
        styler, text = self._palette()
        prog = self.schema.prog
        spec = self.schema.commands[command]
        required = spec.required

        usage = Text.assemble(
            text("usage", styler("usage-label")),
            ": ",
            text(prog, styler("program-name")),
            " ",
            text(spec.name, styler("command-name")),
        )
        for identifier in required:
            usage.append(" ").append(self._metavar(self.schema.options[identifier]))
        usage.append(" ").append(text("[OPTIONS...]", styler("usage-section")))

        renders = [usage, Text(""), text(spec.descr, styler("argument-description"))]

        if required:
            renders.append(self._group("required"))
            renders.append(self._options(required))

        if others := [identifier for identifier in self.schema.options if identifier not in required]:
            renders.append(self._group("options"))
            renders.append(self._options(others))

        self._print(console, renders, f"{prog} {spec.name} help")

    def version(self, console, /):
        """
        Print "<prog> — <version>".
        """
        styler, text = self._palette()
        line = Text(" — ").join((
            text(self.schema.prog, styler("program-name")),
            text(self.schema.version, styler("program-version")),
        ))
        self._print(console, [line], f"{self.schema.prog} version")


__all__ = (
    "Manual",
)
