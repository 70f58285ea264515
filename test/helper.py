"""
Helper module behavioral tests (help page content).

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with a StringIO-backed Console and colors disabled.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from argot import Command, Flag, Option, Collection, Set
from argot.helper import render


def _command(**kwargs):
    console = Console(file=io.StringIO(), width=120, color_system=None)
    command = Command("tool", "tool 1.0 - copies files", console=console, colorful=False, **kwargs)
    command.register("verbose", Flag(descr="print more"))
    command.register("retries", Option("3", metavar="COUNT", descr="attempts per file"))
    command.register("mode", Set(("fast", "safe"), "safe", descr="copy strategy"))
    command.register("source", Option(position=0, metavar="SRC"))
    command.register("files", Collection(required=True, metavar="FILE"))
    command.alias("verbose", "v")
    command.default = "files"
    command.example("copy two files", "-v a.txt b.txt")
    return command


def _help(command, *args):
    command.help(*args)
    return command.console.file.getvalue()


class TestHelper(TestCase):
    """Behavioral tests for the rendered help page."""

    def testInfoAndUsage(self):
        output = _help(_command())
        self.assertIn("tool 1.0 - copies files", output)
        self.assertIn(
            "usage: tool [-verbose] [-retries <COUNT>] [-mode {fast,safe}] [<SRC>] <FILE> ...",
            output,
        )

    def testSectionsByKind(self):
        output = _help(_command())
        for label in ("flags:", "options:", "collections:", "sets:"):
            with self.subTest(label=label):
                self.assertIn(label, output)
        self.assertLess(output.index("flags:"), output.index("options:"))
        self.assertLess(output.index("options:"), output.index("collections:"))
        self.assertLess(output.index("collections:"), output.index("sets:"))

    def testArgumentRows(self):
        output = _help(_command())
        self.assertIn("-verbose, -v", output)
        self.assertIn("print more", output)
        self.assertIn("-retries <COUNT>", output)
        self.assertIn("attempts per file (default: 3)", output)
        self.assertIn("copy strategy (default: safe)", output)
        self.assertIn("(required)", output)

    def testExamples(self):
        output = _help(_command())
        self.assertIn("examples:", output)
        self.assertIn("• copy two files", output)
        self.assertIn("tool -v a.txt b.txt", output)

    def testErrorLine(self):
        output = _help(_command(), "Unknown option: 'nope'")
        self.assertIn("error: Unknown option: 'nope'", output)

    def testPrefix(self):
        output = _help(_command(prefix="/"))
        self.assertIn("/verbose, /v", output)

    def testFancyPanel(self):
        output = _help(_command(fancy=True))
        self.assertIn("[ TOOL HELP ]", output)

    def testAliasedSetDefaultShowsChoices(self):
        console = Console(file=io.StringIO(), width=120, color_system=None)
        command = Command("tool", console=console, colorful=False)
        command.register("mode", Set(("fast", "safe")))
        command.alias("mode", "m")
        command.default = "m"
        output = _help(command)
        self.assertIn("usage: tool [{fast,safe}]", output)
        self.assertNotIn("<SET>", output)

    def testRenderReturnsRenderable(self):
        command = Command("bare", console=Console(file=io.StringIO(), width=120, color_system=None))
        console = Console(file=io.StringIO(), width=120, color_system=None)
        console.print(render(command))
        self.assertIn("usage: bare", console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
