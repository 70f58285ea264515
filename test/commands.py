"""
Commands module behavioral tests (resolution, validation, processing, entry point).

Scope
- Validate every accepted spelling of flags and options.
- Validate collections, aliases, positional and default arguments.
- Validate soft faults (unknown, missing, invalid) and their de-duplication.
- Validate processors, invoke() in library and shell mode, and configuration.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Command, invoke, Flag, Option, Collection, Set).
- Console output is captured with a StringIO-backed rich Console.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase
from unittest import mock

from rich.console import Console

from argot import Command, invoke, Flag, Option, Collection, Set
from argot import ArgumentNotFoundError, CommandExit, UnknownOptionError, MissingValueError


def _command(*args, **kwargs):
    console = Console(file=io.StringIO(), width=120, color_system=None)
    return Command("tool", *args, console=console, colorful=False, **kwargs)


class TestCommandResolution(TestCase):
    """Behavioral tests for flags, options and collections."""

    def testFlagSpellings(self):
        command = _command()
        command.register("flag", Flag())

        self.assertEqual(command.resolve(""), (True, []))
        self.assertFalse(command.getvalue("flag"))

        for prompt in ("-flag", "--flag", "/flag"):
            with self.subTest(prompt=prompt):
                self.assertTrue(command.resolve(prompt)[0])
                self.assertTrue(command.getvalue("flag"))

    def testOptionSpellings(self):
        command = _command()
        command.register("option", Option("123"))

        self.assertTrue(command.resolve("")[0])
        self.assertEqual(command.getvalue("option"), "123")

        for prompt in (
            "/option=42", "/option:42", "/option 42",
            "--option=42", "--option:42", "--option 42",
            "-option=42", "-option:42", "-option 42",
        ):
            with self.subTest(prompt=prompt):
                self.assertTrue(command.resolve(prompt)[0])
                self.assertEqual(command.getvalue("option"), "42")

    def testLaterOptionWins(self):
        command = _command()
        command.register("option", Option("123"))
        self.assertTrue(command.resolve("-option:42 /option=444")[0])
        self.assertEqual(command.getvalue("option"), "444")

    def testInlineValueKeepsSeparators(self):
        command = _command()
        command.register("define", Option())
        self.assertTrue(command.resolve("-define:key=value")[0])
        self.assertEqual(command.getvalue("define"), "key=value")

    def testQuotedValue(self):
        command = _command()
        command.register("message", Option())
        self.assertTrue(command.resolve("-message 'hello world'")[0])
        self.assertEqual(command.getvalue("message"), "hello world")

    def testCollectionAccumulates(self):
        command = _command()
        command.register("option", Collection())

        self.assertTrue(command.resolve("/option=value1")[0])
        self.assertEqual(command.getvalue("option"), ["value1"])

        self.assertTrue(command.resolve("/option=value1 --option=value2")[0])
        self.assertEqual(command.getvalue("option"), ["value1", "value2"])

        self.assertTrue(command.resolve("")[0])
        self.assertEqual(command.getvalue("option"), [])

    def testResolveIsRepeatable(self):
        command = _command()
        command.register("flag", Flag())
        command.register("option", Option())
        command.register("items", Collection())

        prompt = "-flag -option=a -items=x -items=y -nope"
        first = command.resolve(prompt)
        values = [command.getvalue(name) for name in ("flag", "option", "items")]
        self.assertEqual(command.resolve(prompt), first)
        self.assertEqual([command.getvalue(name) for name in ("flag", "option", "items")], values)

    def testIterablePrompt(self):
        command = _command()
        command.register("message", Option())
        command.register("flag", Flag())
        self.assertTrue(command.resolve(["-message", "  hello world ", "", "-flag"])[0])
        self.assertEqual(command.getvalue("message"), "hello world")
        self.assertTrue(command.getvalue("flag"))

    def testInvalidPromptTypes(self):
        command = _command()
        with self.assertRaises(TypeError):
            command.resolve(42)  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            command.resolve(["-flag", 42])  # type: ignore[list-item]


class TestCommandAliases(TestCase):
    """Behavioral tests for aliases."""

    def testAliasSharesState(self):
        command = _command()
        command.register("flag", Flag(False))
        command.alias("flag", "alias")

        self.assertTrue(command.resolve("")[0])
        self.assertFalse(command.getvalue("alias"))

        self.assertTrue(command.resolve("-alias")[0])
        self.assertTrue(command.getvalue("alias"))
        self.assertTrue(command.getvalue("flag"))

    def testAliasOfUnknownRaises(self):
        with self.assertRaises(ArgumentNotFoundError):
            _command().alias("nonexisting", "test")

    def testAliasSatisfiesRequiredFlag(self):
        command = _command()
        command.register("flag", Flag(False, required=True))
        command.alias("flag", "alias")
        self.assertTrue(command.resolve("-alias")[0])

    def testAliasValidatedOnce(self):
        command = _command()
        command.register("count", Option(validator=str.isdigit))
        command.alias("count", "c")
        self.assertEqual(command.resolve("-c=x"), (False, ["count: Invalid value 'x'"]))


class TestCommandFaults(TestCase):
    """Behavioral tests for soft faults and validation."""

    def testRequiredFlagMissing(self):
        command = _command()
        command.register("flag", Flag(True, required=True))
        self.assertEqual(command.resolve(""), (False, ["Missing value for option 'flag'"]))

    def testRequiredOptionSkipsValidation(self):
        command = _command()
        command.register("count", Option(required=True, validator=str.isdigit))
        self.assertEqual(command.resolve(""), (False, ["Missing value for option 'count'"]))

    def testUnknownOptionDoesNotStopResolution(self):
        command = _command()
        command.register("flag", Flag())
        self.assertEqual(command.resolve("-nope -flag"), (False, ["Unknown option: 'nope'"]))
        self.assertTrue(command.getvalue("flag"))
        self.assertIsInstance(command.faults[0], UnknownOptionError)

    def testErrorsAreDistinctInFirstOccurrenceOrder(self):
        command = _command()
        success, errors = command.resolve("-a -b -a -b")
        self.assertFalse(success)
        self.assertEqual(errors, ["Unknown option: 'a'", "Unknown option: 'b'"])
        self.assertEqual(command.errors, errors)

    def testFaultHintsCarryOrdinals(self):
        command = _command()
        command.resolve("-a -b")
        self.assertEqual(command.faults[1].options["hint"], "at second position")
        self.assertEqual(command.faults[1].options["prog"], "tool")

    def testMissingValueAtEnd(self):
        command = _command()
        command.register("option", Option())
        self.assertEqual(command.resolve("-option"), (False, ["Missing value for option 'option'"]))
        self.assertIsInstance(command.faults[0], MissingValueError)

    def testRegisteredNameIsNotConsumedAsValue(self):
        command = _command()
        command.register("option", Option())
        command.register("flag", Flag())
        self.assertEqual(command.resolve("-option -flag"), (False, ["Missing value for option 'option'"]))
        self.assertTrue(command.getvalue("flag"))

    def testOptionValidator(self):
        command = _command()
        command.register("count", Option("1", validator=str.isdigit))
        self.assertTrue(command.resolve("-count 5")[0])
        self.assertEqual(command.resolve("-count=abc"), (False, ["count: Invalid value 'abc'"]))

    def testSetValidation(self):
        command = _command()
        command.register("mode", Set(("fast", "safe"), "safe"))

        self.assertTrue(command.resolve("")[0])
        self.assertEqual(command.getvalue("mode"), "safe")
        self.assertTrue(command.resolve("-mode fast")[0])
        self.assertEqual(command.resolve("-mode slow"), (False, ["mode: Invalid value 'slow'"]))
        self.assertEqual(command.faults[0].options["hint"], "expected one of: fast, safe")

    def testCollectionItemsValidated(self):
        command = _command()
        command.register("numbers", Collection(validator=str.isdigit))
        self.assertEqual(
            command.resolve("-numbers=1 -numbers=x -numbers=2"),
            (False, ["numbers: Invalid value 'x'"]),
        )

    def testMissingOptionalArgumentNotValidated(self):
        command = _command()
        command.register("count", Option(validator=lambda value: False))
        self.assertEqual(command.resolve(""), (True, []))

    def testValueLookups(self):
        command = _command()
        command.register("flag", Flag())
        with self.assertRaises(ArgumentNotFoundError):
            command.getvalue("nonexisting")
        self.assertEqual(command.trygetvalue("nonexisting"), (None, False))
        self.assertEqual(command.trygetvalue("flag"), (False, True))
        self.assertEqual(command.trygetvalue(["flag"]), (None, False))


class TestCommandPositionals(TestCase):
    """Behavioral tests for positional and default arguments."""

    def testPositionalBinding(self):
        command = _command()
        command.register("source", Option(position=0))
        command.register("target", Option(position=1))
        self.assertTrue(command.resolve("a.txt b.txt")[0])
        self.assertEqual(command.getvalue("source"), "a.txt")
        self.assertEqual(command.getvalue("target"), "b.txt")

    def testPositionsCountEveryToken(self):
        command = _command()
        command.register("verbose", Flag())
        command.register("source", Option(position=0))
        command.register("target", Option(position=1))
        self.assertTrue(command.resolve("-verbose x")[0])
        self.assertIsNone(command.getvalue("source"))
        self.assertEqual(command.getvalue("target"), "x")

    def testMultipleDefaultArgument(self):
        command = _command()
        command.register("files", Collection())
        command.default = "files"
        self.assertEqual(command.default, "files")
        self.assertTrue(command.resolve("a b c")[0])
        self.assertEqual(command.getvalue("files"), ["a", "b", "c"])

    def testSingleDefaultArgumentConsumedOnce(self):
        command = _command()
        command.register("file", Option())
        command.default = "file"
        self.assertEqual(command.resolve("a b"), (False, ["Unknown option: 'b'"]))
        self.assertEqual(command.getvalue("file"), "a")

    def testDefaultArgumentTakesValueOfUnknownNamedToken(self):
        command = _command()
        command.register("files", Collection())
        command.default = "files"
        self.assertTrue(command.resolve("-nope a")[0])
        self.assertEqual(command.getvalue("files"), ["a"])

    def testDefaultArgumentTakesInlineValueOfUnknownNamedToken(self):
        command = _command()
        command.register("files", Collection())
        command.default = "files"
        self.assertTrue(command.resolve("--nope=val")[0])
        self.assertEqual(command.getvalue("files"), ["val"])

    def testScalarDefaultArgumentTakesValueOfUnknownNamedToken(self):
        command = _command()
        command.register("file", Option())
        command.default = "file"
        self.assertEqual(command.resolve("-nope a.txt"), (True, []))
        self.assertEqual(command.getvalue("file"), "a.txt")

    def testBareRegisteredNameIsNotPositional(self):
        command = _command()
        command.register("verbose", Flag())
        command.register("source", Option(position=0))
        self.assertTrue(command.resolve("verbose")[0])
        self.assertTrue(command.getvalue("verbose"))
        self.assertIsNone(command.getvalue("source"))

    def testDefaultArgumentMustBeRegistered(self):
        command = _command()
        with self.assertRaises(ArgumentNotFoundError):
            command.default = "nonexisting"
        command.register("files", Collection())
        command.default = "files"
        command.default = None
        self.assertIsNone(command.default)


class TestCommandProcessing(TestCase):
    """Behavioral tests for processors and the entry point."""

    def testProcessorsRunInRegistrationOrder(self):
        received = []
        command = _command()
        command.register("verbose", Flag(processor=lambda value: received.append(("verbose", value))))
        command.register("files", Collection(processor=lambda value: received.append(("files", value))))
        command.alias("verbose", "v")
        command.register("plain", Option())

        command.resolve("-v -files=a -files=b")
        command.process()
        self.assertEqual(received, [("verbose", True), ("files", ["a", "b"])])

    def testProcessorErrorsPropagate(self):
        def explode(value):
            raise RuntimeError(value)

        command = _command()
        command.register("option", Option("x", processor=explode))
        command.resolve("")
        with self.assertRaises(RuntimeError):
            command.process()

    def testInvokeRunsProcessors(self):
        received = []
        command = _command()
        command.register("option", Option(processor=received.append))
        invoke(command, "-option=42")
        self.assertEqual(received, ["42"])

    def testInvokeRaisesCommandExit(self):
        command = _command()
        with self.assertRaises(CommandExit) as context:
            invoke(command, "-nope")
        self.assertEqual([str(fault) for fault in context.exception.exceptions], ["Unknown option: 'nope'"])

    def testInvokeShellExits(self):
        command = _command(shell=True)
        command.register("flag", Flag())
        with self.assertRaises(SystemExit) as context:
            invoke(command, ["-nope"])
        self.assertEqual(context.exception.code, 1)

        output = command.console.file.getvalue()
        self.assertIn("Unknown option: 'nope'", output)
        self.assertIn("usage: tool [-flag]", output)

    def testInvokeReadsArgv(self):
        command = _command()
        command.register("flag", Flag())
        with mock.patch.object(sys, "argv", ["tool", "-flag"]):
            invoke(command)
        self.assertTrue(command.getvalue("flag"))

    def testInvokeRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            invoke(object())


class TestCommandConfiguration(TestCase):
    """Behavioral tests for constructor options."""

    def testDefaults(self):
        command = Command("tool")
        self.assertEqual(command.name, "tool")
        self.assertIsNone(command.info)
        self.assertEqual(command.prefix, "-")
        self.assertFalse(command.shell)
        self.assertFalse(command.fancy)
        self.assertTrue(command.colorful)
        self.assertEqual(command.styles, {})
        self.assertIsInstance(command.console, Console)

    def testNameFromArgv(self):
        with mock.patch.object(sys, "argv", ["/usr/local/bin/copy"]):
            self.assertEqual(Command().name, "copy")

    def testInvalidOptions(self):
        with self.assertRaises(ValueError):
            Command("")
        with self.assertRaises(ValueError):
            Command("tool", prefix="+")
        with self.assertRaises(TypeError):
            Command("tool", shell="yes")
        with self.assertRaises(TypeError):
            Command("tool", console=sys.stdout)
        with self.assertRaises(TypeError):
            Command("tool", styles={"metavar": 1})

    def testRegisterValidatesNames(self):
        command = _command()
        with self.assertRaises(ValueError):
            command.register("-flag", Flag())
        with self.assertRaises(TypeError):
            command.register("flag", "not an argument")

    def testExamples(self):
        command = _command()
        command.example("copy a file", "a.txt")
        command.example("copy verbosely", " -v a.txt ")
        self.assertEqual(command.examples, (("copy a file", "a.txt"), ("copy verbosely", "-v a.txt")))
        with self.assertRaises(ValueError):
            command.example("  ", "a.txt")

    def testRepr(self):
        self.assertTrue(repr(Command("tool")).startswith("command(name='tool'"))


if __name__ == "__main__":
    unittest.main()
