"""
Grouped flag set tests (registration, precedence, help, diagnostics).

Scope
- Option groups register into one parser; help follows registration order.
- Value precedence: command line over environment over static default.
- Hidden flags stay parseable but disappear from help.
- Help layout: 2-space names, 6-space wrapped usage, no line over 78 columns.
- Parser diagnostics reach Ui.error before parse() returns or raises.
- Completion table keyed by "-name".

Conventions
- Test method names follow CamelCase per project convention.
- Environments are explicit dicts; os.environ is never consulted.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from vaultcli.bindings import StringVar
from vaultcli.completion import PredictAnything, PredictNothing, PredictSet
from vaultcli.faults import DuplicateFlagError, UnknownFlagError
from vaultcli.flags import MAX_LINE_LENGTH, USAGE_INDENT, FlagSet, FlagSets
from vaultcli.ui import MockUi
from vaultcli.utils import Ref

LONG_USAGE = (
    "Path on the local disk to a single PEM-encoded CA certificate to verify "
    "the Vault server's SSL certificate. This takes precedence over -ca-path "
    "and is read before any connection is attempted."
)


class Holder:
    pass


class FlagSetsTestCase(TestCase):
    environ = {}

    def setUp(self):
        self.ui = MockUi()
        self.holder = Holder()
        self.flags = FlagSets(self.ui, environ=dict(self.environ))
        self.addCleanup(self.flags.close)

        http = self.flags.new_flag_set("HTTP Options")
        http.string_var(
            "address",
            target=Ref(self.holder, "address"),
            default="https://127.0.0.1:8200",
            env_var="VAULT_ADDR",
            usage="Address of the Vault server.",
        )
        http.bool_var(
            "tls-skip-verify",
            target=Ref(self.holder, "skip"),
            env_var="VAULT_SKIP_VERIFY",
            completion=PredictNothing,
            usage="Disable verification of TLS certificates.",
        )
        http.string_var(
            "ca-cert",
            target=Ref(self.holder, "ca_cert"),
            usage=LONG_USAGE,
        )

        output = self.flags.new_flag_set("Output Options")
        output.string_var(
            "format",
            target=Ref(self.holder, "format"),
            default="table",
            env_var="VAULT_FORMAT",
            completion=PredictSet("table", "json", "yaml"),
            usage="Print the output in the given format.",
        )
        output.string_var(
            "secret-mode",
            target=Ref(self.holder, "secret_mode"),
            usage="Not shown.",
            hidden=True,
        )


class TestPrecedence(FlagSetsTestCase):
    environ = {"VAULT_ADDR": "http://env.test:8200"}

    def testEnvironmentOverDefault(self):
        self.flags.parse([])
        self.assertEqual(self.holder.address, "http://env.test:8200")
        self.assertEqual(self.holder.format, "table")

    def testCommandLineOverEnvironment(self):
        self.flags.parse(["-address=http://flag.test:8200", "secret/foo"])
        self.assertEqual(self.holder.address, "http://flag.test:8200")
        self.assertEqual(self.flags.args(), ["secret/foo"])
        self.assertTrue(self.flags.is_set("address"))
        self.assertFalse(self.flags.is_set("format"))

    def testTargetsSeededAtRegistration(self):
        self.assertEqual(self.holder.address, "http://env.test:8200")
        self.assertIs(self.holder.skip, False)


class TestHelp(FlagSetsTestCase):
    def testGroupsInRegistrationOrder(self):
        help = self.flags.help()
        self.assertTrue(help.startswith("HTTP Options:\n\n  -address=<string>\n      Address of the Vault server.\n\n"))
        self.assertLess(help.index("HTTP Options:"), help.index("Output Options:"))
        self.assertLess(help.index("-tls-skip-verify"), help.index("-ca-cert"))

    def testBooleanHasNoExample(self):
        self.assertIn("\n  -tls-skip-verify\n", self.flags.help())

    def testNoTrailingNewline(self):
        self.assertTrue(self.flags.help().endswith("Print the output in the given format."))

    def testHiddenFlagOmittedButParseable(self):
        self.assertTrue(self.flags.hidden_flag("secret-mode"))
        self.assertNotIn("secret-mode", self.flags.help())
        self.flags.parse(["-secret-mode=on"])
        self.assertEqual(self.holder.secret_mode, "on")

    def testHideFlagAfterRegistration(self):
        self.flags.hide_flag("format")
        self.assertNotIn("-format", self.flags.help())

    def testLineWidthAndIndent(self):
        lines = self.flags.help().split("\n")
        self.assertTrue(all(len(line) <= MAX_LINE_LENGTH for line in lines))

        start = lines.index("  -ca-cert=<string>") + 1
        usage = []
        while lines[start]:
            usage.append(lines[start])
            start += 1
        self.assertGreater(len(usage), 1)
        for line in usage:
            self.assertTrue(line.startswith(" " * USAGE_INDENT))
            self.assertNotEqual(line[USAGE_INDENT], " ")

    def testDeterministic(self):
        self.assertEqual(self.flags.help(), self.flags.help())


class TestDiagnostics(FlagSetsTestCase):
    def testParseErrorReachesUi(self):
        with self.assertRaises(UnknownFlagError):
            self.flags.parse(["-nope"])
        self.assertEqual(self.ui.error_writer.getvalue(), "flag provided but not defined: -nope\n")

    def testSuccessfulParseIsSilent(self):
        self.flags.parse(["-format=json"])
        self.assertEqual(self.ui.error_writer.getvalue(), "")


class TestRegistration(FlagSetsTestCase):
    def testDuplicateAcrossGroupsRejected(self):
        extra = self.flags.new_flag_set("Extra Options")
        with self.assertRaises(DuplicateFlagError):
            extra.string_var("format", target=Ref(self.holder, "other_format"), default="json")
        # the duplicate never seeded its target
        self.assertFalse(hasattr(self.holder, "other_format"))
        self.assertEqual(extra.bindings, ())

    def testGroupBuiltBeforeAttaching(self):
        group = FlagSet("Late Options")
        group.var(StringVar("late", target=Ref(self.holder, "late"), default="x"))
        self.assertFalse(hasattr(self.holder, "late"))

        self.flags.add_flag_set(group)
        self.assertEqual(self.holder.late, "x")
        self.flags.parse(["-late=y"])
        self.assertEqual(self.holder.late, "y")

    def testRejectedGroupRegistersNothing(self):
        group = FlagSet("Late Options")
        group.var(StringVar("fresh", target=Ref(self.holder, "fresh"), default="x", usage="New option."))
        group.var(StringVar("format", target=Ref(self.holder, "late_format"), default="json"))
        with self.assertRaises(DuplicateFlagError):
            self.flags.add_flag_set(group)

        self.assertFalse(hasattr(self.holder, "fresh"))
        self.assertFalse(hasattr(self.holder, "late_format"))
        self.assertNotIn("-fresh", self.flags.help())
        self.assertNotIn("-fresh", self.flags.completions())
        self.assertEqual(len(self.flags.flag_sets), 2)
        with self.assertRaises(UnknownFlagError):
            self.flags.parse(["-fresh=y"])

    def testDuplicateWithinGroupRejected(self):
        group = FlagSet("Late Options")
        group.var(StringVar("twice", target=Ref(self.holder, "first")))
        group.var(StringVar("twice", target=Ref(self.holder, "second")))
        with self.assertRaises(DuplicateFlagError):
            self.flags.add_flag_set(group)
        self.assertFalse(hasattr(self.holder, "first"))
        with self.assertRaises(UnknownFlagError):
            self.flags.parse(["-twice=y"])

    def testGroupCannotBeAttachedTwice(self):
        group = self.flags.flag_sets[0]
        with self.assertRaises(ValueError):
            self.flags.add_flag_set(group)

    def testCompletions(self):
        completions = self.flags.completions()
        self.assertIs(completions["-address"], PredictAnything)
        self.assertIs(completions["-tls-skip-verify"], PredictNothing)
        self.assertEqual(completions["-format"].predict("j"), ["json"])
        with self.assertRaises(TypeError):
            completions["-new"] = PredictAnything

    def testGroupVisit(self):
        self.flags.parse(["-format=yaml", "-address=http://a:1"])
        visited = []
        self.flags.flag_sets[1].visit(lambda binding: visited.append(binding.name))
        self.assertEqual(visited, ["format"])


if __name__ == "__main__":
    unittest.main()
