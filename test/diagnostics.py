"""
Diagnostic channel tests (ordering, flushing, shutdown, sink failures).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from vaultcli.diagnostics import DiagnosticChannel


class TestDiagnosticChannel(TestCase):
    def setUp(self):
        self.lines = []
        self.channel = DiagnosticChannel(self.lines.append)
        self.addCleanup(self.channel.close)

    def testLinesDeliveredInOrder(self):
        self.channel.write("first\nsecond\n")
        self.channel.write("third\n")
        self.channel.flush()
        self.assertEqual(self.lines, ["first", "second", "third"])

    def testPartialLinesJoined(self):
        self.channel.write("flag provided ")
        self.channel.write("but not defined: -x\n")
        self.channel.flush()
        self.assertEqual(self.lines, ["flag provided but not defined: -x"])

    def testFlushDeliversTrailingPartialLine(self):
        self.channel.write("no newline")
        self.channel.flush()
        self.assertEqual(self.lines, ["no newline"])

    def testCloseIsIdempotent(self):
        self.channel.write("last\n")
        self.channel.close()
        self.channel.close()
        self.assertTrue(self.channel.closed)
        self.assertEqual(self.lines, ["last"])

    def testWriteAfterClose(self):
        self.channel.close()
        with self.assertRaises(ValueError):
            self.channel.write("late\n")

    def testSinkFailureDoesNotStopDelivery(self):
        def sink(line):
            if line == "bad":
                raise RuntimeError("sink broke")
            self.lines.append(line)

        channel = DiagnosticChannel(sink)
        self.addCleanup(channel.close)
        with self.assertLogs("vaultcli.diagnostics", "ERROR"):
            channel.write("bad\ngood\n")
            channel.flush()
        self.assertEqual(self.lines, ["good"])

    def testSinkMustBeCallable(self):
        with self.assertRaises(TypeError):
            DiagnosticChannel("stderr")


if __name__ == "__main__":
    unittest.main()
