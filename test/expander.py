"""
Expander behavioral tests (${NAME} substitution).

Conventions
- Test method names follow CamelCase per project convention.
- The environment is always injected; the process environment is never touched.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from directives.expander import expand


class TestExpand(TestCase):
    """Behavioral tests for expand()."""

    def setUp(self) -> None:
        self.environ: dict[str, str] = {"foopath": "foo/bar", "HOME": "/root", "nested": "${HOME}"}

    def testPlainTokenUnchanged(self):
        self.assertEqual(expand("foo/bar", self.environ), "foo/bar")

    def testWholeTokenExpanded(self):
        self.assertEqual(expand("${foopath}", self.environ), "foo/bar")

    def testEmbeddedReferences(self):
        self.assertEqual(expand("path:${HOME}/${foopath}", self.environ), "path:/root/foo/bar")

    def testUnsetExpandsToEmpty(self):
        self.assertEqual(expand("a${missing}b", self.environ), "ab")

    def testSinglePass(self):
        # the expanded text is not expanded again
        self.assertEqual(expand("${nested}", self.environ), "${HOME}")

    def testDollarWithoutBracesIsLiteral(self):
        self.assertEqual(expand("$HOME", self.environ), "$HOME")

    def testUnclosedReferenceIsLiteral(self):
        self.assertEqual(expand("${HOME", self.environ), "${HOME")

    def testInvalidNamesAreLiteral(self):
        self.assertEqual(expand("${}", self.environ), "${}")
        self.assertEqual(expand("${1x}", self.environ), "${1x}")

    def testNamesAreCaseSensitive(self):
        self.assertEqual(expand("${home}", self.environ), "")

    def testArgumentTypesValidated(self):
        with self.assertRaises(TypeError):
            expand(1, self.environ)
        with self.assertRaises(TypeError):
            expand("${HOME}", [("HOME", "/root")])


if __name__ == "__main__":
    unittest.main()
