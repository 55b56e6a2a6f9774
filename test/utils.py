"""
Tests for the internal utilities (Unset, coalesce, rename, mirror, ordinal).
"""
import copy
import unittest
from unittest import TestCase

from directives.utils import *


class UnsetTest(TestCase):
    """
    The Unset sentinel is a falsy, printable, final singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self) -> None:
        """
        str | Unset can be used in isinstance checks.
        """
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")

    def testRenameFunctionForm(self) -> None:
        def function(): ...
        rename(function, "renamed")
        self.assertEqual((function.__name__, function.__qualname__), ("renamed", "renamed"))

    def testRenameDecoratorForm(self) -> None:
        @rename("renamed")
        def function(): ...
        self.assertEqual(function.__name__, "renamed")

    def testRenameArity(self) -> None:
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self) -> None:
        class Holder:
            _items = [1, [2]]
            items = mirror("items")

        holder = Holder()
        items = holder.items
        items[1].append(3)
        self.assertEqual(holder.items, [1, [2]])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(113), "113th")
        with self.assertRaises(TypeError):
            ordinal("1")

    def testCopyKeepsSentinel(self) -> None:
        self.assertIs(copy.deepcopy(Unset), Unset)


if __name__ == '__main__':
    unittest.main()
