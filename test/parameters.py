"""
Parameters module behavioral tests (specs, schema invariants, binder).

Scope
- Validate Default/Named construction and normalization.
- Validate Schema invariants (one default, unique names).
- Validate bind(): positional vs named binding, arity faults, fallbacks.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from directives import Default, Named, Schema, bind
from directives.faults import ArityError, FaultCode


class TestSpecs(TestCase):
    """Behavioral tests for Default and Named specifications."""

    def testDefaultIsRequiredWithoutFallback(self):
        self.assertTrue(Default("path").required)

    def testDefaultWithFallbackIsOptional(self):
        self.assertFalse(Default("path", default=".").required)

    def testNameIsTrimmed(self):
        self.assertEqual(Named("  groupid ").name, "groupid")

    def testNameMustBeIdentifier(self):
        with self.assertRaises(ValueError):
            Default("1path")
        with self.assertRaises(ValueError):
            Named("group-id")

    def testNameCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Default("   ")

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            Named(1)

    def testDescrDefaultsToNone(self):
        self.assertIsNone(Default("path").descr)

    def testDescrCannotBeEmpty(self):
        with self.assertRaises(ValueError):
            Default("path", descr=" ")

    def testNamedAcceptsNoneFallback(self):
        self.assertIsNone(Named("groupid", default=None).default)

    def testDefaultRejectsNoneFallback(self):
        with self.assertRaises(TypeError):
            Default("path", default=None)

    def testRepr(self):
        self.assertEqual(repr(Named("shell")), "named(name='shell', default=Unset, descr=None)")

    def testEquality(self):
        self.assertEqual(Default("path"), Default("path"))
        self.assertNotEqual(Default("path"), Named("path"))


class TestSchema(TestCase):
    """Behavioral tests for Schema invariants."""

    def testParametersDefaultFirst(self):
        schema = Schema(Default("userid"), Named("groupid"))
        self.assertEqual(list(schema.parameters), ["userid", "groupid"])
        self.assertEqual(schema.default, Default("userid"))

    def testDefaultAndNamedCannotShareName(self):
        with self.assertRaises(ValueError):
            Schema(Default("path"), Named("path"))

    def testNamedCannotRepeat(self):
        with self.assertRaises(ValueError):
            Schema(Default("cmd"), Named("shell"), Named("shell"))

    def testFirstArgumentMustBeDefault(self):
        with self.assertRaises(TypeError):
            Schema(Named("path"))

    def testExtraArgumentsMustBeNamed(self):
        with self.assertRaises(TypeError):
            Schema(Default("a"), Default("b"))

    def testUsage(self):
        schema = Schema(Default("userid"), Named("groupid"))
        self.assertEqual(schema.usage("AS"), "AS <userid> [groupid:<groupid>]")
        self.assertEqual(Schema(Default("path", default=".")).usage("WORKDIR"), "WORKDIR [<path>]")

    def testParametersAreReadOnly(self):
        schema = Schema(Default("path"))
        with self.assertRaises(TypeError):
            schema.parameters["other"] = Named("other")  # type: ignore[index]


class TestBind(TestCase):
    """Behavioral tests for the binder."""

    def setUp(self) -> None:
        self.path = Schema(Default("path"))
        self.identity = Schema(Default("userid"), Named("groupid", default=None))
        self.run = Schema(Default("cmd"), Named("shell"))

    def testPositionalBindsToDefault(self):
        self.assertEqual(dict(bind(self.path, ["foo/bar"])), {"path": "foo/bar"})

    def testDefaultByName(self):
        self.assertEqual(dict(bind(self.path, ["path:foo/bar"])), {"path": "foo/bar"})

    def testPositionalAndNamedAreEquivalent(self):
        self.assertEqual(dict(bind(self.path, ["foo/bar"])), dict(bind(self.path, ["path:foo/bar"])))

    def testNamedParameter(self):
        self.assertEqual(dict(bind(self.run, ["shell:/bin/sh", "ls -l"])), {"cmd": "ls -l", "shell": "/bin/sh"})

    def testValueKeepsLaterColons(self):
        self.assertEqual(dict(bind(self.path, ["path:a:b"])), {"path": "a:b"})

    def testEmptyNamedValue(self):
        self.assertEqual(dict(bind(self.path, ["path:"])), {"path": ""})

    def testUnknownPrefixIsPositional(self):
        self.assertEqual(dict(bind(self.path, ["C:/temp"])), {"path": "C:/temp"})
        self.assertEqual(dict(bind(self.path, ["http://host/x"])), {"path": "http://host/x"})

    def testLeadingColonIsPositional(self):
        self.assertEqual(dict(bind(self.path, [":foo"])), {"path": ":foo"})

    def testTwoPositionalsRaise(self):
        with self.assertRaises(ArityError) as context:
            bind(self.path, ["foo/bar", "bazz/buzz"])
        self.assertEqual(context.exception.options["code"], FaultCode.ARITY)
        self.assertEqual(context.exception.options["position"], 2)

    def testPositionalAndNamedDefaultRaise(self):
        with self.assertRaises(ArityError):
            bind(self.path, ["foo/bar", "path:foo/bar"])

    def testMissingDefaultRaises(self):
        with self.assertRaises(ArityError) as context:
            bind(self.path, [])
        self.assertEqual(context.exception.options["code"], FaultCode.ARITY)

    def testMissingDefaultHintShowsUsage(self):
        with self.assertRaises(ArityError) as context:
            bind(self.path, [], "WORKDIR")
        self.assertIn("WORKDIR <path>", context.exception.options["hint"])

    def testOptionalDefaultFallsBack(self):
        schema = Schema(Default("path", default="."))
        self.assertEqual(dict(bind(schema, [])), {"path": "."})

    def testNamedTwiceRaises(self):
        with self.assertRaises(ArityError) as context:
            bind(self.run, ["ls", "shell:sh", "shell:bash"])
        self.assertEqual(context.exception.options["code"], FaultCode.DUPLICATED_PARAMETER)

    def testNamedFallbackFilled(self):
        self.assertEqual(dict(bind(self.identity, ["1000"])), {"userid": "1000", "groupid": None})

    def testNamedWithoutFallbackOmitted(self):
        self.assertEqual(dict(bind(self.run, ["ls"])), {"cmd": "ls"})

    def testResultFollowsSchemaOrder(self):
        self.assertEqual(list(bind(self.identity, ["groupid:100", "1000"])), ["userid", "groupid"])

    def testResultIsReadOnly(self):
        bound = bind(self.path, ["foo"])
        with self.assertRaises(TypeError):
            bound["path"] = "bar"  # type: ignore[index]

    def testSchemaRequired(self):
        with self.assertRaises(TypeError):
            bind({"path": Default("path")}, ["foo"])


if __name__ == "__main__":
    unittest.main()
