"""
Signatures module behavioral tests (arity counts, classification, binding).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from commandeer.faults import CoercionError
from commandeer.signatures import PARAMS, Arity, ParameterSpec, Signature


def required(type=str):
    return ParameterSpec(type)


def optional(type=str, default=None):
    return ParameterSpec(type, default=default)


def variadic(type=str):
    return ParameterSpec(type, variadic=True)


class TestParameterSpec(TestCase):

    def testDefaults(self):
        spec = ParameterSpec()
        self.assertIs(spec.type, str)
        self.assertFalse(spec.nullable)
        self.assertFalse(spec.has_default)
        self.assertFalse(spec.variadic)

    def testNoneIsAValidDefault(self):
        spec = ParameterSpec(int, default=None)
        self.assertTrue(spec.has_default)
        self.assertIsNone(spec.default)

    def testNullableWrapperIsUnwrapped(self):
        spec = ParameterSpec(int | None)
        self.assertIs(spec.type, int)
        self.assertTrue(spec.nullable)

    def testVariadicCannotHaveDefault(self):
        with self.assertRaises(ValueError):
            ParameterSpec(str, default="x", variadic=True)

    def testFlagsMustBeBooleans(self):
        with self.assertRaises(TypeError):
            ParameterSpec(str, nullable=1)


class TestSignatureCounts(TestCase):

    def testRequiredOnly(self):
        signature = Signature([required(), required(int)])
        self.assertEqual((signature.required, signature.optional, signature.total), (2, 0, 2))

    def testWithDefaults(self):
        signature = Signature([required(), optional(), optional()])
        self.assertEqual((signature.required, signature.optional, signature.total), (1, 2, 3))

    def testVariadicUsesSentinel(self):
        signature = Signature([required(), variadic()])
        self.assertEqual(signature.required, 1)
        self.assertEqual(signature.optional, PARAMS)
        self.assertEqual(signature.total, PARAMS)
        self.assertTrue(signature.variadic)

    def testRequiredAfterOptionalRejected(self):
        with self.assertRaises(ValueError):
            Signature([optional(), required()])

    def testVariadicMustBeLast(self):
        with self.assertRaises(ValueError):
            Signature([variadic(), required()])

    def testItemsMustBeParameterSpecs(self):
        with self.assertRaises(TypeError):
            Signature([str])


class TestArity(TestCase):

    def testEmptySignature(self):
        signature = Signature()
        self.assertIs(signature.arity(0), Arity.EXACT)
        self.assertIsNone(signature.arity(1))

    def testExactCount(self):
        signature = Signature([required(), required()])
        self.assertIs(signature.arity(2), Arity.EXACT)
        self.assertIsNone(signature.arity(3))

    def testFewerThanRequiredNeverMatches(self):
        signature = Signature([required(), required()])
        # 0 == optional count, but the handler could not be called
        self.assertIsNone(signature.arity(0))
        self.assertIsNone(signature.arity(1))

    def testAllOptionalsOmitted(self):
        signature = Signature([required(), optional(), optional()])
        self.assertIs(signature.arity(1), Arity.BOUNDARY)
        self.assertIs(signature.arity(3), Arity.EXACT)

    def testPartialOptionals(self):
        signature = Signature([required(), optional(), optional(), optional()])
        self.assertIs(signature.arity(2), Arity.PARTIAL)

    def testVariadicMatchesAnyCountFromRequired(self):
        signature = Signature([required(), variadic()])
        self.assertIsNone(signature.arity(0))
        for count in (1, 2, 10):
            with self.subTest(count=count):
                self.assertIs(signature.arity(count), Arity.EXACT)

    def testMatches(self):
        signature = Signature([required()])
        self.assertTrue(signature.matches(1))
        self.assertFalse(signature.matches(2))


class TestBind(TestCase):

    def testBindsPositionally(self):
        signature = Signature([required(), required(int)])
        self.assertEqual(signature.bind(["a", "1"]), ["a", 1])

    def testDefaultsAreNotFilled(self):
        signature = Signature([required(), optional(int, 5)])
        self.assertEqual(signature.bind(["a"]), ["a"])

    def testFailsAtFirstUncastableToken(self):
        signature = Signature([required(int), required(int)])
        with self.assertRaises(CoercionError) as context:
            signature.bind(["1", "x"])
        self.assertEqual(context.exception.token, "x")

    def testNullableTakesNone(self):
        signature = Signature([required(int | None), required()])
        self.assertEqual(signature.bind(["x", "y"]), [None, "y"])

    def testVariadicTailUsesVariadicType(self):
        signature = Signature([required(), variadic(int)])
        self.assertEqual(signature.bind(["a", "1", "2", "3"]), ["a", 1, 2, 3])

    def testTooManyTokensRejected(self):
        with self.assertRaises(ValueError):
            Signature([required()]).bind(["a", "b"])


class TestFromCallable(TestCase):

    def testAnnotationsAndDefaults(self):
        def handler(name: str, count: int = 1, *rest: float, flag: bool = False, **extra):
            pass

        signature = Signature.from_callable(handler)
        self.assertEqual(len(signature), 3)
        self.assertEqual([parameter.type for parameter in signature], [str, int, float])
        self.assertEqual(signature.required, 1)
        self.assertTrue(signature.variadic)
        self.assertEqual(signature.parameters[1].default, 1)

    def testMissingAnnotationPassesRawToken(self):
        def handler(value):
            pass

        self.assertEqual(Signature.from_callable(handler).bind(["x"]), ["x"])

    def testNullableAnnotation(self):
        def handler(value: int | None):
            pass

        self.assertTrue(Signature.from_callable(handler).parameters[0].nullable)

    def testKeywordOnlyWithoutDefaultRejected(self):
        def handler(*, value):
            pass

        with self.assertRaises(TypeError):
            Signature.from_callable(handler)

    def testNonCallableRejected(self):
        with self.assertRaises(TypeError):
            Signature.from_callable(42)

    def testEqualSignatures(self):
        def first(a: str, b: int = 0):
            pass

        def second(x: str, y: int = 0):
            pass

        self.assertEqual(Signature.from_callable(first), Signature.from_callable(second))

    def testDifferentDefaultsAreNotEqual(self):
        def first(a: str, b: int = 0):
            pass

        def second(x: str, y: int = 3):
            pass

        self.assertNotEqual(Signature.from_callable(first), Signature.from_callable(second))
        self.assertNotEqual(ParameterSpec(int, default=1), ParameterSpec(int, default=2))
        self.assertEqual(hash(ParameterSpec(int, default=1)), hash(ParameterSpec(int, default=2)))

    def testUnhashableDefaultStillHashes(self):
        spec = ParameterSpec(str, default=[])
        self.assertEqual(spec, ParameterSpec(str, default=[]))
        self.assertIsInstance(hash(spec), int)


if __name__ == "__main__":
    unittest.main()
