"""
Coercion module behavioral tests (token → typed value).

Scope
- Validate conversion of representative values for every built-in target type.
- Validate rejection of out-of-domain tokens with CoercionError (never a raw fault).
- Validate nullable handling, both explicit and through T | None wrappers.
- Validate untyped markers, enums and custom converter callables.

Conventions
- Test method names follow CamelCase per project convention.
"""
import datetime
import decimal
import enum
import inspect
import typing
import unittest
from unittest import TestCase

from commandeer.coercion import coerce, unwrap
from commandeer.faults import CoercionError, FaultCode


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"


class TestCoerce(TestCase):
    """Behavioral tests for coerce()."""

    def testRenderedValuesConvertBack(self):
        samples = {
            int: [0, 1, -7, 2 ** 40],
            float: [0.0, -1.5, 3.25, 1e+20, 1.5e-07],
            bool: [True, False],
            str: ["", "hello", "ünïcode"],
            decimal.Decimal: [decimal.Decimal("1.10"), decimal.Decimal("-3")],
            complex: [complex(1, 2), complex(0, -1)],
            datetime.date: [datetime.date(2024, 2, 29)],
            datetime.datetime: [datetime.datetime(2024, 2, 29, 13, 45, 1)],
            datetime.time: [datetime.time(23, 59)],
        }
        for target, values in samples.items():
            for value in values:
                with self.subTest(target=target, value=value):
                    self.assertEqual(coerce(str(value), target), value)

    def testBooleanIsCaseInsensitive(self):
        self.assertIs(coerce("TRUE", bool), True)
        self.assertIs(coerce("faLse", bool), False)

    def testOutOfDomainTokensRaiseCoercionError(self):
        cases = [
            ("abc", int),
            ("1.5", int),
            ("1_000", int),
            ("١٢", int),  # non-ASCII digits
            ("abc", float),
            ("1,5", float),
            ("yes", bool),
            ("1", bool),
            ("x", decimal.Decimal),
            ("2024-13-01", datetime.date),
        ]
        for token, target in cases:
            with self.subTest(token=token, target=target):
                with self.assertRaises(CoercionError) as context:
                    coerce(token, target)
                self.assertEqual(context.exception.token, token)
                self.assertIs(context.exception.target, target)
                self.assertEqual(context.exception.options["code"], FaultCode.UNCASTABLE_TOKEN)

    def testSpecialFloatsAccepted(self):
        self.assertEqual(coerce("inf", float), float("inf"))
        self.assertEqual(coerce("-Infinity", float), float("-inf"))
        self.assertNotEqual(coerce("NaN", float), coerce("NaN", float))

    def testNullableFailureYieldsNone(self):
        self.assertIsNone(coerce("abc", int, True))

    def testNullableWrapperImpliesNullable(self):
        self.assertIsNone(coerce("abc", int | None))
        self.assertIsNone(coerce("abc", typing.Optional[int]))
        self.assertEqual(coerce("12", int | None), 12)

    def testUntypedMarkersPassTokenThrough(self):
        for target in (inspect.Parameter.empty, typing.Any, object):
            with self.subTest(target=target):
                self.assertEqual(coerce("raw", target), "raw")

    def testEnumByNameThenValue(self):
        self.assertIs(coerce("RED", Color), Color.RED)
        self.assertIs(coerce("g", Color), Color.GREEN)
        with self.assertRaises(CoercionError):
            coerce("BLUE", Color)

    def testCustomConverterCallable(self):
        def upper(token):
            return token.upper()

        self.assertEqual(coerce("abc", upper), "ABC")

    def testCustomConverterFailureIsWrapped(self):
        def explode(token):
            raise RuntimeError("boom")

        with self.assertRaises(CoercionError) as context:
            coerce("abc", explode)
        self.assertIsInstance(context.exception.options["exception"], RuntimeError)

    def testNonCallableTargetIsCoercionError(self):
        with self.assertRaises(CoercionError):
            coerce("abc", int | str)

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            coerce(12, int)


class TestUnwrap(TestCase):
    """Behavioral tests for unwrap()."""

    def testPlainType(self):
        self.assertEqual(unwrap(int), (int, False))

    def testOptionalForms(self):
        self.assertEqual(unwrap(int | None), (int, True))
        self.assertEqual(unwrap(typing.Optional[str]), (str, True))
        self.assertEqual(unwrap(typing.Union[None, float]), (float, True))

    def testNoneRejected(self):
        with self.assertRaises(TypeError):
            unwrap(None)


if __name__ == "__main__":
    unittest.main()
