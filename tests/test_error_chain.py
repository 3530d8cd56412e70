"""
Tests for BaseError, MultiError and the cause-chain helpers.
"""

import re
import unittest
from datetime import datetime

from error_chain import (
    BaseError,
    InvalidConstructionError,
    MultiError,
    error_cause,
    error_for_each,
    error_from_list,
    error_info,
    error_stack,
    find_cause_by_name,
    full_stack,
    has_cause_with_name,
    parse_error_args,
)


class BipedError(BaseError):
    def __init__(self, species, legs, cause=None):
        super().__init__(cause, {"species": species, "legs": legs}, "Encountered %s with %d legs", species, legs)


class TestParseErrorArgs(unittest.TestCase):
    """The constructor argument parser."""

    def test_message_only(self):
        parsed = parse_error_args(("message %s", "param"))
        self.assertIsNone(parsed.cause)
        self.assertIsNone(parsed.info)
        self.assertEqual(parsed.message, "message %s")
        self.assertEqual(parsed.params, ("param",))

    def test_single_option(self):
        cause = ValueError("inner")
        self.assertIs(parse_error_args((cause, "message")).cause, cause)
        self.assertEqual(parse_error_args(({"a": 1}, "message")).info, {"a": 1})
        parsed = parse_error_args((None, "message"))
        self.assertIsNone(parsed.cause)
        self.assertIsNone(parsed.info)

    def test_two_options(self):
        cause = ValueError("inner")
        parsed = parse_error_args((cause, {"a": 1}, "message", 1, 2))
        self.assertIs(parsed.cause, cause)
        self.assertEqual(parsed.info, {"a": 1})
        self.assertEqual(parsed.params, (1, 2))

    def test_invalid_shapes(self):
        for args in [
            (),
            (None,),
            (ValueError(), None),
            ({"a": 1}, ValueError(), "message"),
            (None, None, None, "message"),
            (42, "message"),
        ]:
            with self.subTest(args=args):
                with self.assertRaises(InvalidConstructionError):
                    parse_error_args(args)


class TestBaseError(unittest.TestCase):
    """Construction, info aggregation and stacks."""

    def test_all_signatures(self):
        for error in [
            BaseError("message"),
            BaseError("message", "with", "parameters"),
            BaseError("message", 123, "parameters", datetime.now(), {}),
            BaseError(None, "message"),
            BaseError(None, "message", "with", "parameters"),
            BaseError(ValueError(), "message"),
            BaseError(ValueError(), "message", 123, "parameters", datetime.now(), {}),
            BaseError({"info": "object"}, "message"),
            BaseError({"info": "object"}, "message", "with", "parameters"),
            BaseError(None, None, "message"),
            BaseError(ValueError(), None, "message"),
            BaseError(None, {"info": "object"}, "message"),
            BaseError(ValueError(), {"info": "object"}, "message", 123, "parameters", datetime.now(), {}),
        ]:
            self.assertIsInstance(error, BaseError)
            self.assertTrue(str(error).startswith("message"))

    def test_rejects_wrong_arguments(self):
        with self.assertRaises(InvalidConstructionError):
            BaseError(None)
        with self.assertRaises(InvalidConstructionError):
            BaseError(ValueError(), None)
        with self.assertRaises(InvalidConstructionError):
            BaseError({"a": 1}, ValueError(), "message")

    def test_construction_errors_are_type_errors(self):
        with self.assertRaises(TypeError):
            BaseError()

    def test_message_includes_cause(self):
        inner = BaseError("inner error")
        outer = BaseError(inner, "outer error")
        self.assertEqual(str(outer), "outer error: inner error")
        self.assertEqual(outer.message, "outer error: inner error")
        self.assertIs(outer.cause(), inner)
        self.assertIs(outer.__cause__, inner)

    def test_aggregated_info(self):
        err1 = BaseError({"a": 1, "b": 2}, "message")
        err2 = BaseError(err1, {"b": 3, "c": 4}, "message")
        self.assertEqual(err2.info(), {"a": 1, "b": 3, "c": 4})
        self.assertEqual(err1.info(), {"a": 1, "b": 2})

    def test_info_is_a_copy(self):
        info = {"a": 1}
        error = BaseError(info, "message")
        info["a"] = 2
        error.info()["b"] = 3
        self.assertEqual(error.info(), {"a": 1})

    def test_full_cause_chain(self):
        err1 = BaseError("inner error")
        err2 = BaseError(err1, "middle error")
        err3 = BaseError(err2, "outer error")
        pattern = re.compile(
            r"^BaseError: outer error: middle error: inner error$"
            r".+"
            r"^caused by: BaseError: middle error: inner error$"
            r".+"
            r"^caused by: BaseError: inner error$"
            r".+",
            re.MULTILINE | re.DOTALL,
        )
        self.assertRegex(err3.full_stack(), pattern)
        self.assertEqual(err3.full_stack().count("caused by: "), 2)

    def test_raised_errors_use_their_traceback(self):
        try:
            raise BaseError("raised")
        except BaseError as err:
            stack = error_stack(err)
        self.assertTrue(stack.startswith("BaseError: raised\n"))
        self.assertIn("test_raised_errors_use_their_traceback", stack)


class TestSubclassedError(unittest.TestCase):
    """BaseError subclasses behave like ordinary exceptions."""

    def setUp(self):
        self.err = BipedError("a human", 3)

    def test_works_as_an_ordinary_exception(self):
        self.assertEqual(str(self.err), "Encountered a human with 3 legs")
        self.assertIsInstance(self.err, BipedError)
        self.assertIsInstance(self.err, Exception)
        with self.assertRaises(BipedError):
            raise self.err

    def test_name_and_find_cause_by_name(self):
        self.assertEqual(self.err.name, "BipedError")
        self.assertTrue(self.err.has_cause_with_name("BipedError"))
        self.assertIs(self.err.find_cause_by_name("BipedError"), self.err)
        self.assertFalse(self.err.has_cause_with_name("QuadrupedError"))
        self.assertIsNone(self.err.find_cause_by_name("QuadrupedError"))

        wrapper = BaseError(self.err, "wrapper")
        self.assertTrue(wrapper.has_cause_with_name("BipedError"))
        self.assertIs(wrapper.find_cause_by_name("BipedError"), self.err)
        self.assertFalse(wrapper.has_cause_with_name("QuadrupedError"))

    def test_stack_uses_subclass_name(self):
        self.assertNotIn("BaseError", self.err.full_stack().splitlines()[0])
        self.assertTrue(self.err.full_stack().startswith("BipedError: Encountered a human with 3 legs"))

        outer = BipedError("a pair of humans", 5, self.err)
        self.assertRegex(outer.full_stack(), re.compile(
            r"^BipedError: Encountered a pair of humans with 5 legs: Encountered a human with 3 legs$"
            r".+"
            r"^caused by: BipedError: Encountered a human with 3 legs$",
            re.MULTILINE | re.DOTALL,
        ))

    def test_aggregated_info(self):
        cause = BaseError({"extra_legs": 1}, "grown an extra leg")
        error = BipedError("a man", 3, cause)
        self.assertEqual(error.info(), {"extra_legs": 1, "species": "a man", "legs": 3})


class TestNativeExceptions(unittest.TestCase):
    """Helpers also follow native ``raise ... from`` chains."""

    def test_native_cause_chain(self):
        try:
            try:
                raise KeyError("missing")
            except KeyError as inner:
                raise RuntimeError("lookup failed") from inner
        except RuntimeError as err:
            outer = err

        self.assertIsInstance(error_cause(outer), KeyError)
        self.assertTrue(has_cause_with_name(outer, "KeyError"))
        self.assertEqual(error_info(outer), {})
        stack = full_stack(outer)
        self.assertTrue(stack.startswith("RuntimeError: lookup failed"))
        self.assertIn("\ncaused by: KeyError: 'missing'", stack)

    def test_info_through_native_wrapper(self):
        inner = BaseError({"request_id": 7}, "inner")
        try:
            raise RuntimeError("outer") from inner
        except RuntimeError as err:
            self.assertEqual(error_info(err), {"request_id": 7})
            self.assertIs(find_cause_by_name(err, "BaseError"), inner)


class TestMultiError(unittest.TestCase):
    """Aggregation of several errors."""

    def test_error_from_list(self):
        e1 = BaseError({"a": 1, "b": 1}, "first")
        e2 = ValueError("second")
        e3 = BaseError({"b": 3}, "third")

        self.assertIsNone(error_from_list([]))
        self.assertIs(error_from_list([e1]), e1)

        multi = error_from_list([e1, e2, e3])
        self.assertIsInstance(multi, MultiError)
        self.assertTrue(str(multi).startswith("first of 3 errors: "))
        self.assertEqual(str(multi), "first of 3 errors: first")
        self.assertIs(multi.cause(), e1)
        self.assertEqual(multi.errors(), (e1, e2, e3))
        self.assertEqual(multi.info(), {"a": 1, "b": 3})

    def test_two_errors(self):
        e1, e2 = BaseError("one"), BaseError("two")
        multi = error_from_list([e1, e2])
        self.assertTrue(str(multi).startswith("first of 2 errors: "))
        self.assertIs(multi.cause(), e1)

    def test_single_error_wording(self):
        self.assertEqual(str(MultiError([ValueError("only")])), "first of 1 error: only")

    def test_empty_multi_error_is_rejected(self):
        with self.assertRaises(InvalidConstructionError):
            MultiError([])

    def test_error_for_each(self):
        e1, e2 = ValueError("one"), ValueError("two")
        seen = []
        error_for_each(MultiError([e1, e2]), seen.append)
        self.assertEqual(seen, [e1, e2])

        seen.clear()
        error_for_each(e1, seen.append)
        self.assertEqual(seen, [e1])


if __name__ == '__main__':
    unittest.main()
