import io
import re
import sys
import unittest
from contextlib import redirect_stdout

from kial.core.lexer import Token, TokenKind
from kial.lang.error import DivisionByZero, ErrorHandler, EvalError, KialError, ParseError


def strip_ansi(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class KialErrorTestCase(unittest.TestCase):

    def test_message(self):
        error = KialError("binding does not exist: {}", "abc")
        self.assertEqual("binding does not exist: abc", error.plain)
        self.assertEqual("binding does not exist: abc", str(error))
        self.assertIn("abc", error.msg)
        self.assertEqual("abc", error.expr)
        self.assertEqual(3, error.end)
        self.assertFalse(error.fatal)

    def test_several_exprs(self):
        error = EvalError("unsupported operation: {} {} {}", ("1", "-", "\"a\""))
        self.assertEqual("unsupported operation: 1 - \"a\"", str(error))
        self.assertEqual("1", error.expr)
        self.assertFalse(error.diagnosis)

    def test_no_exprs(self):
        error = KialError("keyboard interrupt")
        self.assertEqual("keyboard interrupt", str(error))
        self.assertEqual("", error.expr)

    def test_expected_token(self):
        error = ParseError.expected_token(TokenKind.SEMI, Token.of("a"), 4)
        self.assertEqual("expected ;, got identifier", str(error))
        self.assertEqual(TokenKind.SEMI, error.expected)
        self.assertEqual(TokenKind.IDENT, error.actual)
        self.assertEqual(4, error.position)

        error = ParseError.expected_token(TokenKind.SEMI, None)
        self.assertEqual("expected ;, got none", str(error))
        self.assertIsNone(error.actual)
        self.assertIsNone(error.position)

    def test_fatal(self):
        error = DivisionByZero("division by zero: {} / {}", ("1", "0"))
        self.assertTrue(error.fatal)
        self.assertIsInstance(error, EvalError)
        self.assertIsInstance(error, KialError)


class ErrorHandlerTestCase(unittest.TestCase):

    def capture(self, handler, error):
        out = io.StringIO()
        with redirect_stdout(out):
            with handler:
                raise error
        return strip_ansi(out.getvalue())

    def test_fatal_handler_exits(self):
        out = io.StringIO()
        with self.assertRaises(SystemExit) as context:
            with redirect_stdout(out):
                with ErrorHandler():
                    raise EvalError("binding does not exist: {}", "a")
        self.assertEqual(1, context.exception.code)
        self.assertIn("error: binding does not exist: a", strip_ansi(out.getvalue()))

    def test_non_fatal_handler_continues(self):
        handler = ErrorHandler(fatal=False)
        out = self.capture(handler, EvalError("binding does not exist: {}", "a"))
        self.assertEqual("error: binding does not exist: a\n", out)
        self.assertEqual(1, handler.errors)

        self.capture(handler, ParseError("malformed statement: {}", "expected ;, got none", diagnosis=False))
        self.assertEqual(2, handler.errors)

    def test_fatal_error_label(self):
        out = self.capture(ErrorHandler(fatal=False), DivisionByZero("division by zero: {} / {}", ("1", "0")))
        self.assertEqual("fatal error: division by zero: 1 / 0\n", out)

    def test_traceback(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("a.kial")
        handler.register_line("a.kial", "let a = ;", 3)

        out = self.capture(handler, ParseError("malformed statement: {}", "expected expression, got ;",
                                               diagnosis=False))
        self.assertEqual("  File 'a.kial', line 3:\n    let a = ;\n"
                         "error: malformed statement: expected expression, got ;\n", out)
        self.assertEqual({"a.kial": (None, None)}, handler.traceback)

    def test_nested_traceback(self):
        handler = ErrorHandler(fatal=False)
        handler.register_line("a.kial", "first", 1)
        handler.register_line("b.kial", "second", 2)

        out = self.capture(handler, KialError("oops", diagnosis=False))
        self.assertTrue(out.startswith("Traceback:\n"))
        self.assertIn("File 'b.kial', line 2", out)

    def test_diagnosis(self):
        error = KialError("bad {}", "abc", start=1, end=2)
        self.assertEqual("  abc\n   ^", strip_ansi(ErrorHandler.diagnose(error)))

        error = KialError("bad {}", "abcd")
        self.assertEqual("  abcd\n  ^~~~", strip_ansi(ErrorHandler.diagnose(error)))

        out = self.capture(ErrorHandler(fatal=False), KialError("bad {}", "abc"))
        self.assertEqual("error: bad abc\n  abc\n  ^~~\n", out)

    def test_internal_error(self):
        handler = ErrorHandler(fatal=False)
        out = io.StringIO()
        with self.assertRaises(ValueError):
            with redirect_stdout(out):
                with handler:
                    raise ValueError("boom")
        self.assertEqual("[internal] error: unknown error: 'ValueError: boom'\n", strip_ansi(out.getvalue()))

    def test_keyboard_interrupt(self):
        out = self.capture(ErrorHandler(fatal=False), KeyboardInterrupt())
        self.assertEqual("error: keyboard interrupt\n", out)

    def test_recursion(self):
        out = self.capture(ErrorHandler(fatal=False), RecursionError())
        self.assertIn("maximum recursion depth exceeded", out)

    def test_system_exit_passes_through(self):
        with self.assertRaises(SystemExit) as context:
            with ErrorHandler(fatal=False):
                sys.exit(3)
        self.assertEqual(3, context.exception.code)

    def test_warn(self):
        handler = ErrorHandler(fatal=False)
        handler.register_line("<in>", "{ let a = 1; }", 2)

        out = io.StringIO()
        with redirect_stdout(out):
            handler.warn("'{}' ends with a binding, so its value is ()", "{ let a = 1; }", diagnosis=False)
        self.assertEqual("<in>:2: warning: '{ let a = 1; }' ends with a binding, so its value is ()\n",
                         strip_ansi(out.getvalue()))
        self.assertEqual(0, handler.errors)

    def test_register_step(self):
        out = io.StringIO()
        with redirect_stdout(out):
            ErrorHandler(trace=False).register_step("tokens", "1 2 +")
        self.assertEqual("", out.getvalue())

        with redirect_stdout(out):
            ErrorHandler(trace=True).register_step("tokens", "1 2 +")
        self.assertEqual("tokens 1 2 +\n", strip_ansi(out.getvalue()))


if __name__ == '__main__':
    unittest.main()
