import io
import os
import re
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from kial.main import main


def strip_ansi(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, source):
        path = os.path.join(self.tmp.name, "main.kial")
        with open(path, "w") as file:
            file.write(source)
        return path

    def run_main(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            main(argv)
        return strip_ansi(out.getvalue())

    def test_file(self):
        path = self.write("let a = 2;\na * 21\n{\n    let a = \"do\";\n    a + \"ne\"\n}\n")
        self.assertEqual("42\n\"done\"\n", self.run_main([path]))

    def test_infix(self):
        path = self.write("2 * 3 + 1\n")
        self.assertEqual("7\n", self.run_main([path]))
        self.assertEqual("8\n", self.run_main([path, "--infix"]))

    def test_trace(self):
        path = self.write("1 + 2\n")
        out = self.run_main([path, "--trace"])
        self.assertIn("tokens 1 2 +", out)
        self.assertIn("  tree (1 + 2)", out)
        self.assertTrue(out.endswith(" value 3\n3\n"))

    def test_errors_are_fatal(self):
        should_exit = {
            "1 / 0\n": "fatal error: division by zero: 1 / 0",
            "missing\n": "error: binding does not exist: missing",
            "let a = ;\n": "error: malformed statement: expected expression, got ;",
        }
        for source, msg in should_exit.items():
            path = self.write(source)
            out = io.StringIO()
            with self.assertRaises(SystemExit, msg=source) as context:
                with redirect_stdout(out):
                    main([path])
            self.assertEqual(1, context.exception.code, source)
            self.assertIn(msg, strip_ansi(out.getvalue()), source)

    def test_missing_file(self):
        path = os.path.join(self.tmp.name, "missing.kial")
        out = io.StringIO()
        with self.assertRaises(SystemExit) as context:
            with redirect_stdout(out):
                main([path])
        self.assertEqual(1, context.exception.code)
        self.assertIn("could not be opened", strip_ansi(out.getvalue()))

    def test_bad_arguments(self):
        with self.assertRaises(SystemExit) as context:
            with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
                main(["--bogus"])
        self.assertEqual(2, context.exception.code)

    @mock.patch("kial.main.Shell")
    def test_command_line(self, shell):
        main([])
        shell.assert_called_once()
        sess = shell.call_args[0][0]
        self.assertTrue(sess.cmd_line)
        self.assertTrue(sess.resolve_precedence)
        shell.return_value.cmdloop.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
