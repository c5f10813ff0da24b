"""Error handling for the kial language. Only KialErrors should be encountered while running: if another type of
error makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class KialError(Exception):
    """Templates an error/warning message so that it can be reported with the offending snippet highlighted."""
    fatal = False

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.plain = msg.format(*exprs)
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)


class ParseError(KialError):
    """Raised when source text doesn't form a statement. expected/actual are TokenKinds (actual is None at the end
    of input) and position is the index of the offending token in the token stream, when known.
    """

    def __init__(self, msg, exprs=None, expected=None, actual=None, position=None, **kwargs):
        super().__init__(msg, exprs, **kwargs)
        self.expected = expected
        self.actual = actual
        self.position = position

    @classmethod
    def expected_token(cls, expected, token, position=None):
        """'expected X, got Y' error. token is the token that was found instead, or None."""
        if token is None:
            return cls("expected {}, got none", str(expected), expected=expected, position=position,
                       diagnosis=False)
        return cls("expected {}, got {}", (str(expected), str(token.kind)), expected=expected, actual=token.kind,
                   position=position, diagnosis=False)


class EvalError(KialError):
    """Raised when a parsed statement can't be evaluated."""

    def __init__(self, msg, exprs=None, **kwargs):
        kwargs.setdefault("diagnosis", False)
        super().__init__(msg, exprs, **kwargs)


class DivisionByZero(EvalError):
    """Integer division by zero. Fatal, but still reported through the normal error channel."""
    fatal = True


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report kial errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}
        self.errors = 0

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, label, text):
        """Prints a single step of the trace (tokens, tree, value) if tracing is enabled."""
        if self.trace:
            print(colored(f"{label:>6} ", ErrorHandler.STEP, attrs=["bold"]) + colored(str(text), attrs=["dark"]))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        """Returns 'file:line: ' for the innermost registered line, or an empty string."""
        for file, (line, line_num) in reversed(list(self.traceback.items())):
            if line is not None:
                return f"{file}:{line_num}: "
        return ""

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = KialError(*args, **kwargs)

        error_msg = colored(self._location(), attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a KialError, and self.traceback must be a dict
        of file: (line, line_num) representing origination of error.
        """
        self.errors += 1

        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        label = "fatal error: " if error.fatal else "error: "
        error_msg += colored(label, ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # reset lines, keep registered files

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(KialError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(KialError("maximum recursion depth exceeded (are blocks nested too deeply?)"))
        elif exc_type is not None and issubclass(exc_type, KialError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(KialError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
