"""Session control for the kial language. Feeds source lines through the parser and evaluator, either in command line
mode or file interpretation mode. Bindings live in the session's root environment, so they persist from one line to
the next.
"""

from kial.core.ast import BINDINGS, EXPRS, Assignment, Block, Initialization, Operation
from kial.core.env import Environment
from kial.core.evaluator import evaluate
from kial.core.grammar import parse_program
from kial.core.lexer import TokenKind, tokenize
from kial.core.tokenstream import TokenStream
from kial.lang.error import KialError


class Session:
    """Governs a kial session, with one root environment shared by every statement run in it."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, resolve_precedence=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                                # used for error messages
        self.cmd_line = cmd_line                        # whether or not in command-line mode
        self.resolve_precedence = resolve_precedence    # whether operators have precedence

        self.env = Environment()
        self.to_exec = {}   # dict of line num: (line, statements) to execute
        self.results = []   # list of (statement, value) pairs, in execution order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise KialError("'{}' could not be opened", path, diagnosis=False)

            for expr, line_num in exprs:
                self.add(expr, line_num)

        elif not cmd_line:
            raise KialError("'<in>' is a reserved filename")

    @staticmethod
    def open_braces(line):
        """Number of '{' in line that aren't closed in line. Braces inside string literals don't count."""
        balance = 0
        for token in tokenize(line):
            if token.kind is TokenKind.OPEN_BRACE:
                balance += 1
            elif token.kind is TokenKind.CLOSE_BRACE:
                balance -= 1
        return balance

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary, which is the
        case while a block is left open. Returns updated value of line and add_to_prev.
        """
        line = line.rstrip()

        if exprs is not None:
            if add_to_prev and exprs:
                prev, prev_num = exprs.pop()
                line = prev + "\n" + line
                exprs.append((line, prev_num))
            elif line and not line.isspace():
                exprs.append((line, line_num))

        return line, Session.open_braces(line) > 0

    def add(self, expr, line_num):
        """Parses expr, which may hold several statements. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        if self.error_handler.trace:
            tokens = TokenStream.from_source(expr, self.resolve_precedence)
            shown = (str(token) for token in tokens if token.kind not in (TokenKind.WHITESPACE, TokenKind.EOF))
            self.error_handler.register_step("tokens", " ".join(shown))

        stmts = parse_program(expr, self.resolve_precedence)
        for stmt in stmts:
            self.error_handler.register_step("tree", stmt)
            for block in Session.blocks(stmt):
                if block.stmts and isinstance(block.stmts[-1], BINDINGS + (Assignment,)):
                    self.error_handler.warn("'{}' ends with a binding, so its value is ()", str(block),
                                            diagnosis=False)

        self.to_exec[line_num] = (expr, stmts)
        self.error_handler.remove_line(self.path)  # error was not raised

    @staticmethod
    def blocks(node):
        """Yields every Block in the tree rooted at node."""
        if isinstance(node, Block):
            yield node
            for stmt in node.stmts:
                yield from Session.blocks(stmt)
        elif isinstance(node, Operation):
            yield from Session.blocks(node.left)
            yield from Session.blocks(node.right)
        elif isinstance(node, (Initialization, Assignment)):
            yield from Session.blocks(node.value)

    def run(self):
        """Evaluates this session's pending statements in order. Will raise any errors that are encountered."""
        for line_num, (expr, stmts) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, expr, line_num)

            try:
                for stmt in stmts:
                    value = evaluate(stmt, self.env)
                    self.error_handler.register_step("value", value)
                    self.results.append((stmt, value))
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def values(self, exprs_only=False):
        """Values computed so far. If exprs_only, values of bindings and assignments are left out."""
        return [value for stmt, value in self.results if not exprs_only or isinstance(stmt, EXPRS)]

    def pop(self):
        """Removes and returns the most recent value."""
        __, value = self.results.pop()
        return value
