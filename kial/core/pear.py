"""Pear: the parser combinator primitives that every grammar production is built from.

Every primitive either succeeds and consumes, or fails with a ParseError and leaves the stream where it was.
Productions made of several primitives can still fail halfway, after consuming a prefix; Pear.attempt runs a
production from a snapshot and rewinds the stream if it fails, so the next alternative starts from the same place.
"""

from kial.core.lexer import TokenKind
from kial.core.tokenstream import TokenStream
from kial.lang.error import ParseError


def is_whitespace(token):
    return token.kind is TokenKind.WHITESPACE


class Pear:

    def __init__(self, ts, postfix=False):
        self.ts = ts
        self.postfix = postfix  # whether binary operations arrive in postfix order
        self.furthest = None  # failure that got furthest into the stream, used for diagnostics

    @classmethod
    def from_source(cls, source, resolve_precedence=True):
        return cls(TokenStream.from_source(source, resolve_precedence), postfix=resolve_precedence)

    @property
    def position(self):
        return self.ts.mark()

    def peek_next(self, skip_whitespace=True):
        """Next (significant, if skip_whitespace) token without consuming anything, or None."""
        idx = 0
        token = self.ts.peek(idx)
        while skip_whitespace and token is not None and is_whitespace(token):
            idx += 1
            token = self.ts.peek(idx)
        return token

    def fail(self, error):
        """Records error as the furthest failure if nothing has failed later in the stream. Returns error, so that
        callers can `raise pear.fail(...)`.
        """
        if error.position is None:
            error.position = self.position
        if self.furthest is None or error.position > self.furthest.position:
            self.furthest = error
        return error

    def extract_while(self, pred):
        """Consumes tokens while pred holds. Always succeeds, returning the (possibly empty) list consumed."""
        taken = []
        token = self.ts.peek()
        while token is not None and pred(token):
            taken.append(self.ts.next())
            token = self.ts.peek()
        return taken

    def extract_whitespace(self):
        return self.extract_while(is_whitespace)

    def take_one_matching(self, pred, expected, skip_whitespace=True):
        """Consumes and returns the next token if pred holds for it. Otherwise raises 'expected <expected>' without
        consuming anything, including skipped whitespace.
        """
        mark = self.ts.mark()
        if skip_whitespace:
            self.extract_whitespace()

        token = self.ts.peek()
        if token is None or not pred(token):
            error = ParseError.expected_token(expected, token, self.position)
            self.ts.reset(mark)
            raise self.fail(error)

        return self.ts.next()

    def tag(self, kind, skip_whitespace=True):
        """Consumes and returns the next token if it is of kind."""
        return self.take_one_matching(lambda token: token.kind is kind, kind, skip_whitespace)

    def extract_identifier(self):
        return self.tag(TokenKind.IDENT)

    def attempt(self, production, *args):
        """Runs production(self, *args). If it raises a ParseError, rewinds to where it started and re-raises."""
        mark = self.ts.mark()
        try:
            return production(self, *args)
        except ParseError:
            self.ts.reset(mark)
            raise

    def optional(self, production, *args):
        """Like attempt, but returns None instead of raising."""
        try:
            return self.attempt(production, *args)
        except ParseError:
            return None

    def at_end(self):
        """Whether only whitespace (and the end of input marker) is left."""
        token = self.peek_next()
        return token is None or token.kind is TokenKind.EOF
