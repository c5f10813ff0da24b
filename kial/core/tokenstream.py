"""Token stream with arbitrary lookahead and position snapshots, sitting between the tokenizer and the parser."""

from kial.core.lexer import TokenKind, tokenize
from kial.core.precedence import PostfixResolver


class TokenStream:
    """FIFO lookahead buffer over a lazy token source.

    Tokens are pulled from the source only as deep as the furthest peek, and kept in the buffer so that repeated
    peeks don't re-tokenize. The read position is a plain index into the buffer: mark() returns it and reset()
    moves back to it, which is how parsing alternatives are retried from the same input position.
    """

    def __init__(self, tokens):
        self.tokens = iter(tokens)
        self.buffer = []
        self.pos = 0
        self.exhausted = False

    @classmethod
    def from_source(cls, source, resolve_precedence=True):
        """Token stream over source. If resolve_precedence, binary operations come out in postfix order."""
        tokens = tokenize(source)
        if resolve_precedence:
            tokens = PostfixResolver(tokens)
        return cls(tokens)

    def fill(self, n):
        """Makes sure at least n unconsumed tokens are buffered, unless the source runs out first."""
        while not self.exhausted and len(self.buffer) - self.pos < n:
            token = next(self.tokens, None)
            if token is None:
                self.exhausted = True
            else:
                self.buffer.append(token)

    def read(self, n):
        """Returns (up to) the next n unconsumed tokens without consuming them."""
        self.fill(n)
        return self.buffer[self.pos:self.pos + n]

    def peek(self, n=0):
        """Returns the nth unconsumed token (0 is the next one), or None if the stream ends before it."""
        self.fill(n + 1)
        idx = self.pos + n
        return self.buffer[idx] if idx < len(self.buffer) else None

    def next(self):
        """Consumes and returns the next token, or None at the end of the stream."""
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def mark(self):
        return self.pos

    def reset(self, mark):
        if not 0 <= mark <= len(self.buffer):
            raise ValueError(f"invalid stream mark {mark}")
        self.pos = mark

    def significant(self, n):
        """Returns the kinds of the next n tokens that aren't whitespace."""
        kinds = []
        idx = 0
        while len(kinds) < n:
            token = self.peek(idx)
            if token is None:
                break
            if token.kind is not TokenKind.WHITESPACE:
                kinds.append(token.kind)
            idx += 1
        return kinds

    def starts_with(self, *kinds):
        """Whether the next significant tokens are exactly kinds, in order."""
        return self.significant(len(kinds)) == list(kinds)

    def starts_with_let(self):
        return self.starts_with(TokenKind.LET)

    def is_decl(self):
        """`let <ident> ;`"""
        return self.starts_with(TokenKind.LET, TokenKind.IDENT, TokenKind.SEMI)

    def is_init(self):
        """`let <ident> = ...`"""
        return self.starts_with(TokenKind.LET, TokenKind.IDENT, TokenKind.EQUALS)

    def is_assignment(self):
        """`<ident> = ...`"""
        return self.starts_with(TokenKind.IDENT, TokenKind.EQUALS)

    def __iter__(self):
        return self

    def __next__(self):
        token = self.next()
        if token is None:
            raise StopIteration
        return token
