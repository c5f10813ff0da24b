"""Shunting-yard stage that rewrites infix binary operations into postfix (reverse Polish) order.

Example: `10 + 20 * 5` comes out as `10 20 5 * +`. Tokens that are neither operands nor operators (keywords, `=`,
`;`, ...) are passed through in place after flushing the held operators, which is what closes an arithmetic run at
a statement terminator. Whitespace is passed through without flushing, so it doesn't split an expression in two.

Braces nest: `{` is held as a barrier, and flushing only pops operators above the innermost barrier. `}` flushes
down to its barrier and removes it. Operators pending outside a block therefore wait for the block to close, and
`1 + { 2 }` comes out as `1 { 2 } +`.

Source: https://en.wikipedia.org/wiki/Shunting_yard_algorithm
"""

from collections import deque

from kial.core.lexer import TokenKind


PRECEDENCE = {
    TokenKind.OPEN_PAREN: 3,   # reserved for grouping, not used by the grammar yet
    TokenKind.CLOSE_PAREN: 3,
    TokenKind.STAR: 2,
    TokenKind.SLASH: 2,
    TokenKind.PERCENT: 2,
    TokenKind.PLUS: 1,
    TokenKind.MINUS: 1,
}


def is_barrier(token):
    return token.kind is TokenKind.OPEN_BRACE


class PostfixResolver:
    """Lazy iterator over tokens in postfix order. Pulls from tokens only as far as needed to emit the next one."""

    def __init__(self, tokens):
        self.tokens = iter(tokens)
        self.output = deque()  # tokens ready to be emitted, in order
        self.held = []         # operators waiting for their right operand, and brace barriers

    @staticmethod
    def precedence(token):
        try:
            return PRECEDENCE[token.kind]
        except KeyError:
            raise ValueError(f"{token.kind!r} does not have operator precedence") from None

    def handle_operator(self, token):
        """Pops every held operator of greater or equal precedence, so equal precedence associates to the left."""
        precedence = PostfixResolver.precedence(token)
        while self.held and not is_barrier(self.held[-1]) and PostfixResolver.precedence(self.held[-1]) >= precedence:
            self.output.append(self.held.pop())
        self.held.append(token)

    def flush(self):
        """Moves held operators to the output, down to the innermost barrier."""
        while self.held and not is_barrier(self.held[-1]):
            self.output.append(self.held.pop())

    def flush_all(self):
        while self.held:
            token = self.held.pop()
            if not is_barrier(token):
                self.output.append(token)

    def feed(self, token):
        """Routes a single token to the output queue or the holding stack."""
        if token.is_operand or token.kind is TokenKind.WHITESPACE:
            self.output.append(token)

        elif token.is_operator:
            self.handle_operator(token)

        elif token.kind is TokenKind.OPEN_BRACE:
            self.held.append(token)
            self.output.append(token)

        elif token.kind is TokenKind.CLOSE_BRACE:
            self.flush()
            if self.held:
                self.held.pop()  # the matching barrier
            self.output.append(token)

        elif token.kind is TokenKind.EOF:
            self.flush_all()
            self.output.append(token)

        else:
            self.flush()
            self.output.append(token)

    def __iter__(self):
        return self

    def __next__(self):
        while not self.output:
            token = next(self.tokens, None)
            if token is None:
                self.flush_all()
                break
            self.feed(token)

        if not self.output:
            raise StopIteration
        return self.output.popleft()
