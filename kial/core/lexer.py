"""Tokenizer for the kial language. Turns source text into a lazy sequence of classified tokens.

Tokens are recognized as follows:

```
<whitespace> ::= <space>+                          ; greedy
<ident>      ::= (<letter> | "_") (<alnum> | "_")*  ; "let" is reclassified as a keyword afterwards
<number>     ::= <digit>+                          ; greedy, unsigned
<string>     ::= '"' <not-quote>* '"'              ; quotes are kept in the token text
<punct>      ::= "(" | ")" | "{" | "}" | "[" | "]" | ";" | "=" | "+" | "-" | "*" | "/" | "%"
```

Anything else becomes a single-character UNKNOWN token, so tokenization never fails: malformed input is
only reported once the parser expects a token kind that isn't there.
"""

import enum
from dataclasses import dataclass


class TokenKind(enum.Enum):
    IDENT = "identifier"
    NUMBER = "numeric literal"
    STRING = "string literal"
    LET = "let"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    SEMI = ";"
    EQUALS = "="
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    WHITESPACE = "whitespace"
    EOF = "end of input"
    UNKNOWN = "unknown"

    def __str__(self):
        return self.value


KEYWORDS = {"let": TokenKind.LET}

PUNCTUATION = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    ";": TokenKind.SEMI,
    "=": TokenKind.EQUALS,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
}

OPERATORS = (TokenKind.PLUS, TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT)


@dataclass(frozen=True)
class Token:
    """A classified span of source text. length is the number of source characters consumed."""
    kind: TokenKind
    text: str
    length: int

    @classmethod
    def of(cls, text):
        """Returns the first token of text. Mostly useful for building expected tokens."""
        return next(tokenize(text))

    @property
    def is_operand(self):
        return self.kind in (TokenKind.NUMBER, TokenKind.IDENT, TokenKind.STRING)

    @property
    def is_operator(self):
        return self.kind in OPERATORS

    def __str__(self):
        if self.kind is TokenKind.WHITESPACE:
            return "WHITESPACE"
        elif self.kind is TokenKind.EOF:
            return "EOF"
        return self.text


def is_digit(char):
    return "0" <= char <= "9"


def is_ident_start(char):
    return char == "_" or char.isalpha()


def is_ident_continue(char):
    return char == "_" or char.isalnum()


def tokenize(source):
    """Lazily yields the tokens of source, ending with a single EOF token. Every character of source belongs to
    exactly one token.
    """
    pos = 0
    end = len(source)

    def take_while(start, pred):
        idx = start
        while idx < end and pred(source[idx]):
            idx += 1
        return idx

    while pos < end:
        char = source[pos]

        if char.isspace():
            stop = take_while(pos, str.isspace)
            kind = TokenKind.WHITESPACE

        elif is_digit(char):
            stop = take_while(pos, is_digit)
            kind = TokenKind.NUMBER

        elif is_ident_start(char):
            stop = take_while(pos + 1, is_ident_continue)
            kind = KEYWORDS.get(source[pos:stop], TokenKind.IDENT)

        elif char == "\"":
            stop = take_while(pos + 1, lambda c: c != "\"")
            stop = min(stop + 1, end)  # closing quote, if there is one
            kind = TokenKind.STRING

        else:
            stop = pos + 1
            kind = PUNCTUATION.get(char, TokenKind.UNKNOWN)

        yield Token(kind, source[pos:stop], stop - pos)
        pos = stop

    yield Token(TokenKind.EOF, "", 0)
