import types
import unittest

from kial.core.lexer import Token, TokenKind, tokenize


def kinds(source):
    return [token.kind for token in tokenize(source)]


class TokenizeTestCase(unittest.TestCase):

    def test_statement(self):
        expected = [
            Token(TokenKind.LET, "let", 3),
            Token(TokenKind.WHITESPACE, " ", 1),
            Token(TokenKind.IDENT, "a", 1),
            Token(TokenKind.WHITESPACE, " ", 1),
            Token(TokenKind.EQUALS, "=", 1),
            Token(TokenKind.WHITESPACE, " ", 1),
            Token(TokenKind.NUMBER, "10", 2),
            Token(TokenKind.SEMI, ";", 1),
            Token(TokenKind.EOF, "", 0),
        ]
        self.assertEqual(expected, list(tokenize("let a = 10;")))

    def test_is_total(self):
        cases = ["", "let a = 10;", "@#$", "\"unterminated", "let\tx\n= 1", "{ [a] } % 3", "héllo wörld 42"]
        for case in cases:
            tokens = list(tokenize(case))
            self.assertEqual(case, "".join(token.text for token in tokens), case)
            self.assertEqual(len(case), sum(token.length for token in tokens), case)
            self.assertEqual(TokenKind.EOF, tokens[-1].kind, case)

    def test_is_lazy(self):
        tokens = tokenize("a b")
        self.assertIsInstance(tokens, types.GeneratorType)
        self.assertEqual(Token(TokenKind.IDENT, "a", 1), next(tokens))

    def test_keywords(self):
        cases = {
            "let": TokenKind.LET,
            "letter": TokenKind.IDENT,
            "let1": TokenKind.IDENT,
            "_let": TokenKind.IDENT,
            "le": TokenKind.IDENT,
        }
        for case, kind in cases.items():
            self.assertEqual(kind, Token.of(case).kind, case)

    def test_identifiers(self):
        cases = {"abcd aaaa": "abcd", "hello_world()": "hello_world", "bar123()": "bar123", "_x": "_x"}
        for case, text in cases.items():
            token = Token.of(case)
            self.assertEqual(TokenKind.IDENT, token.kind, case)
            self.assertEqual(text, token.text, case)

    def test_numbers_are_greedy(self):
        self.assertEqual([TokenKind.NUMBER, TokenKind.IDENT, TokenKind.EOF], kinds("123abc"))
        self.assertEqual(Token(TokenKind.NUMBER, "123456", 6), Token.of("123456+99999"))

    def test_strings(self):
        self.assertEqual(Token(TokenKind.STRING, "\"hi there\"", 10), Token.of("\"hi there\" + 1"))
        self.assertEqual(Token(TokenKind.STRING, "\"\"", 2), Token.of("\"\""))
        self.assertEqual([TokenKind.STRING, TokenKind.EOF], kinds("\"abc"))
        self.assertEqual(Token(TokenKind.STRING, "\"{ let }\"", 9), Token.of("\"{ let }\""))

    def test_punctuation(self):
        expected = [
            TokenKind.OPEN_PAREN, TokenKind.CLOSE_PAREN, TokenKind.OPEN_BRACE, TokenKind.CLOSE_BRACE,
            TokenKind.OPEN_BRACKET, TokenKind.CLOSE_BRACKET, TokenKind.SEMI, TokenKind.EQUALS, TokenKind.PLUS,
            TokenKind.MINUS, TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT, TokenKind.EOF,
        ]
        self.assertEqual(expected, kinds("(){}[];=+-*/%"))

    def test_whitespace_runs(self):
        self.assertEqual(Token(TokenKind.WHITESPACE, " \t\r\n ", 5), Token.of(" \t\r\n 1"))

    def test_unknown(self):
        should_be_unknown = ["@", "#", "$", "&", "!", ","]
        for case in should_be_unknown:
            self.assertEqual(Token(TokenKind.UNKNOWN, case, 1), Token.of(case), case)

    def test_operand_and_operator(self):
        should_be_operands = ["a", "1", "\"s\""]
        for case in should_be_operands:
            self.assertTrue(Token.of(case).is_operand, case)
            self.assertFalse(Token.of(case).is_operator, case)

        should_be_operators = ["+", "-", "*", "/", "%"]
        for case in should_be_operators:
            self.assertTrue(Token.of(case).is_operator, case)
            self.assertFalse(Token.of(case).is_operand, case)

        self.assertFalse(Token.of(";").is_operand)
        self.assertFalse(Token.of("let").is_operand)


if __name__ == '__main__':
    unittest.main()
