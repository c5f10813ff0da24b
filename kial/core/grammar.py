"""Recursive-descent grammar for the kial language: one parsing routine per construct, each built from the Pear
primitives. See kial/core/ast.py for the grammar itself.

The grammar isn't LL(1): `let a;`, `let a = ...` and `a = ...` are told apart by looking up to three tokens ahead.
Statement alternatives are tried in order (binding, assignment, expression), each from the same snapshot of the
stream. If none of them matches, the error that got furthest into the input is reported.

By default, the token stream is precedence-resolved (see kial/core/precedence.py), and operations are folded from
postfix order. With resolve_precedence=False, operations are parsed as `<atom> <op> <expr>`: they group to the
right and all operators bind equally.
"""

from kial.core.ast import (Assignment, Block, BindingUsage, Declaration, Initialization, NumberLiteral, Op,
                           Operation, StringLiteral)
from kial.core.lexer import TokenKind
from kial.core.pear import Pear
from kial.lang.error import ParseError


I32_MAX = 2 ** 31 - 1

EXPRESSION = "expression"
STATEMENT = "statement"


def parse_literal(pear):
    token = pear.peek_next()
    if token is None or token.kind not in (TokenKind.STRING, TokenKind.NUMBER):
        raise pear.fail(ParseError.expected_token("literal", token))

    position = pear.position
    token = pear.tag(token.kind)

    if token.kind is TokenKind.STRING:
        if len(token.text) < 2 or not token.text.endswith("\""):
            raise pear.fail(ParseError("unterminated string literal {}", token.text, position=position))
        return StringLiteral(token.text[1:-1])

    value = int(token.text)
    if value > I32_MAX:
        raise pear.fail(ParseError("number literal {} out of range", token.text, position=position))
    return NumberLiteral(value)


def parse_binding_usage(pear):
    return BindingUsage(pear.extract_identifier().text)


def parse_block(pear):
    """`{` statement* `}`. Statements are parsed until one fails to start, which should be at the closing brace."""
    pear.tag(TokenKind.OPEN_BRACE)

    start = pear.position
    stmts = []
    while True:
        token = pear.peek_next()
        if token is None or token.kind in (TokenKind.CLOSE_BRACE, TokenKind.EOF):
            break
        stmt = pear.optional(parse_statement)
        if stmt is None:
            break
        stmts.append(stmt)

    try:
        pear.tag(TokenKind.CLOSE_BRACE)
    except ParseError as error:
        raise best_error(pear, [error], start)

    return Block(tuple(stmts))


def parse_atom(pear):
    """Literal, binding usage or block, chosen by the kind of the next token."""
    token = pear.peek_next()
    kind = token.kind if token is not None else None

    if kind in (TokenKind.STRING, TokenKind.NUMBER):
        return parse_literal(pear)
    elif kind is TokenKind.IDENT:
        return parse_binding_usage(pear)
    elif kind is TokenKind.OPEN_BRACE:
        return parse_block(pear)

    raise pear.fail(ParseError.expected_token(EXPRESSION, token))


def parse_operator(pear):
    """Consumes an operator token and returns its Op."""
    token = pear.peek_next()
    if token is None or not token.is_operator:
        raise pear.fail(ParseError.expected_token("operator", token))

    op = Op.from_token(token)
    if op is None:
        raise pear.fail(ParseError("unsupported operator {}", token.text, actual=token.kind))

    pear.tag(token.kind)
    return op


def parse_infix_expr(pear):
    """`<atom> (<op> <expr>)?`"""
    left = parse_atom(pear)

    token = pear.peek_next()
    if token is None or not token.is_operator:
        return left

    op = parse_operator(pear)
    right = parse_infix_expr(pear)
    return Operation(left, right, op)


def parse_postfix_expr(pear):
    """Folds a run of postfix items (atoms and operators) into a single expression with an operand stack.

    The run ends at the first token that can't continue it. If more than one expression is left on the stack then,
    the stream is rewound to the last point where exactly one was, so `{ a b }` is read as two statements.
    """
    stack = []
    rewind = None  # (stream mark, expression) when the stack last held exactly one expression

    while True:
        token = pear.peek_next()
        if token is None:
            break

        if token.is_operand or token.kind is TokenKind.OPEN_BRACE:
            if stack and pear.ts.is_assignment():
                break  # `<ident> =` starts the next statement
            stack.append(pear.attempt(parse_atom))

        elif token.is_operator:
            position = pear.position
            op = parse_operator(pear)
            if len(stack) < 2:
                raise pear.fail(ParseError("operator {} is missing an operand", str(op), actual=token.kind,
                                           position=position))
            right = stack.pop()
            left = stack.pop()
            stack.append(Operation(left, right, op))

        else:
            break

        if len(stack) == 1:
            rewind = (pear.position, stack[0])

    if not stack:
        raise pear.fail(ParseError.expected_token(EXPRESSION, pear.peek_next()))

    if len(stack) > 1:
        mark, expr = rewind
        pear.ts.reset(mark)
        return expr
    return stack[0]


def parse_expr(pear):
    if pear.postfix:
        return parse_postfix_expr(pear)
    return parse_infix_expr(pear)


def parse_binding(pear):
    """`let <ident> ;` (Declaration) or `let <ident> = <expr> ;` (Initialization)."""
    pear.tag(TokenKind.LET)
    name = pear.extract_identifier().text

    token = pear.peek_next()
    if token is not None and token.kind is TokenKind.SEMI:
        pear.tag(TokenKind.SEMI)
        return Declaration(name)

    pear.tag(TokenKind.EQUALS)
    value = parse_expr(pear)
    pear.tag(TokenKind.SEMI)
    return Initialization(name, value)


def parse_assignment(pear):
    """`<ident> = <expr> ;`"""
    name = pear.extract_identifier().text
    pear.tag(TokenKind.EQUALS)
    value = parse_expr(pear)
    pear.tag(TokenKind.SEMI)
    return Assignment(name, value)


def parse_expr_stmt(pear):
    """A bare expression. A trailing `;` is allowed but not required."""
    expr = parse_expr(pear)
    pear.optional(Pear.tag, TokenKind.SEMI)
    return expr


def best_error(pear, errors, start):
    """Returns the error that got furthest into the stream, considering errors and anything recorded by pear since
    start. Earlier errors win ties.
    """
    candidates = list(errors)
    if pear.furthest is not None and pear.furthest.position >= start:
        candidates.append(pear.furthest)
    return max(candidates, key=lambda error: error.position if error.position is not None else -1)


def parse_statement(pear):
    """Binding, assignment or expression, tried in that order."""
    start = pear.position
    productions = [parse_binding]
    if pear.ts.is_assignment():
        productions.append(parse_assignment)
    productions.append(parse_expr_stmt)

    errors = []
    for production in productions:
        try:
            return pear.attempt(production)
        except ParseError as error:
            errors.append(error)

    best = best_error(pear, errors[1:] + errors[:1], start)  # binding's 'expected let' is the least useful
    raise ParseError("malformed statement: {}", best.plain, expected=best.expected, actual=best.actual,
                     position=best.position, diagnosis=False) from best


def parse(source, resolve_precedence=True):
    """Parses one statement from the start of source. Trailing input is left alone."""
    pear = Pear.from_source(source, resolve_precedence)
    return parse_statement(pear)


def parse_program(source, resolve_precedence=True):
    """Parses every statement in source, up to the end of input."""
    pear = Pear.from_source(source, resolve_precedence)

    stmts = []
    while not pear.at_end():
        pear.furthest = None
        stmts.append(parse_statement(pear))
    return stmts
