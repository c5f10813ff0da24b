"""Tree-walking evaluator: maps each syntax tree node to a runtime value against an Environment."""

from kial.core.ast import (Assignment, Block, BindingUsage, Declaration, Initialization, NumberLiteral, Op,
                           Operation, StringLiteral)
from kial.core.values import UNIT, Number, Str
from kial.lang.error import DivisionByZero, EvalError, KialError


I32_MIN = -2 ** 31
I32_MAX = 2 ** 31 - 1


def divide(left, right):
    """Integer division truncating toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def apply_numbers(op, left, right):
    if op is Op.ADD:
        result = left + right
    elif op is Op.SUB:
        result = left - right
    elif op is Op.MUL:
        result = left * right
    else:
        if right == 0:
            raise DivisionByZero("division by zero: {} / {}", (str(left), str(right)))
        result = divide(left, right)

    if not I32_MIN <= result <= I32_MAX:
        raise EvalError("integer overflow: {} {} {}", (str(left), str(op), str(right)))
    return result


def eval_operation(node, env):
    left = evaluate(node.left, env)
    right = evaluate(node.right, env)

    if isinstance(left, Number) and isinstance(right, Number):
        return Number(apply_numbers(node.op, left.value, right.value))
    elif isinstance(left, Str) and isinstance(right, Str) and node.op is Op.ADD:
        return Str(left.value + right.value)

    raise EvalError("unsupported operation: {} {} {}", (str(left), str(node.op), str(right)))


def eval_block(node, env):
    """Runs every statement in a child frame, then evaluates the last statement again for the block's value."""
    if not node.stmts:
        return UNIT

    with env.child() as scope:
        for stmt in node.stmts:
            evaluate(stmt, scope)
        return evaluate(node.stmts[-1], scope)


def eval_assignment(node, env):
    value = evaluate(node.value, env)
    env.get_binding(node.name)  # must already be bound somewhere in the chain
    env.store_binding(node.name, value)
    return UNIT


def evaluate(node, env):
    """Evaluates a statement or expression node against env and returns its value."""
    if isinstance(node, NumberLiteral):
        return Number(node.value)
    elif isinstance(node, StringLiteral):
        return Str(node.text)
    elif isinstance(node, BindingUsage):
        return env.get_binding(node.name)
    elif isinstance(node, Operation):
        return eval_operation(node, env)
    elif isinstance(node, Block):
        return eval_block(node, env)
    elif isinstance(node, Initialization):
        env.store_binding(node.name, evaluate(node.value, env))
        return UNIT
    elif isinstance(node, Declaration):
        env.store_binding(node.name, UNIT)
        return UNIT
    elif isinstance(node, Assignment):
        return eval_assignment(node, env)

    raise KialError(f"cannot evaluate '{type(node).__name__}'", internal=True)
