# Evaluates parsed dice formulas against a random source.
import typing

from dice_details import DiceRoll, dice_roll
from dice_errors import DivisionByZero
from dice_lexer import ComparisonOperator, MathOperator
from dice_syntax import (
    ComparisonExpression,
    DiceExpression,
    Literal,
    MathExpression,
    ParsedExpression,
    Parenthesized,
    ValueExpr,
)

COMPARISONS = {
    ComparisonOperator.EQUALS: lambda x, y: x == y,
    ComparisonOperator.NOT_EQUALS: lambda x, y: x != y,
    ComparisonOperator.GREATER: lambda x, y: x > y,
    ComparisonOperator.GREATER_EQUALS: lambda x, y: x >= y,
    ComparisonOperator.LESS: lambda x, y: x < y,
    ComparisonOperator.LESS_EQUALS: lambda x, y: x <= y,
}


def _divide(x: int, y: int) -> int:
    if y == 0:
        raise DivisionByZero()
    # truncate toward zero
    quotient = abs(x) // abs(y)
    return quotient if (x < 0) == (y < 0) else -quotient


ARITHMETICS = {
    MathOperator.PLUS: lambda x, y: x + y,
    MathOperator.MINUS: lambda x, y: x - y,
    MathOperator.TIMES: lambda x, y: x * y,
    MathOperator.DIVIDE: _divide,
}


# Result of a formula without a comparison.
class TotalResult(typing.NamedTuple):
    total: int
    rolls: tuple[DiceRoll, ...] = ()

    @property
    def value(self) -> int:
        return self.total


# Result of a formula with a comparison, e.g. whether `1d20+5>=15` passed.
class ComparisonResult(typing.NamedTuple):
    passed: bool
    operator: ComparisonOperator
    lhs: int
    rhs: int
    rolls: tuple[DiceRoll, ...] = ()

    @property
    def value(self) -> bool:
        return self.passed


EvalResult = typing.Union[TotalResult, ComparisonResult]


# Reduce an arithmetic expression to an integer.
# Dice rolled along the way are appended to `rolls` in draw order.
def evaluate_value(node: ValueExpr, rng, rolls: list[DiceRoll]) -> int:
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, DiceExpression):
        result = dice_roll(node, rng)
        rolls.append(result)
        return result.total()
    if isinstance(node, Parenthesized):
        return evaluate_value(node.inner, rng, rolls)
    if isinstance(node, MathExpression):
        leftmost, pending = node.spine()
        value = evaluate_value(leftmost, rng, rolls)
        for operator, rhs in pending:
            value = ARITHMETICS[operator](value, evaluate_value(rhs, rng, rolls))
        return value
    raise TypeError(f"Not a dice value expression: {node!r}")


# Evaluate a parsed formula: a total, or pass/fail when it has a comparison.
# `rng` must provide `roll_die(sides)`, see dice_random.RandomSource.
def evaluate(expr: ParsedExpression, rng) -> EvalResult:
    rolls: list[DiceRoll] = []
    if isinstance(expr, ComparisonExpression):
        lhs = evaluate_value(expr.lhs, rng, rolls)
        rhs = evaluate_value(expr.rhs, rng, rolls)
        passed = COMPARISONS[expr.operator](lhs, rhs)
        return ComparisonResult(passed, expr.operator, lhs, rhs, tuple(rolls))
    total = evaluate_value(expr, rng, rolls)
    return TotalResult(total, tuple(rolls))
