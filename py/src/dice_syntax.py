# Syntax tree for parsed dice roll formulas.
# Nodes are immutable named tuples; each node owns its children.

import typing

from dice_lexer import ComparisonOperator, FilterKind, MathOperator


class Literal(typing.NamedTuple):
    value: int


class DiceFilter(typing.NamedTuple):
    kind: FilterKind
    # how many dice to keep or drop
    count: int


class DiceExpression(typing.NamedTuple):
    count: int
    sides: int
    filter: DiceFilter | None = None


class MathExpression(typing.NamedTuple):
    operator: MathOperator
    lhs: "ValueExpr"
    rhs: "ValueExpr"

    # Operator chains nest down the left side, one level per operator.
    # Printing, evaluation, comparison and hashing walk that spine in a loop
    # instead of recursing.
    def spine(self):
        pending = []
        node = self
        while isinstance(node, MathExpression):
            pending.append((node.operator, node.rhs))
            node = node.lhs
        pending.reverse()
        return node, pending

    def __eq__(self, other):
        if not isinstance(other, MathExpression):
            return tuple.__eq__(self, other)
        left, right = self, other
        while isinstance(left, MathExpression) and isinstance(right, MathExpression):
            if left.operator != right.operator or left.rhs != right.rhs:
                return False
            left, right = left.lhs, right.lhs
        return left == right

    def __ne__(self, other):
        equal = self.__eq__(other)
        if equal is NotImplemented:
            return equal
        return not equal

    def __hash__(self):
        leftmost, pending = self.spine()
        value = hash(leftmost)
        for operator, rhs in pending:
            value = hash((value, operator, rhs))
        return value


class Parenthesized(typing.NamedTuple):
    inner: "ValueExpr"


ValueExpr = typing.Union[Literal, DiceExpression, MathExpression, Parenthesized]


# The single top-level test of a formula, e.g. `1d20+5>=15`.
class ComparisonExpression(typing.NamedTuple):
    operator: ComparisonOperator
    lhs: ValueExpr
    rhs: ValueExpr


ParsedExpression = typing.Union[ValueExpr, ComparisonExpression]


# Describe an expression as notation.
# This should resemble the original input, minus whitespace.
def describe(node) -> str:
    if isinstance(node, Literal):
        return str(node.value)
    if isinstance(node, DiceExpression):
        text = f"{node.count}d{node.sides}"
        if node.filter is not None:
            text += f"{node.filter.kind.value}{node.filter.count}"
        return text
    if isinstance(node, MathExpression):
        leftmost, pending = node.spine()
        parts = [describe(leftmost)]
        for operator, rhs in pending:
            parts.append(operator.value)
            parts.append(describe(rhs))
        return "".join(parts)
    if isinstance(node, Parenthesized):
        return f"({describe(node.inner)})"
    if isinstance(node, ComparisonExpression):
        return f"{describe(node.lhs)}{node.operator.value}{describe(node.rhs)}"
    raise TypeError(f"Not a dice syntax node: {node!r}")
