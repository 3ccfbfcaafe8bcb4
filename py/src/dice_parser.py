# Recursive descent parser for dice roll formulas.
#
# A formula is at most one comparison splitting the tokens into two
# arithmetic halves. Each half follows, from loosest to tightest binding:
#
#   arithmetic := term (('+' | '-') term)*
#   term       := primary (('*' | '/') primary)*
#   primary    := Number | dice | '(' arithmetic ')'
#   dice       := Number? 'd' Number (filter Number)?
#
# There is no unary +/-, and a dice term takes at most one filter.

from dice_config import MAX_NESTING_DEPTH
from dice_errors import (
    ConsecutiveAddOperators,
    ExpressionTooDeep,
    ExtraComparisonOperator,
    UnexpectedToken,
    UnmatchedParenthesis,
)
from dice_lexer import LexedExpression, Token, TokenKind
from dice_syntax import (
    ComparisonExpression,
    DiceExpression,
    DiceFilter,
    Literal,
    MathExpression,
    ParsedExpression,
    Parenthesized,
    ValueExpr,
)


# Parses one arithmetic expression from a slice of tokens.
# `end_position` is reported when the slice runs out where an operand is needed.
class Parser:
    def __init__(
        self,
        tokens: tuple[Token, ...],
        end_position: int,
        max_depth: int = MAX_NESTING_DEPTH,
    ):
        self.token_list = tokens
        self.end_position = end_position
        self.max_depth = max_depth
        self.iter_pos = 0
        self.depth = 0

    def _current(self) -> Token | None:
        if self.iter_pos < len(self.token_list):
            return self.token_list[self.iter_pos]
        return None

    def _next(self) -> Token | None:
        self.iter_pos += 1
        return self._current()

    def _unexpected(self, token: Token | None) -> UnexpectedToken:
        if token is None:
            return UnexpectedToken(self.end_position)
        return UnexpectedToken(token.start, token)

    # Consume the current token, which must be of the `expected` kind.
    def advance(self, expected: TokenKind) -> Token:
        token = self._current()
        if token is None or token.kind != expected:
            raise self._unexpected(token)
        self._next()
        return token

    def _is_math_op(self, token: Token | None, additive: bool) -> bool:
        return (
            token is not None
            and token.kind == TokenKind.MATH_OP
            and token.value.is_additive() == additive
        )

    # Parse the whole slice; anything left over after a complete expression
    # is an error.
    def parse(self) -> ValueExpr:
        expr = self.arithmetic()
        leftover = self._current()
        if leftover is not None:
            if leftover.kind == TokenKind.RIGHT_PAREN:
                raise UnmatchedParenthesis(leftover.start)
            raise self._unexpected(leftover)
        return expr

    def arithmetic(self) -> ValueExpr:
        left = self.term()
        while self._is_math_op(self._current(), additive=True):
            operator = self._current().value  # type: ignore
            follower = self._next()
            if self._is_math_op(follower, additive=True):
                raise ConsecutiveAddOperators(follower.start)  # type: ignore
            left = MathExpression(operator, left, self.term())
        return left

    def term(self) -> ValueExpr:
        left = self.primary()
        while self._is_math_op(self._current(), additive=False):
            operator = self._current().value  # type: ignore
            self._next()
            left = MathExpression(operator, left, self.primary())
        return left

    def primary(self) -> ValueExpr:
        token = self._current()
        if token is None:
            raise self._unexpected(token)

        if token.kind == TokenKind.NUMBER:
            follower = self._next()
            if follower is not None and follower.kind == TokenKind.DICE:
                return self.dice(token.value)
            return Literal(token.value)

        if token.kind == TokenKind.DICE:
            # `d6` rolls a single die
            return self.dice(1)

        if token.kind == TokenKind.LEFT_PAREN:
            return self.group(token)

        raise self._unexpected(token)

    # Parenthesized group, starting at the `(` token.
    def group(self, opener: Token) -> ValueExpr:
        if self.depth >= self.max_depth:
            raise ExpressionTooDeep(opener.start)
        self.depth += 1
        self._next()
        inner = self.arithmetic()
        closer = self._current()
        if closer is None:
            raise UnmatchedParenthesis(opener.start)
        if closer.kind != TokenKind.RIGHT_PAREN:
            raise self._unexpected(closer)
        self._next()
        self.depth -= 1
        return Parenthesized(inner)

    # Dice term, with the current token being the `d` operator.
    def dice(self, count: int) -> DiceExpression:
        self.advance(TokenKind.DICE)
        sides = self.advance(TokenKind.NUMBER).value
        dice_filter = None
        token = self._current()
        if token is not None and token.kind == TokenKind.DICE_FILTER:
            self._next()
            dice_filter = DiceFilter(token.value, self.advance(TokenKind.NUMBER).value)
        return DiceExpression(count, sides, dice_filter)


# Parse tokens into a syntax tree: a bare arithmetic expression, or one
# comparison over two of them.
def parse(
    tokens: LexedExpression, max_depth: int = MAX_NESTING_DEPTH
) -> ParsedExpression:
    token_list = tuple(tokens)
    comparisons = [
        i for i, token in enumerate(token_list) if token.kind == TokenKind.COMPARISON
    ]
    if len(comparisons) > 1:
        raise ExtraComparisonOperator(token_list[comparisons[1]].start)

    if not comparisons:
        return Parser(token_list, tokens.end_position(), max_depth).parse()

    split = comparisons[0]
    operator = token_list[split]
    lhs = Parser(token_list[:split], operator.start, max_depth).parse()
    rhs = Parser(token_list[split + 1 :], tokens.end_position(), max_depth).parse()
    return ComparisonExpression(operator.value, lhs, rhs)
