import unittest

from dice_errors import (
    ConsecutiveAddOperators,
    ExpressionTooDeep,
    ExtraComparisonOperator,
    ParseError,
    UnexpectedToken,
    UnmatchedParenthesis,
)
from dice_lexer import ComparisonOperator, FilterKind, MathOperator, TokenKind, tokenize
from dice_parser import parse
from dice_syntax import (
    ComparisonExpression,
    DiceExpression,
    DiceFilter,
    Literal,
    MathExpression,
    Parenthesized,
    describe,
)


def parse_text(text, **kwargs):
    return parse(tokenize(text), **kwargs)


class ParseTest(unittest.TestCase):
    def assertParseFails(self, text, error, position):
        with self.assertRaises(error) as caught:
            parse_text(text)
        self.assertEqual(caught.exception.position, position)
        return caught.exception


class DiceTermTest(ParseTest):
    def test_simple_dice(self):
        self.assertEqual(parse_text("2d6"), DiceExpression(2, 6, None))

    def test_default_count(self):
        self.assertEqual(parse_text("d20"), DiceExpression(1, 20, None))

    def test_filter(self):
        self.assertEqual(
            parse_text("1d20kh1"),
            DiceExpression(1, 20, DiceFilter(FilterKind.KEEP_HIGHEST, 1)),
        )
        self.assertEqual(
            parse_text("8d12dl3"),
            DiceExpression(8, 12, DiceFilter(FilterKind.DROP_LOWEST, 3)),
        )

    def test_literal(self):
        self.assertEqual(parse_text("42"), Literal(42))

    def test_two_filters_rejected(self):
        err = self.assertParseFails("5d6kh2kl1", UnexpectedToken, 6)
        self.assertEqual(err.token.kind, TokenKind.DICE_FILTER)

    def test_missing_sides(self):
        self.assertParseFails("2d", UnexpectedToken, 2)
        self.assertParseFails("2d+1", UnexpectedToken, 2)
        self.assertParseFails("d(6)", UnexpectedToken, 1)

    def test_missing_filter_count(self):
        self.assertParseFails("4d6kh", UnexpectedToken, 5)

    def test_filter_without_dice(self):
        self.assertParseFails("5kh1", UnexpectedToken, 1)

    def test_dice_after_group(self):
        self.assertParseFails("(2)d6", UnexpectedToken, 3)


class ArithmeticTest(ParseTest):
    def test_precedence(self):
        self.assertEqual(
            parse_text("1+2*3"),
            MathExpression(
                MathOperator.PLUS,
                Literal(1),
                MathExpression(MathOperator.TIMES, Literal(2), Literal(3)),
            ),
        )

    def test_left_associative(self):
        self.assertEqual(
            parse_text("8-4-2"),
            MathExpression(
                MathOperator.MINUS,
                MathExpression(MathOperator.MINUS, Literal(8), Literal(4)),
                Literal(2),
            ),
        )
        self.assertEqual(
            parse_text("8/4*2"),
            MathExpression(
                MathOperator.TIMES,
                MathExpression(MathOperator.DIVIDE, Literal(8), Literal(4)),
                Literal(2),
            ),
        )

    def test_parentheses(self):
        self.assertEqual(
            parse_text("(1+2)*3"),
            MathExpression(
                MathOperator.TIMES,
                Parenthesized(MathExpression(MathOperator.PLUS, Literal(1), Literal(2))),
                Literal(3),
            ),
        )
        self.assertEqual(parse_text("((4))"), Parenthesized(Parenthesized(Literal(4))))

    def test_dice_in_arithmetic(self):
        self.assertEqual(
            parse_text("2d8+1d6*2"),
            MathExpression(
                MathOperator.PLUS,
                DiceExpression(2, 8),
                MathExpression(MathOperator.TIMES, DiceExpression(1, 6), Literal(2)),
            ),
        )

    def test_missing_operand(self):
        self.assertParseFails("2+*3", UnexpectedToken, 2)
        self.assertParseFails("2*/3", UnexpectedToken, 2)
        self.assertParseFails("2+", UnexpectedToken, 2)
        err = self.assertParseFails("2*", UnexpectedToken, 2)
        self.assertIsNone(err.token)

    def test_no_unary_operators(self):
        self.assertParseFails("-3", UnexpectedToken, 0)
        self.assertParseFails("+3", UnexpectedToken, 0)
        self.assertParseFails("2*-3", UnexpectedToken, 2)

    def test_consecutive_add_operators(self):
        self.assertParseFails("2+-3", ConsecutiveAddOperators, 2)
        self.assertParseFails("1d4--1", ConsecutiveAddOperators, 4)
        self.assertParseFails("1++1", ConsecutiveAddOperators, 2)

    def test_empty(self):
        err = self.assertParseFails("", UnexpectedToken, 0)
        self.assertIsNone(err.token)

    def test_adjacent_operands(self):
        self.assertParseFails("(1)(2)", UnexpectedToken, 3)


class ParenthesisTest(ParseTest):
    def test_unclosed(self):
        self.assertParseFails("(2+3", UnmatchedParenthesis, 0)
        self.assertParseFails("1+((2)", UnmatchedParenthesis, 2)

    def test_stray_close(self):
        self.assertParseFails("2+3)", UnmatchedParenthesis, 3)
        self.assertParseFails("(2))", UnmatchedParenthesis, 3)

    def test_junk_before_close(self):
        self.assertParseFails("(2kh1)", UnexpectedToken, 2)

    def test_empty_group(self):
        self.assertParseFails("()", UnexpectedToken, 1)

    def test_nesting_limit(self):
        depth = 5
        nested = "(" * depth + "1" + ")" * depth
        self.assertIsInstance(parse_text(nested, max_depth=depth), Parenthesized)
        too_deep = "(" * (depth + 1) + "1" + ")" * (depth + 1)
        with self.assertRaises(ExpressionTooDeep) as caught:
            parse_text(too_deep, max_depth=depth)
        self.assertEqual(caught.exception.position, depth)

    def test_default_nesting_limit(self):
        with self.assertRaises(ExpressionTooDeep):
            parse_text("(" * 5000 + "1" + ")" * 5000)


class ComparisonTest(ParseTest):
    def test_comparison(self):
        self.assertEqual(
            parse_text("3d6+2>10"),
            ComparisonExpression(
                ComparisonOperator.GREATER,
                MathExpression(MathOperator.PLUS, DiceExpression(3, 6, None), Literal(2)),
                Literal(10),
            ),
        )

    def test_each_operator(self):
        for op in ComparisonOperator:
            expr = parse_text(f"1d20{op.value}15")
            self.assertIsInstance(expr, ComparisonExpression)
            self.assertEqual(expr.operator, op)

    def test_chained_comparison(self):
        self.assertParseFails("1<2<3", ExtraComparisonOperator, 3)
        self.assertParseFails("1d20>=10!=2", ExtraComparisonOperator, 8)
        self.assertParseFails("1==2", ExtraComparisonOperator, 2)

    def test_missing_sides_of_comparison(self):
        self.assertParseFails(">5", UnexpectedToken, 0)
        self.assertParseFails("5>=", UnexpectedToken, 3)

    def test_comparison_inside_parentheses(self):
        self.assertParseFails("(2>3)", UnmatchedParenthesis, 0)

    def test_errors_are_value_errors(self):
        with self.assertRaises(ParseError):
            parse_text("1+")
        with self.assertRaises(ValueError):
            parse_text("1+")


class IdempotenceTest(ParseTest):
    def test_same_tokens_same_tree(self):
        tokens = tokenize("(2d6kh1+3)*4<=1d100")
        self.assertEqual(parse(tokens), parse(tokens))

    def test_describe_round_trip(self):
        for text in ["4d6kh3", "1d20+5>=15", "(1+2)*3/4", "2d8+1d6-3!=7"]:
            expr = parse_text(text)
            self.assertEqual(describe(expr), text)
            self.assertEqual(parse_text(describe(expr)), expr)

    def test_describe_fills_in_count(self):
        self.assertEqual(describe(parse_text("d6")), "1d6")

    def test_long_chain_equality(self):
        tokens = tokenize("+".join(["1"] * 3000))
        first, second = parse(tokens), parse(tokens)
        self.assertEqual(first, second)
        self.assertFalse(first != second)
        self.assertEqual(hash(first), hash(second))

    def test_long_chains_that_differ(self):
        base = parse_text("+".join(["1"] * 3000))
        other_operator = parse_text("1-" + "+".join(["1"] * 2999))
        other_literal = parse_text("2+" + "+".join(["1"] * 2999))
        self.assertNotEqual(base, other_operator)
        self.assertNotEqual(base, other_literal)
        self.assertNotEqual(base, parse_text("+".join(["1"] * 2999)))
        self.assertNotEqual(base, Literal(1))

    def test_describe_long_chain(self):
        chain = "*".join(["2"] * 3000)
        self.assertEqual(describe(parse_text(chain)), chain)


if __name__ == "__main__":
    unittest.main()
