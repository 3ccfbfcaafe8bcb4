# Tokenizer for dice roll formulas.
# Turns a formula such as `4d6kh3+2>=10` into positioned tokens.

import re
import typing
from enum import Enum

from dice_errors import InvalidCharacter


class TokenKind(Enum):
    NUMBER = "NUMBER"
    DICE = "DICE"
    DICE_FILTER = "DICE_FILTER"
    MATH_OP = "MATH_OP"
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    COMPARISON = "COMPARISON"


# Enum values are the notation spelling, so nodes can be printed back out.
class FilterKind(Enum):
    KEEP_HIGHEST = "kh"
    KEEP_LOWEST = "kl"
    DROP_HIGHEST = "dh"
    DROP_LOWEST = "dl"

    def is_keep(self) -> bool:
        return self in (FilterKind.KEEP_HIGHEST, FilterKind.KEEP_LOWEST)

    def is_high(self) -> bool:
        return self in (FilterKind.KEEP_HIGHEST, FilterKind.DROP_HIGHEST)


class MathOperator(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"

    def is_additive(self) -> bool:
        return self in (MathOperator.PLUS, MathOperator.MINUS)


class ComparisonOperator(Enum):
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER = ">"
    GREATER_EQUALS = ">="
    LESS = "<"
    LESS_EQUALS = "<="


class Token(typing.NamedTuple):
    kind: TokenKind
    # inclusive character offsets into the source
    start: int
    end: int
    # int for NUMBER, the operator enum for DICE_FILTER, MATH_OP, COMPARISON
    value: typing.Any = None

    def __repr__(self):
        if self.value is None:
            return f"{self.kind.value}@{self.start}"
        shown = self.value.value if isinstance(self.value, Enum) else self.value
        return f"{self.kind.value}({shown})@{self.start}"


# An immutable sequence of tokens, remembering the text it was read from.
class LexedExpression:
    def __init__(self, source: str, tokens: typing.Iterable[Token]):
        self.source = source
        self._tokens = tuple(tokens)

    def __len__(self):
        return len(self._tokens)

    def __getitem__(self, index):
        return self._tokens[index]

    def __iter__(self):
        return iter(self._tokens)

    def __eq__(self, other):
        if not isinstance(other, LexedExpression):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self):
        return hash(self._tokens)

    def __repr__(self):
        return f"LexedExpression({self.source!r}, {list(self._tokens)})"

    # Offset just past the final token; where an operand was expected at the end.
    def end_position(self) -> int:
        if not self._tokens:
            return 0
        return self._tokens[-1].end + 1


# fmt: off
TOKEN_SPEC = [
    ("NUMBER",   r"[0-9]+"),                    # Integer, ASCII digits only
    ("FILTER",   r"[kd][hl]"),                  # Keep/drop highest/lowest
    ("DICE",     r"d"),                         # Diceroll operator
    ("COMP",     r"[!><]=|[><=]"),              # Comparisons
    ("OP",       r"[+\-*/]"),                   # Arithmetic operators
    ("PAREN",    r"[()]"),                      # Grouping
    ("MISMATCH", r"."),                         # Any other character
]
TOKEN_PATTERN = re.compile(
    "|".join(f"(?P<{pair[0]}>{pair[1]})" for pair in TOKEN_SPEC), re.DOTALL)
# fmt: on

FILTERS = {kind.value: kind for kind in FilterKind}
MATH_OPERATORS = {op.value: op for op in MathOperator}
COMPARISONS = {op.value: op for op in ComparisonOperator}


# Accumulate a digit run digit by digit; `int()` refuses very long strings.
def _number_value(digits: str) -> int:
    value = 0
    for digit in digits:
        value = value * 10 + ord(digit) - ord("0")
    return value


# Tokenize a formula. Whitespace is not part of the notation, so callers
# strip it first.
def tokenize(source: str) -> LexedExpression:
    tokens = []
    for item in TOKEN_PATTERN.finditer(source):
        # https://docs.python.org/3/library/re.html#writing-a-tokenizer
        kind = item.lastgroup
        text = item.group()
        start = item.start()
        end = item.end() - 1

        if kind == "NUMBER":
            token = Token(TokenKind.NUMBER, start, end, _number_value(text))
        elif kind == "FILTER":
            token = Token(TokenKind.DICE_FILTER, start, end, FILTERS[text])
        elif kind == "DICE":
            token = Token(TokenKind.DICE, start, end)
        elif kind == "COMP":
            token = Token(TokenKind.COMPARISON, start, end, COMPARISONS[text])
        elif kind == "OP":
            token = Token(TokenKind.MATH_OP, start, end, MATH_OPERATORS[text])
        elif kind == "PAREN":
            paren = TokenKind.LEFT_PAREN if text == "(" else TokenKind.RIGHT_PAREN
            token = Token(paren, start, end)
        else:
            raise InvalidCharacter(text, start)
        tokens.append(token)
    return LexedExpression(source, tokens)
