# Errors raised while tokenizing, parsing and evaluating dice rolls.
# Each phase has its own family; all of them share DiceError so callers can
# catch a failed roll in one place.
#
# Rolls may run in worker processes, so every error pickles through
# `__reduce__` with its own constructor arguments.


class DiceError(Exception):
    pass


# Tokenizer errors.
class LexError(DiceError, ValueError):
    pass


class InvalidCharacter(LexError):
    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(f"Invalid character {character!r} at position {position}")

    def __reduce__(self):
        return (type(self), (self.character, self.position))


# Parser errors. `position` is a character offset into the source text.
class ParseError(DiceError, ValueError):
    reason = "Parse error"

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"{self.reason} at position {position}")

    def __reduce__(self):
        return (type(self), (self.position,))


class ExtraComparisonOperator(ParseError):
    reason = "Only one comparison is allowed, found another"


class ConsecutiveAddOperators(ParseError):
    reason = "Consecutive +/- operators"


class UnmatchedParenthesis(ParseError):
    reason = "Unmatched parenthesis"


class UnexpectedToken(ParseError):
    reason = "Unexpected token"

    def __init__(self, position: int, token=None):
        # token is None when input ended where an operand was required
        self.token = token
        super().__init__(position)
        if token is None:
            self.args = (f"Unexpected end of input at position {position}",)

    def __reduce__(self):
        return (type(self), (self.position, self.token))


class ExpressionTooDeep(ParseError):
    reason = "Parentheses nested too deeply"


# Evaluation errors.
class EvalError(DiceError):
    pass


class DivisionByZero(EvalError, ZeroDivisionError):
    def __init__(self):
        super().__init__("Division by zero")

    def __reduce__(self):
        return (type(self), ())


class InvalidDieSize(EvalError, ValueError):
    def __init__(self, sides: int):
        self.sides = sides
        super().__init__(f"Dice must have at least one side (d{sides})")

    def __reduce__(self):
        return (type(self), (self.sides,))
