# Dicerolling.
# Tokenize, parse and evaluate dice roll formulas, and format the results.

import logging

from dice_config import FORMULA_SEPARATOR, MAX_REPEAT, RESULT_ARROW
from dice_evaluator import ComparisonResult, EvalResult, evaluate
from dice_lexer import tokenize
from dice_parser import parse
from dice_random import RandomSource
from dice_syntax import ParsedExpression, describe

log = logging.getLogger(__name__)


# Remove whitespace, which is not part of the notation.
def normalize(formula: str) -> str:
    return "".join(formula.split())


def parse_formula(formula: str) -> ParsedExpression:
    return parse(tokenize(normalize(formula)))


# Roll a formula `repeat` times, each roll drawing fresh dice from `rng`.
def roll(
    formula: str, rng: RandomSource | None = None, repeat: int = 1
) -> list[EvalResult]:
    if len(normalize(formula)) < 1:
        raise ValueError("Roll formula is empty.")
    if repeat < 1 or repeat > MAX_REPEAT:
        raise ValueError(f"Can only roll 1 to {MAX_REPEAT} times, not {repeat}")
    if rng is None:
        rng = RandomSource()

    expr = parse_formula(formula)
    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"Parsed {formula!r} as {describe(expr)}")
    results = [evaluate(expr, rng) for _ in range(repeat)]
    log.debug("Rolled %r %d time(s): %r", formula, repeat, results)
    return results


# Split a line holding several formulas, e.g. `1d20+5; 2d6+5`.
def split_formulas(line: str) -> list[str]:
    return [part for part in line.split(FORMULA_SEPARATOR) if part.strip()]


def format_result(result: EvalResult) -> str:
    if isinstance(result, ComparisonResult):
        verdict = "pass" if result.passed else "fail"
        return f"{verdict} ({result.lhs}{result.operator.value}{result.rhs})"
    return str(result.total)


# One line per result. `individual` also shows every die rolled, with
# dropped dice struck through.
def format_roll_results(
    formula: str, results: list[EvalResult], individual: bool = False
) -> str:
    notation = describe(parse_formula(formula))
    out = ""
    for row in results:
        out += f"{notation} {RESULT_ARROW} {format_result(row)}"
        if individual and row.rolls:
            out += "  |  " + ", ".join(
                f"{describe(dice.expression)} {dice!r}" for dice in row.rolls
            )
        out += "\n"
    return out
