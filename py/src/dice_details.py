# Details of individual dice rolls: the faces rolled and which were dropped
# by a keep/drop filter.
import typing

from dice_errors import InvalidDieSize
from dice_syntax import DiceExpression, DiceFilter


# The value of one die in a roll.
# Tracks whether a filter has dropped it from the total.
class DieElement(typing.NamedTuple):
    value: int
    dropped: bool = False

    def formatted(self) -> str:
        text = str(self.value)
        if self.dropped:  # strikethrough dropped values
            text = f"~~{text}~~"
        return text


# All dice rolled for one dice term, in the order they were drawn.
class DiceRoll(typing.NamedTuple):
    expression: DiceExpression
    elements: tuple[DieElement, ...]

    def __repr__(self):
        return f"{self.get_description()}={self.total()}"

    def get_all_values(self) -> list[int]:
        return [element.value for element in self.elements]

    # Exclude dropped dice.
    def get_remaining(self) -> list[int]:
        return [element.value for element in self.elements if not element.dropped]

    def get_dropped(self) -> list[int]:
        return [element.value for element in self.elements if element.dropped]

    def total(self) -> int:
        return sum(self.get_remaining())

    # Faces joined with `+`, dropped dice struck through.
    def get_description(self) -> str:
        return "(" + "+".join(element.formatted() for element in self.elements) + ")"


# Find the `n` lowest or highest dice. Returns their indices.
# Equal values are taken in roll order, so the earlier die is selected first.
# `n` larger than the roll selects every die.
def select_low_high(values: list[int], n: int, high: bool = False) -> list[int]:
    if n < 0:
        raise ValueError(f"Can't select a negative # of dice ({n})")
    if high:
        order = sorted(range(len(values)), key=lambda i: (-values[i], i))
    else:
        order = sorted(range(len(values)), key=lambda i: (values[i], i))
    return order[:n]


def invert_selection(all_count: int, selected: list[int]) -> list[int]:
    chosen = set(selected)
    return [i for i in range(all_count) if i not in chosen]


# Indices of dice a filter removes from the total.
def filtered_indices(values: list[int], dice_filter: DiceFilter) -> list[int]:
    selected = select_low_high(values, dice_filter.count, dice_filter.kind.is_high())
    if dice_filter.kind.is_keep():
        return invert_selection(len(values), selected)
    return selected


# Roll the dice for a dice term and apply its filter.
# `rng` must provide `roll_die(sides)`; one draw is made per die.
def dice_roll(expression: DiceExpression, rng) -> DiceRoll:
    if expression.sides < 1:
        raise InvalidDieSize(expression.sides)

    values = [rng.roll_die(expression.sides) for _ in range(expression.count)]
    to_drop: set[int] = set()
    if expression.filter is not None:
        to_drop = set(filtered_indices(values, expression.filter))

    return DiceRoll(
        expression,
        tuple(DieElement(value, i in to_drop) for i, value in enumerate(values)),
    )
