# Source of die rolls handed to the evaluator.
import random


# Draws uniform integers in [1, sides]. Seed it for repeatable rolls.
# Holds mutable state: give each concurrent evaluation its own instance.
class RandomSource:
    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def roll_die(self, sides: int) -> int:
        return self._random.randint(1, sides)

    def set_seed(self, seed: int | None):
        self.seed = seed
        self._random = random.Random(seed)
