# Configuration and constants.

# RX_SEED # can be provided in the environment, for repeatable rolls
# RX_ROLL_TIMEOUT # can be provided in the environment
# RX_ROLL_WORKERS # can be provided in the environment
# RX_INDIVIDUAL # can be provided in the environment, 0 to print only totals
import os

MAX_NESTING_DEPTH = 64  # parentheses
MAX_REPEAT = 100  # times one formula may be rolled in a single request
MAX_ROLL_WORKERS = 5
ROLL_TIMEOUT = 10.0  # in seconds
FORMULA_SEPARATOR = ";"
RESULT_ARROW = "⇒"


# Get the seed for rolls made by the entry point, or None for fresh entropy.
def get_seed() -> int | None:
    seed = os.getenv("RX_SEED")
    if seed is None or seed == "":
        return None
    return int(seed)


def get_roll_timeout() -> float:
    timeout = os.getenv("RX_ROLL_TIMEOUT")
    if timeout is not None:
        return float(timeout)
    return ROLL_TIMEOUT


def get_roll_workers() -> int:
    workers = os.getenv("RX_ROLL_WORKERS")
    if workers is not None:
        return int(workers)
    return MAX_ROLL_WORKERS


# Show every die rolled (`RX_INDIVIDUAL=1`), or only the totals.
def get_individual() -> bool:
    individual = os.getenv("RX_INDIVIDUAL")
    if individual is None:
        return True
    return individual.strip().lower() not in ("", "0", "false", "no", "off")
