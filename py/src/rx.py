# Roll dice formulas read from standard input, one line at a time.
# Several formulas on one line are separated with `;`.
import concurrent.futures
import logging
import sys

import dice
import dice_config
from dice_errors import DiceError
from dice_workers import RollExecutor
from dotenv import load_dotenv

log = logging.getLogger(__name__)


# Roll every formula on a line, returning the output text.
def roll_line(
    executor: RollExecutor,
    line: str,
    seed: int | None = None,
    individual: bool = True,
) -> str:
    futures = [
        (formula, executor.roll(formula, seed=seed, individual=individual))
        for formula in dice.split_formulas(line)
    ]
    out = ""
    for formula, future in futures:
        try:
            out += future.result()
        except (DiceError, ValueError) as err:
            log.info(f"Roll error. {err}")
            out += f"Roll error in {formula.strip()!r}: {err}\n"
        except (concurrent.futures.TimeoutError, TimeoutError):
            log.warning(f"Roll timed out: {formula!r}")
            out += f"Roll timed out: {formula.strip()!r}\n"
        except Exception as err:
            # e.g. pebble.ProcessExpired when a worker dies; keep reading
            log.error(f"Roll failed: {formula!r}", exc_info=True)
            out += f"Roll failed in {formula.strip()!r}: {err!r}\n"
    return out


def main():
    logging.basicConfig(level=logging.INFO)
    # Apply environment variables from a `.env` file, if present.
    load_dotenv()
    seed = dice_config.get_seed()
    individual = dice_config.get_individual()

    log.info("Starting roller...")
    with RollExecutor(
        max_workers=dice_config.get_roll_workers(),
        timeout=dice_config.get_roll_timeout(),
    ) as executor:
        for line in sys.stdin:
            if not line.strip():
                continue
            out = roll_line(executor, line, seed=seed, individual=individual)
            print(out, end="", flush=True)
    log.info("Roller stopped.")


if __name__ == "__main__":
    main()
