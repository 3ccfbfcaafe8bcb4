# Subprocess dice rolling, so a runaway formula such as `999999999d6` can be
# cut off by a timeout instead of stalling the caller.
import concurrent.futures
import logging

import dice
from dice_random import RandomSource
from pebble import ProcessPool

log = logging.getLogger(__name__)


# Roll and format a formula. Runs inside a worker process, with its own
# random source so concurrent rolls never share state.
def roll_formula(
    formula: str, seed: int | None = None, repeat: int = 1, individual: bool = False
) -> str:
    results = dice.roll(formula, rng=RandomSource(seed), repeat=repeat)
    return dice.format_roll_results(formula, results, individual=individual)


# Wrapper for ProcessPool to allow use with asyncio run_in_executor
class RollExecutor(concurrent.futures.Executor):
    def __init__(self, max_workers, timeout=None):
        self.pool = ProcessPool(max_workers=max_workers)
        self.timeout = timeout

    def submit(self, fn, *args, **kwargs):
        return self.pool.schedule(fn, args=args, kwargs=kwargs, timeout=self.timeout)  # type: ignore

    def map(self, func, *iterables, timeout=None, chunksize=1):
        raise NotImplementedError("This wrapper does not support `map`.")

    def roll(
        self,
        formula: str,
        seed: int | None = None,
        repeat: int = 1,
        individual: bool = False,
    ) -> concurrent.futures.Future:
        log.info(f"Rolling {formula!r} x{repeat}...")
        return self.submit(
            roll_formula, formula, seed=seed, repeat=repeat, individual=individual
        )

    def shutdown(self, wait=True, *, cancel_futures=False):
        if wait:
            log.info("Closing workers...")
            self.pool.close()
        else:
            log.info("Stopping workers...")
            self.pool.stop()
        self.pool.join()
        log.info("Workers joined.")
