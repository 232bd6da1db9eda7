import logging
import threading
import time


class Ticker:
    """Runs a task periodically at a fixed rate.

    Run *n* is due at ``start + n * period``, however long the previous runs
    took. Runs never overlap: when a run overruns, the ones that fell due in
    the meantime fire right after it until the schedule catches up.
    """

    def __init__(self, period, task, stop_event=None, initial_delay=0.0, clock=time.monotonic):
        if period <= 0:
            raise ValueError(f"Ticker period must be positive, got {period}")

        self.period = period
        self.task = task
        self.initial_delay = initial_delay
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self._clock = clock
        self.ticks = 0

    def run(self):
        """Blocks running the task until stop() is called."""
        next_run = self._clock() + self.initial_delay

        while not self.stop_event.is_set():
            delay = next_run - self._clock()
            if delay > 0 and self.stop_event.wait(delay):
                break

            self._tick()
            next_run += self.period

        logging.info(f"Ticker stopped after {self.ticks} ticks")

    def _tick(self):
        self.ticks += 1
        try:
            self.task()
        except Exception as e:
            # Same as a failing scheduled task: the tick is lost, the schedule goes on
            logging.error(f"Scheduled task failed on tick {self.ticks}: {e}", exc_info=True)

    def stop(self):
        self.stop_event.set()
