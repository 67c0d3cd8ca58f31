import signal
from contextlib import contextmanager
from typing import Optional


class ControlRequests:
    """
    Print/stop requests raised from signal handlers and polled by the sampling loop.

    Setting a request never touches sampler state; the loop observes it between
    rounds, so an in-flight round always completes.
    """

    def __init__(self):
        # written from signal handlers: plain stores only, no locks
        self._print = False
        self._stop = False

    def request_print(self) -> None:
        self._print = True

    def request_stop(self) -> None:
        self._stop = True

    @property
    def print_requested(self) -> bool:
        return self._print

    @property
    def stop_requested(self) -> bool:
        return self._stop

    def consume_print(self) -> bool:
        """Return True once per pending print request and clear it."""
        if self._print:
            self._print = False
            return True
        return False


@contextmanager
def install_signal_handlers(control: ControlRequests, *, stop_signal: int = signal.SIGINT, print_signal: Optional[int] = None):
    """
    Route SIGINT to a stop request and SIGHUP to a print request while active.

    SIGHUP is skipped on platforms that lack it. Previous handlers are restored on exit.
    """
    if print_signal is None:
        print_signal = getattr(signal, "SIGHUP", None)

    def _on_stop(signum, frame):
        control.request_stop()

    def _on_print(signum, frame):
        control.request_print()

    previous = {stop_signal: signal.signal(stop_signal, _on_stop)}
    if print_signal is not None:
        previous[print_signal] = signal.signal(print_signal, _on_print)
    try:
        yield control
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


__all__ = ["ControlRequests", "install_signal_handlers"]
