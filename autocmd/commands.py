"""Composable autonomous commands and the conditions that steer them."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Iterable, Optional, Union

log = logging.getLogger(__name__)

Clock = Callable[[], float]


class _Timer:
    """Measures seconds elapsed since the last reset."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._start = clock()

    def reset(self) -> None:
        self._start = self._clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start


class Condition(ABC):
    """A yes/no decision made at runtime."""

    @abstractmethod
    def test(self) -> bool:
        """Return whether the condition currently holds."""

    def or_(self, other: "Condition") -> "Condition":
        return OrCondition(self, other)

    def and_(self, other: "Condition") -> "Condition":
        return AndCondition(self, other)

    __or__ = or_
    __and__ = and_


class OrCondition(Condition):
    """True when either side is true; both sides are always tested."""

    def __init__(self, a: Condition, b: Condition) -> None:
        self.a = a
        self.b = b

    def test(self) -> bool:
        a = self.a.test()
        b = self.b.test()
        return a or b


class AndCondition(Condition):
    """True when both sides are true; both sides are always tested."""

    def __init__(self, a: Condition, b: Condition) -> None:
        self.a = a
        self.b = b

    def test(self) -> bool:
        a = self.a.test()
        b = self.b.test()
        return a and b


class AutoCommand:
    """A step of an autonomous routine, polled until ``run`` returns True."""

    DEFAULT_TIMEOUT = 10.0

    def __init__(self) -> None:
        # A timeout <= 0 means the command never times out.
        self.timeout_seconds: float = self.DEFAULT_TIMEOUT
        self.true_to_end: Optional[Condition] = None

    def run(self) -> bool:
        """Advance the command; return True once it is finished."""
        return True

    def on_timeout(self) -> None:
        """Clean up when the command is cancelled before finishing."""

    def with_timeout(self, t_seconds: float) -> "AutoCommand":
        if self.timeout_seconds < 0:
            # Commands that must never time out keep that setting.
            return self
        self.timeout_seconds = t_seconds
        return self

    def with_cancel_condition(self, true_to_end: Condition) -> "AutoCommand":
        self.true_to_end = true_to_end
        return self


def _should_cancel(cmd: AutoCommand, elapsed: float) -> bool:
    expired = cmd.timeout_seconds > 0 and elapsed > cmd.timeout_seconds
    if cmd.true_to_end is not None:
        expired = expired or cmd.true_to_end.test()
    return expired


class FunctionCommand(AutoCommand):
    """Runs a callable; the command finishes when it returns True."""

    def __init__(self, f: Callable[[], bool]) -> None:
        super().__init__()
        self.f = f

    def run(self) -> bool:
        return bool(self.f())


class TimesTestedCondition(Condition):
    """False until it has been tested ``n`` times."""

    def __init__(self, n: int) -> None:
        self.count = 0
        self.max = n

    def test(self) -> bool:
        self.count += 1
        return self.count >= self.max


class FunctionCondition(Condition):
    """Wraps a callable evaluated each time the condition is tested."""

    def __init__(self, cond: Callable[[], bool], timeout: Optional[Callable[[], None]] = None) -> None:
        self.cond = cond
        self.timeout = timeout if timeout is not None else (lambda: None)

    def test(self) -> bool:
        return bool(self.cond())


class IfTimePassed(Condition):
    """True once more than ``time_s`` seconds have passed since construction."""

    def __init__(self, time_s: float, clock: Clock = time.monotonic) -> None:
        self.time_s = time_s
        self._timer = _Timer(clock)

    def test(self) -> bool:
        return self._timer.elapsed > self.time_s


class WaitUntilCondition(AutoCommand):
    """Finishes as soon as the condition is true."""

    def __init__(self, cond: Condition) -> None:
        super().__init__()
        self.cond = cond

    def run(self) -> bool:
        return self.cond.test()


class InOrder(AutoCommand):
    """Runs its commands one after another, applying each one's timeout."""

    def __init__(self, commands: Iterable[AutoCommand] = (), clock: Clock = time.monotonic) -> None:
        super().__init__()
        self.timeout_seconds = -1.0
        self._clock = clock
        self._pending: deque[AutoCommand] = deque(commands)
        self._current: Optional[AutoCommand] = None
        self._timer = _Timer(clock)

    @property
    def pending(self) -> tuple[AutoCommand, ...]:
        """Commands not yet started."""
        return tuple(self._pending)

    def run(self) -> bool:
        if not self._pending and self._current is None:
            return True

        if self._current is None:
            log.debug("InOrder taking next command, %d queued", len(self._pending))
            self._current = self._pending.popleft()
            self._timer.reset()

        current = self._current
        if current.run():
            log.debug("InOrder command finished")
            self._current = None
            return False

        if _should_cancel(current, self._timer.elapsed):
            log.debug("InOrder command timed out")
            current.on_timeout()
            self._current = None
        return False

    def on_timeout(self) -> None:
        if self._current is not None:
            self._current.on_timeout()


class Parallel(AutoCommand):
    """Runs every command on its own thread and finishes when all have."""

    def __init__(self, commands: Iterable[AutoCommand], poll_interval: float = 0.02) -> None:
        super().__init__()
        self._commands: list[Optional[AutoCommand]] = list(commands)
        self._poll_interval = poll_interval
        self._lock = threading.Lock()
        self._running: list[bool] = []
        self._stops: list[threading.Event] = []
        self._started = False

    def _runner(self, index: int, cmd: AutoCommand, stop: threading.Event) -> None:
        timer = _Timer(time.monotonic)
        while not stop.is_set():
            if cmd.run():
                break
            if _should_cancel(cmd, timer.elapsed):
                cmd.on_timeout()
            stop.wait(self._poll_interval)
        with self._lock:
            self._running[index] = False

    def run(self) -> bool:
        if not self._started:
            self._started = True
            with self._lock:
                self._running = [True] * len(self._commands)
            for index, cmd in enumerate(self._commands):
                stop = threading.Event()
                self._stops.append(stop)
                threading.Thread(target=self._runner, args=(index, cmd, stop), daemon=True).start()

        with self._lock:
            return not any(self._running)

    def on_timeout(self) -> None:
        for index, stop in enumerate(self._stops):
            with self._lock:
                was_running = self._running[index]
                self._running[index] = False
            if not was_running:
                continue
            stop.set()
            cmd = self._commands[index]
            if cmd is not None:
                cmd.on_timeout()
                self._commands[index] = None


class Branch(AutoCommand):
    """Tests a condition once, then runs the matching command to completion."""

    def __init__(
        self,
        cond: Condition,
        false_choice: AutoCommand,
        true_choice: AutoCommand,
        clock: Clock = time.monotonic,
    ) -> None:
        super().__init__()
        self.timeout_seconds = -1
        self.cond = cond
        self.false_choice = false_choice
        self.true_choice = true_choice
        self._choice = False
        self._chosen = False
        self._timer = _Timer(clock)

    def _selected(self) -> AutoCommand:
        return self.true_choice if self._choice else self.false_choice

    def run(self) -> bool:
        if not self._chosen:
            self._choice = self.cond.test()
            self._chosen = True
            self._timer.reset()

        cmd = self._selected()
        if self._timer.elapsed > cmd.timeout_seconds and cmd.timeout_seconds != -1:
            cmd.on_timeout()
            self._chosen = False
            return True
        if cmd.run():
            self._chosen = False
            return True
        return False

    def on_timeout(self) -> None:
        if not self._chosen:
            return
        self._selected().on_timeout()
        self._chosen = False


class Async(AutoCommand):
    """Starts a command on a background thread and finishes immediately."""

    def __init__(self, cmd: AutoCommand, poll_interval: float = 0.02) -> None:
        super().__init__()
        self.cmd = cmd
        self._poll_interval = poll_interval

    def _runner(self) -> None:
        cmd = self.cmd
        timer = _Timer(time.monotonic)
        while True:
            if cmd.run():
                break
            if _should_cancel(cmd, timer.elapsed):
                cmd.on_timeout()
                break
            time.sleep(self._poll_interval)

    def run(self) -> bool:
        threading.Thread(target=self._runner, daemon=True).start()
        return True


class RepeatUntil(AutoCommand):
    """Repeats a sequence a fixed number of times or until a condition holds."""

    def __init__(self, commands: Union[InOrder, Iterable[AutoCommand]], until: Union[int, Condition]) -> None:
        super().__init__()
        self.timeout_seconds = -1.0
        if isinstance(commands, InOrder):
            self._commands = commands.pending
            self._clock = commands._clock
        else:
            self._commands = tuple(commands)
            self._clock = time.monotonic
        self.cond: Condition = until if isinstance(until, Condition) else TimesTestedCondition(until)
        self._working = self._fresh()

    def _fresh(self) -> InOrder:
        return InOrder(self._commands, clock=self._clock)

    def run(self) -> bool:
        if not self._working.run():
            return False
        if self.cond.test():
            return True
        self._working = self._fresh()
        return False

    def on_timeout(self) -> None:
        self._working.on_timeout()


class DelayCommand(AutoCommand):
    """Blocks for a number of milliseconds, then finishes."""

    def __init__(self, ms: int, sleep: Callable[[float], None] = time.sleep) -> None:
        super().__init__()
        self.ms = ms
        self._sleep = sleep

    def run(self) -> bool:
        self._sleep(self.ms / 1000.0)
        return True