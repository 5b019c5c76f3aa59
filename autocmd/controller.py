"""Runs a queue of autonomous commands in FIFO order."""

from __future__ import annotations

import logging
import time
import warnings
from collections import deque
from typing import Callable, Iterable, Optional

from autocmd.commands import AutoCommand, DelayCommand

log = logging.getLogger(__name__)

_POLL_DELAY = 0.005
_TIMEOUT_CHECK_DELAY = 0.02


class CommandController:
    """Executes queued commands one at a time, enforcing their timeouts."""

    def __init__(
        self,
        commands: Iterable[AutoCommand] = (),
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._queue: deque[AutoCommand] = deque(commands)
        self._clock = clock
        self._sleep = sleep
        self._timed_out = False
        self._should_cancel: Callable[[], bool] = lambda: False

    def __len__(self) -> int:
        return len(self._queue)

    def add(self, cmd: AutoCommand, timeout_seconds: float = 10.0) -> None:
        """Queue a command with the given timeout (<= 0 means none)."""
        cmd.timeout_seconds = timeout_seconds
        self._queue.append(cmd)

    def add_many(self, cmds: Iterable[AutoCommand], timeout_sec: Optional[float] = None) -> None:
        """Queue several commands.

        When ``timeout_sec`` is given, it replaces the timeout of every command
        still carrying the default one.
        """
        warnings.warn(
            "add_many is deprecated; pass the commands to the constructor and use Branch for decisions",
            DeprecationWarning,
            stacklevel=2,
        )
        for cmd in cmds:
            if timeout_sec is not None and cmd.timeout_seconds == AutoCommand.DEFAULT_TIMEOUT:
                cmd.timeout_seconds = timeout_sec
            self._queue.append(cmd)

    def add_delay(self, ms: int) -> None:
        """Queue a pause of ``ms`` milliseconds."""
        self._queue.append(DelayCommand(ms, sleep=self._sleep))

    def add_cancel_func(self, true_if_cancel: Callable[[], bool]) -> None:
        """Stop the whole routine once ``true_if_cancel`` returns True."""
        self._should_cancel = true_if_cancel

    def run(self) -> None:
        """Run and remove every queued command in order."""
        log.info("Running auto, commands 1 to %d", len(self._queue))
        start = self._clock()
        command_count = 1

        while self._queue:
            cmd = self._queue.popleft()
            self._timed_out = False

            cmd_start = self._clock()
            check_timeout = cmd.timeout_seconds > 0.0
            if cmd.true_to_end is not None:
                check_timeout = check_timeout or cmd.true_to_end.test()

            while not cmd.run():
                self._sleep(_POLL_DELAY)
                if not check_timeout:
                    continue
                elapsed = self._clock() - cmd_start
                if elapsed > cmd.timeout_seconds or self._should_cancel():
                    cmd.on_timeout()
                    self._timed_out = True
                    break
                self._sleep(_TIMEOUT_CHECK_DELAY)

            if self._should_cancel():
                log.info("Cancelling")
                break

            log.info("Finished command %d, timed out: %s", command_count, self._timed_out)
            command_count += 1

        log.info("Finished commands in %f seconds", self._clock() - start)

    def last_command_timed_out(self) -> bool:
        """Whether the most recently run command ended by timing out."""
        return self._timed_out