"""Commands and conditions built on a tank drive with odometry."""

from __future__ import annotations

import math
import time
from typing import Any, Callable, Protocol

from autocmd.basic import Direction
from autocmd.commands import AutoCommand, Condition


class _Odometry(Protocol):
    def get_position(self) -> Any: ...

    def get_speed(self) -> float: ...


class TankDriveSystem(Protocol):
    odometry: _Odometry

    def turn_to_heading(self, heading_deg: float, max_speed: float, end_speed: float) -> bool: ...

    def drive_tank(self, left: float, right: float) -> None: ...

    def stop(self) -> None: ...


class TurnToPointCommand(AutoCommand):
    """Turns the robot to face a field point.

    The heading is worked out once, from the pose at the first run. When the
    direction is not forward, 90 degrees are added to it.
    """

    def __init__(
        self,
        drive_sys: TankDriveSystem,
        x: float,
        y: float,
        direction: Direction = Direction.FWD,
        max_speed: float = 1,
        end_speed: float = 0,
    ) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.x = x
        self.y = y
        self.direction = direction
        self.max_speed = max_speed
        self.end_speed = end_speed
        self.heading: float | None = None

    def run(self) -> bool:
        if self.heading is None:
            pose = self.drive_sys.odometry.get_position()
            heading = math.degrees(math.atan2(self.y - pose.y, self.x - pose.x))
            if self.direction != Direction.FWD:
                heading += 90.0
            self.heading = heading
        return self.drive_sys.turn_to_heading(self.heading, self.max_speed, self.end_speed)

    def on_timeout(self) -> None:
        self.drive_sys.stop()


class DriveStalledCondition(Condition):
    """True once the drive has not moved for more than ``stall_time`` seconds.

    The stall timer starts at the first test and restarts whenever the
    odometry reports a positive speed.
    """

    def __init__(
        self,
        drive_sys: TankDriveSystem,
        stall_time: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.drive_sys = drive_sys
        self.stalled_for = stall_time
        self._clock = clock
        self._stopped_since: float | None = None

    def test(self) -> bool:
        now = self._clock()
        if self._stopped_since is None:
            self._stopped_since = now
        if self.drive_sys.odometry.get_speed() > 0:
            self._stopped_since = now
        return now - self._stopped_since > self.stalled_for


class DriveTankCommand(AutoCommand):
    """Drives both sides at fixed outputs; never finishes on its own."""

    def __init__(self, drive_sys: TankDriveSystem, left: float = 0, right: float = 0) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.left = left
        self.right = right

    def run(self) -> bool:
        self.drive_sys.drive_tank(self.left, self.right)
        return False

    def on_timeout(self) -> None:
        self.drive_sys.stop()