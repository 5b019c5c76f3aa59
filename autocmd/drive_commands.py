"""Commands that drive a tank drive system and reset its odometry."""

from __future__ import annotations

from typing import Any, NamedTuple, Protocol

from autocmd.basic import Direction
from autocmd.commands import AutoCommand


class Pose(NamedTuple):
    """A field position in inches with a heading in degrees."""

    x: float
    y: float
    rot: float


ZERO_POSE = Pose(0.0, 0.0, 90.0)


class DriveSystem(Protocol):
    def drive_forward(self, inches: float, direction: Direction, feedback: Any,
                      max_speed: float, end_speed: float) -> bool: ...

    def turn_degrees(self, degrees: float, max_speed: float, end_speed: float) -> bool: ...

    def drive_to_point(self, x: float, y: float, direction: Direction, feedback: Any,
                       max_speed: float, end_speed: float) -> bool: ...

    def turn_to_heading(self, heading_deg: float, feedback: Any,
                        max_speed: float, end_speed: float) -> bool: ...

    def pure_pursuit(self, path: Any, direction: Direction, feedback: Any,
                     max_speed: float, end_speed: float) -> bool: ...

    def stop(self) -> None: ...

    def reset_auto(self) -> None: ...


class Odometry(Protocol):
    def set_position(self, pose: Any) -> None: ...


def _stop_and_reset(drive_sys: DriveSystem) -> None:
    drive_sys.stop()
    drive_sys.reset_auto()


class DriveForwardCommand(AutoCommand):
    """Drives a distance forward or backward."""

    def __init__(self, drive_sys: DriveSystem, feedback: Any, inches: float, direction: Direction,
                 max_speed: float = 1, end_speed: float = 0) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.feedback = feedback
        self.inches = inches
        self.direction = direction
        self.max_speed = max_speed
        self.end_speed = end_speed

    def run(self) -> bool:
        return self.drive_sys.drive_forward(
            self.inches, self.direction, self.feedback, self.max_speed, self.end_speed
        )

    def on_timeout(self) -> None:
        _stop_and_reset(self.drive_sys)


class TurnDegreesCommand(AutoCommand):
    """Turns the robot by a relative angle using the drive's default turn feedback."""

    def __init__(self, drive_sys: DriveSystem, feedback: Any, degrees: float,
                 max_speed: float = 1, end_speed: float = 0) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.feedback = feedback
        self.degrees = degrees
        self.max_speed = max_speed
        self.end_speed = end_speed

    def run(self) -> bool:
        return self.drive_sys.turn_degrees(self.degrees, self.max_speed, self.end_speed)

    def on_timeout(self) -> None:
        _stop_and_reset(self.drive_sys)


class DriveToPointCommand(AutoCommand):
    """Drives to a point on the field."""

    def __init__(self, drive_sys: DriveSystem, feedback: Any, x: float, y: float, direction: Direction,
                 max_speed: float = 1, end_speed: float = 0) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.feedback = feedback
        self.x = x
        self.y = y
        self.direction = direction
        self.max_speed = max_speed
        self.end_speed = end_speed

    @classmethod
    def from_point(cls, drive_sys: DriveSystem, feedback: Any, point: Any, direction: Direction,
                   max_speed: float = 1, end_speed: float = 0) -> "DriveToPointCommand":
        """Build the command from any object with ``x`` and ``y`` attributes."""
        return cls(drive_sys, feedback, point.x, point.y, direction, max_speed, end_speed)

    def run(self) -> bool:
        return self.drive_sys.drive_to_point(
            self.x, self.y, self.direction, self.feedback, self.max_speed, self.end_speed
        )

    def on_timeout(self) -> None:
        _stop_and_reset(self.drive_sys)


class TurnToHeadingCommand(AutoCommand):
    """Turns in place to an absolute field heading."""

    def __init__(self, drive_sys: DriveSystem, feedback: Any, heading_deg: float,
                 max_speed: float = 1, end_speed: float = 0) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.feedback = feedback
        self.heading_deg = heading_deg
        self.max_speed = max_speed
        self.end_speed = end_speed

    def run(self) -> bool:
        return self.drive_sys.turn_to_heading(
            self.heading_deg, self.feedback, self.max_speed, self.end_speed
        )

    def on_timeout(self) -> None:
        _stop_and_reset(self.drive_sys)


class PurePursuitCommand(AutoCommand):
    """Follows a path with pure pursuit."""

    def __init__(self, drive_sys: DriveSystem, feedback: Any, path: Any, direction: Direction,
                 max_speed: float = 1, end_speed: float = 0) -> None:
        super().__init__()
        self.drive_sys = drive_sys
        self.feedback = feedback
        self.path = path
        self.direction = direction
        self.max_speed = max_speed
        self.end_speed = end_speed

    def run(self) -> bool:
        return self.drive_sys.pure_pursuit(
            self.path, self.direction, self.feedback, self.max_speed, self.end_speed
        )

    def on_timeout(self) -> None:
        _stop_and_reset(self.drive_sys)


class DriveStopCommand(AutoCommand):
    """Stops the drive and finishes at once."""

    def __init__(self, drive_sys: DriveSystem) -> None:
        super().__init__()
        self.drive_sys = drive_sys

    def run(self) -> bool:
        self.drive_sys.stop()
        return True

    def on_timeout(self) -> None:
        self.drive_sys.reset_auto()


class OdomSetPosition(AutoCommand):
    """Sets the odometry to a known pose and finishes at once."""

    def __init__(self, odom: Odometry, newpos: Any = ZERO_POSE) -> None:
        super().__init__()
        self.odom = odom
        self.newpos = newpos

    def run(self) -> bool:
        self.odom.set_position(self.newpos)
        return True