"""Single-shot commands for motors and solenoids."""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol

from autocmd.commands import AutoCommand


class Direction(Enum):
    """Direction a motor spins."""

    FWD = "fwd"
    REV = "rev"


class SpinType(Enum):
    """How the power of a spin command is expressed; the value is the unit."""

    PERCENT = "percent"
    VOLTAGE = "volt"
    VELOCITY = "rpm"


class Motor(Protocol):
    def spin(self, direction: Direction, power: float, units: SpinType) -> None: ...

    def stop(self, brake: Any) -> None: ...


class Solenoid(Protocol):
    def set(self, value: bool) -> None: ...


class BasicSpinCommand(AutoCommand):
    """Starts a motor spinning and finishes at once."""

    def __init__(self, motor: Motor, direction: Direction, setting: SpinType, power: float) -> None:
        super().__init__()
        self.motor = motor
        self.direction = direction
        self.setting = SpinType(setting)
        self.power = power

    def run(self) -> bool:
        self.motor.spin(self.direction, self.power, self.setting)
        return True


class BasicStopCommand(AutoCommand):
    """Stops a motor with the given brake mode and finishes at once."""

    def __init__(self, motor: Motor, setting: Any) -> None:
        super().__init__()
        self.motor = motor
        self.setting = setting

    def run(self) -> bool:
        self.motor.stop(self.setting)
        return True


class BasicSolenoidSet(AutoCommand):
    """Sets a solenoid and finishes at once."""

    def __init__(self, solenoid: Solenoid, setting: bool) -> None:
        super().__init__()
        self.solenoid = solenoid
        self.setting = setting

    def run(self) -> bool:
        self.solenoid.set(self.setting)
        return True