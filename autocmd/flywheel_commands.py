"""Commands that drive a flywheel."""

from __future__ import annotations

from typing import Protocol

from autocmd.commands import AutoCommand


class Flywheel(Protocol):
    def spin_rpm(self, rpm: int) -> None: ...

    def get_target(self) -> float: ...

    def get_rpm(self) -> float: ...

    def stop(self) -> None: ...


class SpinRPMCommand(AutoCommand):
    """Sets the flywheel's target speed and finishes at once."""

    def __init__(self, flywheel: Flywheel, rpm: int) -> None:
        super().__init__()
        self.flywheel = flywheel
        self.rpm = rpm

    def run(self) -> bool:
        self.flywheel.spin_rpm(self.rpm)
        return True


class WaitUntilUpToSpeedCommand(AutoCommand):
    """Finishes once the flywheel is within ``threshold_rpm`` of its target."""

    def __init__(self, flywheel: Flywheel, threshold_rpm: int) -> None:
        super().__init__()
        self.flywheel = flywheel
        self.threshold_rpm = threshold_rpm

    def run(self) -> bool:
        return abs(self.flywheel.get_target() - self.flywheel.get_rpm()) < self.threshold_rpm


class FlywheelStopCommand(AutoCommand):
    """Stops the flywheel and finishes at once."""

    def __init__(self, flywheel: Flywheel) -> None:
        super().__init__()
        self.flywheel = flywheel

    def run(self) -> bool:
        self.flywheel.stop()
        return True


class FlywheelStopMotorsCommand(AutoCommand):
    """Stops the flywheel motors and finishes at once."""

    def __init__(self, flywheel: Flywheel) -> None:
        super().__init__()
        self.flywheel = flywheel

    def run(self) -> bool:
        self.flywheel.stop()
        return True


class FlywheelStopNonTasksCommand(AutoCommand):
    """Stops the flywheel outside its background task and finishes at once."""

    def __init__(self, flywheel: Flywheel) -> None:
        super().__init__()
        self.flywheel = flywheel

    def run(self) -> bool:
        self.flywheel.stop()
        return True