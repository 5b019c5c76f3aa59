# autocmd

Building blocks for writing robot autonomous routines as a sequence of
small, composable commands.

A command is an object whose `run()` is called repeatedly until it returns
`True`. A command carries `timeout_seconds` (10 by default; a value of 0 or
less means it never times out) and an optional cancel condition,
`true_to_end`. When either triggers, the command's `on_timeout()` is called so
it can clean up.

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

## Modules

### `autocmd.commands`

- `AutoCommand` – the base class. `with_timeout(t)` sets the timeout (a
  command whose timeout is negative keeps it), `with_cancel_condition(cond)`
  sets the cancel condition; both return the command.
- `FunctionCommand(f)` – finishes when `f()` returns true.
- `DelayCommand(ms, sleep=time.sleep)` – sleeps `ms` milliseconds, then
  finishes.
- `WaitUntilCondition(cond)` – finishes once `cond.test()` is true.
- `InOrder(commands)` – runs its commands one after another, applying each
  command's timeout and cancel condition. It never times out itself unless
  `with_timeout` is called. `pending` lists the commands not yet started.
- `Parallel(commands, poll_interval=0.02)` – starts every command on its own
  daemon thread and finishes when all of them have finished. `on_timeout()`
  stops the threads still running and calls their commands' `on_timeout()`.
- `Branch(cond, false_choice, true_choice)` – tests `cond` once, then runs the
  matching command until it finishes or its timeout passes.
- `Async(cmd, poll_interval=0.02)` – starts `cmd` on a background thread and
  finishes at once.
- `RepeatUntil(commands, until)` – repeats a sequence (an `InOrder` or any
  iterable of commands). `until` is either a number of repetitions or a
  `Condition` tested after each pass.

Conditions: `Condition` (abstract, with `test()`), `FunctionCondition`,
`TimesTestedCondition(n)` (false until tested `n` times) and
`IfTimePassed(time_s)`. Combine them with `or_()` / `and_()` or with the `|` and
`&` operators; both sides are always tested.

Classes that measure time take a `clock` argument (default
`time.monotonic`), which makes them easy to drive from tests.

### `autocmd.controller`

`CommandController(commands, clock=time.monotonic, sleep=time.sleep)` runs a
queue of commands in FIFO order.

- `add(cmd, timeout_seconds=10.0)` queues a command with the given timeout.
- `add_many(cmds, timeout_sec=None)` queues several commands, giving
  `timeout_sec` to those still on the default timeout. It is deprecated and
  emits a `DeprecationWarning`.
- `add_delay(ms)` queues a `DelayCommand`.
- `add_cancel_func(fn)` stops the whole routine once `fn()` returns true.
- `run()` runs and removes every queued command, logging progress through
  the `logging` module.
- `last_command_timed_out()` tells whether the last command ended by timing
  out.

### `autocmd.basic`

One-shot commands for motors and solenoids: `BasicSpinCommand(motor,
direction, setting, power)`, `BasicStopCommand(motor, setting)` and
`BasicSolenoidSet(solenoid, setting)`. `Direction` has `FWD` and `REV`;
`SpinType` has `PERCENT`, `VOLTAGE` and `VELOCITY`.

### `autocmd.drive_commands`

Commands that call into a drive system you supply: `DriveForwardCommand`,
`TurnDegreesCommand`, `DriveToPointCommand` (also
`DriveToPointCommand.from_point`), `TurnToHeadingCommand`,
`PurePursuitCommand` and `DriveStopCommand`; their `on_timeout()` stops the
drive and calls its `reset_auto()`. `OdomSetPosition(odom, newpos=ZERO_POSE)`
sets an odometry pose; `Pose` is a named tuple of `x`, `y`, `rot` and
`ZERO_POSE` is `(0, 0, 90)`.

### `autocmd.tank_commands`

- `TurnToPointCommand(drive_sys, x, y, direction, max_speed, end_speed)` –
  works out the heading to a point once, from the pose at its first run, and
  turns to it.
- `DriveStalledCondition(drive_sys, stall_time=10.0)` – true once the
  odometry has reported no positive speed for more than `stall_time` seconds.
- `DriveTankCommand(drive_sys, left, right)` – drives both sides at fixed
  outputs and never finishes on its own.

### `autocmd.flywheel_commands`

`SpinRPMCommand`, `WaitUntilUpToSpeedCommand` (finishes when the flywheel is
within `threshold_rpm` of its target), `FlywheelStopCommand`,
`FlywheelStopMotorsCommand` and `FlywheelStopNonTasksCommand`.

### `autocmd.drive_math`

- `modify_inputs(value, power=2)` raises a -1..1 value to `power`, keeping its
  sign.
- `arcade_to_tank(forward_back, left_right, power=2)` shapes both inputs and
  mixes them into unclamped `(left, right)` outputs.

### `autocmd.auto_chooser`

`AutoChooser(paths, default=0)` lays out one `Entry` box per routine name,
three to a row. `update(was_pressed, x, y)` selects the box under a press and
`draw(screen)` draws the boxes on a screen object you supply, highlighting
the current `choice`.

## What it does not do

The package holds no hardware code. Motors, solenoids, flywheels, drive
systems, odometry and screens are objects you pass in; any object with the
methods a command calls will do. It has no drive-train control loops,
feedback controllers, odometry or path following of its own, and no
background screen loop: `AutoChooser` only draws when you call `draw()`.

## Example

```python
from autocmd.commands import DelayCommand, FunctionCommand, InOrder
from autocmd.controller import CommandController

log = []

routine = CommandController([
    FunctionCommand(lambda: log.append("start") or True),
    DelayCommand(100),
    InOrder([
        FunctionCommand(lambda: log.append("a") or True),
        FunctionCommand(lambda: log.append("b") or True),
    ]),
])
routine.run()
print(log, routine.last_command_timed_out())  # ['start', 'a', 'b'] False
```

## Running the tests

```
pip install .[test]
pytest
```