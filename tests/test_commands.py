import threading
import time

import pytest

from autocmd.commands import (
    AndCondition,
    Async,
    AutoCommand,
    Branch,
    DelayCommand,
    FunctionCommand,
    FunctionCondition,
    IfTimePassed,
    InOrder,
    OrCondition,
    Parallel,
    RepeatUntil,
    TimesTestedCondition,
    WaitUntilCondition,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class Recorder(AutoCommand):
    def __init__(self, finish_after=1):
        super().__init__()
        self.finish_after = finish_after
        self.runs = 0
        self.timeouts = 0

    def run(self):
        self.runs += 1
        return self.runs >= self.finish_after

    def on_timeout(self):
        self.timeouts += 1


def counting_pair(a, b):
    calls = {"a": 0, "b": 0}

    def check_a():
        calls["a"] += 1
        return a

    def check_b():
        calls["b"] += 1
        return b

    return FunctionCondition(check_a), FunctionCondition(check_b), calls


def run_until_done(cmd, limit=100):
    for n in range(1, limit + 1):
        if cmd.run():
            return n
    raise AssertionError("command never finished")


def test_auto_command_defaults():
    cmd = AutoCommand()
    assert cmd.run() is True
    assert cmd.timeout_seconds == AutoCommand.DEFAULT_TIMEOUT == 10.0
    assert cmd.true_to_end is None


def test_with_timeout_sets_and_returns_self():
    cmd = AutoCommand()
    assert cmd.with_timeout(3.5) is cmd
    assert cmd.timeout_seconds == 3.5


def test_with_timeout_ignored_for_never_timeout_commands():
    seq = InOrder([])
    seq.with_timeout(5.0)
    assert seq.timeout_seconds == -1.0


def test_with_cancel_condition():
    cond = TimesTestedCondition(1)
    cmd = AutoCommand()
    assert cmd.with_cancel_condition(cond) is cmd
    assert cmd.true_to_end is cond


def test_function_command_returns_callable_result():
    assert FunctionCommand(lambda: False).run() is False
    assert FunctionCommand(lambda: True).run() is True


def test_times_tested_condition():
    cond = TimesTestedCondition(3)
    assert [cond.test() for _ in range(4)] == [False, False, True, True]


@pytest.mark.parametrize("a,b,expected", [(True, False, True), (False, False, False), (False, True, True)])
def test_or_condition_tests_both(a, b, expected):
    ca, cb, calls = counting_pair(a, b)
    combined = ca.or_(cb)
    assert isinstance(combined, OrCondition)
    assert combined.test() is expected
    assert (calls["a"], calls["b"]) == (1, 1)


@pytest.mark.parametrize("a,b,expected", [(True, True, True), (False, True, False), (True, False, False)])
def test_and_condition_tests_both(a, b, expected):
    ca, cb, calls = counting_pair(a, b)
    combined = ca.and_(cb)
    assert isinstance(combined, AndCondition)
    assert combined.test() is expected
    assert (calls["a"], calls["b"]) == (1, 1)


def test_direct_construction_forms():
    ca, cb, calls = counting_pair(False, True)
    assert OrCondition(ca, cb).test() is True
    assert AndCondition(cb, ca).test() is False
    assert (calls["a"], calls["b"]) == (2, 2)


def test_if_time_passed():
    clock = FakeClock()
    cond = IfTimePassed(2.0, clock=clock)
    assert cond.test() is False
    clock.now = 2.0
    assert cond.test() is False
    clock.now = 2.1
    assert cond.test() is True


def test_wait_until_condition():
    cmd = WaitUntilCondition(TimesTestedCondition(2))
    assert cmd.run() is False
    assert cmd.run() is True


def test_in_order_runs_sequentially():
    order = []
    seq = InOrder([FunctionCommand(lambda: order.append("a") or True),
                   FunctionCommand(lambda: order.append("b") or True)])
    assert seq.run() is False
    assert order == ["a"]
    assert seq.run() is False
    assert order == ["a", "b"]
    assert seq.run() is True
    assert seq.timeout_seconds == -1.0


def test_in_order_times_out_command():
    clock = FakeClock()
    slow = Recorder(finish_after=1000).with_timeout(1.0)
    after = Recorder()
    seq = InOrder([slow, after], clock=clock)
    assert seq.run() is False
    clock.now = 1.5
    assert seq.run() is False
    assert slow.timeouts == 1
    seq.run()
    assert after.runs == 1
    assert seq.run() is True


def test_in_order_cancel_condition():
    slow = Recorder(finish_after=1000).with_cancel_condition(TimesTestedCondition(2))
    seq = InOrder([slow], clock=FakeClock())
    seq.run()
    assert slow.timeouts == 0
    seq.run()
    assert slow.timeouts == 1
    assert seq.run() is True


def test_in_order_on_timeout_forwards_to_current():
    cmd = Recorder(finish_after=1000)
    seq = InOrder([cmd], clock=FakeClock())
    seq.on_timeout()
    assert cmd.timeouts == 0
    seq.run()
    seq.on_timeout()
    assert cmd.timeouts == 1


def test_branch_picks_true_choice():
    f, t = Recorder(), Recorder(finish_after=2)
    branch = Branch(TimesTestedCondition(1), f, t, clock=FakeClock())
    assert branch.run() is False
    assert branch.run() is True
    assert (f.runs, t.runs) == (0, 2)
    assert branch.timeout_seconds == -1


def test_branch_picks_false_choice_and_times_out():
    clock = FakeClock()
    f, t = Recorder(finish_after=1000).with_timeout(1.0), Recorder()
    branch = Branch(FunctionCondition(lambda: False), f, t, clock=clock)
    assert branch.run() is False
    clock.now = 1.5
    assert branch.run() is True
    assert f.timeouts == 1
    assert t.runs == 0


def test_branch_on_timeout_only_when_chosen():
    f = Recorder(finish_after=1000)
    branch = Branch(FunctionCondition(lambda: False), f, Recorder(), clock=FakeClock())
    branch.on_timeout()
    assert f.timeouts == 0
    branch.run()
    branch.on_timeout()
    assert f.timeouts == 1


def test_repeat_until_fixed_count():
    counter = []
    rep = RepeatUntil(InOrder([FunctionCommand(lambda: counter.append(1) or True)]), 3)
    run_until_done(rep)
    assert len(counter) == 3
    assert rep.timeout_seconds == -1.0


def test_repeat_until_condition():
    counter = []
    rep = RepeatUntil([FunctionCommand(lambda: counter.append(1) or True)],
                      FunctionCondition(lambda: len(counter) >= 2))
    run_until_done(rep)
    assert len(counter) == 2


def test_repeat_until_on_timeout_forwards():
    cmd = Recorder(finish_after=1000)
    rep = RepeatUntil([cmd], 1)
    rep.run()
    rep.on_timeout()
    assert cmd.timeouts == 1


def test_parallel_waits_for_all():
    done = []
    cmds = [FunctionCommand(lambda: done.append(1) or True) for _ in range(3)]
    par = Parallel(cmds, poll_interval=0.001)
    deadline = time.monotonic() + 5.0
    while not par.run():
        assert time.monotonic() < deadline
        time.sleep(0.005)
    assert len(done) == 3


def test_parallel_on_timeout_cancels_running():
    slow = Recorder(finish_after=10**9)
    slow.timeout_seconds = -1
    par = Parallel([slow], poll_interval=0.001)
    assert par.run() is False
    par.on_timeout()
    assert slow.timeouts == 1
    assert par.run() is True


def test_async_runs_in_background():
    event = threading.Event()
    cmd = FunctionCommand(lambda: event.set() or True)
    assert Async(cmd, poll_interval=0.001).run() is True
    assert event.wait(5.0) is True


def test_delay_command_sleeps_milliseconds():
    slept = []
    cmd = DelayCommand(250, sleep=slept.append)
    assert cmd.run() is True
    assert slept == [0.25]