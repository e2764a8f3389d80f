from __future__ import annotations

import threading

import pytest

from stagetime.config.defaults import PolicyConfig
from stagetime.runtime.policy import AlwaysEmit, RateLimitPerWindow, SampleEveryN, policy_from_config
from stagetime.runtime.recorder import ReportRecord


def _record(name: str = "X") -> ReportRecord:
    return ReportRecord(name=name)


def test_always_emit() -> None:
    policy = AlwaysEmit()
    assert all(policy.should_emit(_record()) for _ in range(20))


def test_sample_every_second_report() -> None:
    policy = SampleEveryN(2)
    decisions = [policy.should_emit(_record()) for _ in range(10)]

    assert decisions == [True, False] * 5


def test_sample_every_one_is_always() -> None:
    policy = SampleEveryN(1)
    assert all(policy.should_emit(_record()) for _ in range(5))


def test_sample_is_exact_under_threads() -> None:
    policy = SampleEveryN(4)
    allowed = []
    lock = threading.Lock()

    def run() -> None:
        for _ in range(250):
            if policy.should_emit(_record()):
                with lock:
                    allowed.append(1)

    threads = [threading.Thread(target=run) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(allowed) == 250


def test_rate_limit_per_name_and_window(clock) -> None:
    policy = RateLimitPerWindow(window_s=1.0, max_per_window=2, clock=clock)

    assert policy.should_emit(_record("a"))
    assert policy.should_emit(_record("a"))
    assert not policy.should_emit(_record("a"))
    assert policy.should_emit(_record("b"))

    clock.advance(0.5)
    assert not policy.should_emit(_record("a"))

    clock.advance(0.5)
    assert policy.should_emit(_record("a"))


@pytest.mark.parametrize(
    "factory",
    [
        lambda: SampleEveryN(0),
        lambda: RateLimitPerWindow(window_s=0),
        lambda: RateLimitPerWindow(window_s=1.0, max_per_window=0),
    ],
)
def test_invalid_arguments(factory) -> None:
    with pytest.raises(ValueError):
        factory()


def test_policy_from_config(clock) -> None:
    assert isinstance(policy_from_config(PolicyConfig()), AlwaysEmit)

    sample = policy_from_config(PolicyConfig(kind="sample", every_n=3))
    assert isinstance(sample, SampleEveryN)
    assert sample.n == 3

    limited = policy_from_config(PolicyConfig(kind="rate_limit", window_s=2.0, max_per_window=4), clock=clock)
    assert isinstance(limited, RateLimitPerWindow)
    assert limited.window_s == 2.0
    assert limited.max_per_window == 4

    with pytest.raises(ValueError):
        policy_from_config(PolicyConfig(kind="never"))
