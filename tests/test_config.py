import os

import pytest

from transcode_cli.config import Settings, available_cpus


def test_explicit_thread_count_wins():
    assert Settings(num_threads=3).threads == 3


def test_default_thread_count_uses_available_cpus(monkeypatch):
    monkeypatch.setattr("transcode_cli.config.available_cpus", lambda: 6)
    assert Settings().threads == 6


@pytest.mark.skipif(not hasattr(os, "sched_getaffinity"), reason="needs CPU affinity")
def test_available_cpus_respects_affinity(monkeypatch):
    monkeypatch.delattr(os, "process_cpu_count", raising=False)
    monkeypatch.setattr(os, "sched_getaffinity", lambda pid: {0, 1})
    monkeypatch.setattr(os, "cpu_count", lambda: 64)

    assert available_cpus() == 2


def test_available_cpus_falls_back_to_cpu_count(monkeypatch):
    monkeypatch.delattr(os, "process_cpu_count", raising=False)
    monkeypatch.delattr(os, "sched_getaffinity", raising=False)
    monkeypatch.setattr(os, "cpu_count", lambda: 5)

    assert available_cpus() == 5


def test_empty_target_extension_rejected():
    with pytest.raises(ValueError):
        Settings(to_ext="")
