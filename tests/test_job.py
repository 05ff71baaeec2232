from __future__ import annotations

import time

import pytest

from ciphercrack.classical.base import Cipher
from ciphercrack.core import registry
from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob, CrackService
from ciphercrack.core.registry import run_crack
from ciphercrack.core.results import CrackState
from ciphercrack.core.search import hill_climb

CAESAR = Directives(crack_method=CrackMethod.BRUTE_FORCE, cribs="hello")


class WaitingCipher(Cipher):
    """Cracks forever, or until the job is cancelled."""

    name = "Waiting"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def crack(self, text, dirs, job):
        while True:
            job.update(50, "waiting")
            job.check()
            time.sleep(0.01)


class ClimbingCipher(Cipher):
    """Climbs towards CCC, cancelling its own job part way up."""

    name = "Climbing"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def crack(self, text, dirs, job):
        calls = []

        def fitness(plain):
            calls.append(plain)
            if len(calls) == 6:
                job.cancel()
            return plain.count("C")

        hill_climb(text, "AAA", "ABC", lambda t, key: key, fitness, job)
        raise AssertionError("the climb should have been cancelled")


class BrokenCipher(Cipher):
    name = "Broken"
    crack_methods = (CrackMethod.BRUTE_FORCE,)

    def crack(self, text, dirs, job):
        raise ValueError("grid is empty")


@pytest.fixture
def waiting(monkeypatch):
    monkeypatch.setitem(registry._CIPHERS, "waiting", WaitingCipher())


def test_job_transitions():
    job = CrackJob()
    assert job.state is CrackState.QUEUED
    job.transition(CrackState.RUNNING)
    job.transition(CrackState.COMPLETE)
    with pytest.raises(ValueError):
        job.transition(CrackState.RUNNING)


def test_job_update_clamps_percent():
    job = CrackJob()
    job.update(150, "nearly")
    assert job.percent == 100
    job.update(-5)
    assert job.percent == 0
    assert job.message == "nearly"


def test_run_crack_sets_result_fields():
    job = CrackJob()
    result = run_crack("caesar", "KHOOR", CAESAR, job)
    assert result.success
    assert result.id == job.id
    assert result.percent == 100
    assert result.state is CrackState.COMPLETE
    assert job.state is CrackState.COMPLETE
    assert result.to_dict()["state"] == "complete"


def test_run_crack_cancelled_before_start():
    job = CrackJob()
    job.cancel()
    result = run_crack("caesar", "KHOOR", CAESAR, job)
    assert result.state is CrackState.CANCELLED
    assert result.cancelled
    assert not result.success
    assert job.state is CrackState.CANCELLED


def test_run_crack_unknown_cipher():
    result = run_crack("enigma", "ABC", CAESAR)
    assert not result.success
    assert result.explain == "Cipher 'enigma' is not supported."


def test_run_crack_invalid_directives():
    job = CrackJob()
    result = run_crack("caesar", "ABC", CAESAR.with_changes(cribs=""), job)
    assert result.explain == "Invalid directives: Some cribs must be provided"
    assert result.state is CrackState.COMPLETE
    assert result.percent == 0
    assert job.state is CrackState.COMPLETE


def test_service_runs_crack():
    with CrackService(max_workers=1) as service:
        job = service.crack("caesar", "KHOOR ZRUOG", CAESAR)
        assert service.job(job.id) is job
        assert service.progress(job.id)[0] >= 0
        result = service.result(job.id, timeout=30)
        assert service.job(job.id) is None
    assert result.success
    assert result.key == {"shift": 3}
    assert result.id == job.id


def test_service_cancel(waiting):
    with CrackService(max_workers=1) as service:
        job = service.crack("waiting", "ABC", CAESAR)
        deadline = time.monotonic() + 10
        while job.state is not CrackState.RUNNING and time.monotonic() < deadline:
            time.sleep(0.01)
        assert service.cancel(job.id)
        result = service.result(job.id, timeout=10)
    assert result.state is CrackState.CANCELLED
    assert result.percent == 50
    assert "Waiting was cancelled at 50%" in result.explain


def test_service_cancel_unknown_job():
    with CrackService() as service:
        assert not service.cancel(12345)


def test_cancelled_crack_keeps_best_so_far(monkeypatch):
    monkeypatch.setitem(registry._CIPHERS, "climbing", ClimbingCipher())
    job = CrackJob()
    result = run_crack("climbing", "ABC", CAESAR, job)
    assert result.state is CrackState.CANCELLED
    assert job.state is CrackState.CANCELLED
    assert result.plain_text == "CCA"
    assert result.key == {"best_key": "CCA"}
    assert "Best key so far: CCA" in result.explain
    assert "Key CCA improves measure to 2.000000" in result.explain


def test_crack_error_becomes_failure(monkeypatch):
    monkeypatch.setitem(registry._CIPHERS, "broken", BrokenCipher())
    job = CrackJob()
    result = run_crack("broken", "ABC", CAESAR, job)
    assert not result.success
    assert result.state is CrackState.COMPLETE
    assert job.state is CrackState.COMPLETE
    assert result.explain == "Fail: Broken crack stopped with an error: grid is empty"


def test_service_forgets_collected_jobs():
    with CrackService(max_workers=1) as service:
        job = service.crack("caesar", "KHOOR", CAESAR)
        service.result(job.id, timeout=30)
        assert service.job(job.id) is None
        assert not service.cancel(job.id)
