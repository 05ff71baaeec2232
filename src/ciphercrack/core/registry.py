from __future__ import annotations

import logging
from typing import Optional, Protocol

from .directives import CrackMethod, Directives
from .job import CrackCancelled, CrackJob
from .results import CrackResult, CrackState

logger = logging.getLogger(__name__)


class CipherPlugin(Protocol):
    name: str

    def validate(self, dirs: Directives) -> Optional[str]:
        ...

    def encode(self, text: str, dirs: Directives) -> str:
        ...

    def decode(self, text: str, dirs: Directives) -> str:
        ...

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        ...

    def fitness(self, text: str, dirs: Directives) -> float:
        ...


_CIPHERS: dict[str, CipherPlugin] = {}


def _key(name: str) -> str:
    return name.lower().strip().replace(" ", "").replace("_", "").replace("-", "")


def register_cipher(cipher: CipherPlugin) -> None:
    key = _key(cipher.name)
    if not key:
        raise ValueError("Cipher must have a non-empty name.")
    _CIPHERS[key] = cipher


def list_ciphers() -> list[str]:
    return sorted(c.name for c in _CIPHERS.values())


def get_cipher(name: str) -> Optional[CipherPlugin]:
    """Look up a cipher by name, ignoring case, spaces, '-' and '_'. None if not supported."""
    return _CIPHERS.get(_key(name or ""))


def _rejected(job: CrackJob, cipher_name: str, text: str, dirs: Directives, explain: str) -> CrackResult:
    if job.state is CrackState.QUEUED:
        job.transition(CrackState.COMPLETE)
    return CrackResult(
        cipher_name=cipher_name,
        method=dirs.crack_method,
        success=False,
        cipher_text=text,
        explain=explain,
        id=job.id,
        percent=job.percent,
        state=CrackState.COMPLETE,
    )


def _best_key(key) -> dict:
    if key is None:
        return {}
    return {"best_key": list(key) if isinstance(key, tuple) else key}


def run_crack(cipher_name: str, text: str, dirs: Directives, job: Optional[CrackJob] = None) -> CrackResult:
    """
    Validate, then crack on the calling thread. Always returns a result:
    unknown ciphers, invalid directives and errors raised by the crack become
    failures, and a cancelled job becomes a CANCELLED result carrying the best
    key and text its search had reached.
    """
    job = job or CrackJob()
    cipher = get_cipher(cipher_name)
    if cipher is None:
        return _rejected(job, cipher_name, text, dirs, f"Cipher '{cipher_name}' is not supported.")

    reason = cipher.validate(dirs)
    if reason is not None:
        return _rejected(job, cipher.name, text, dirs, f"Invalid directives: {reason}")

    if job.state is CrackState.QUEUED:
        job.transition(CrackState.RUNNING)
    logger.info("crack job %s: %s using %s", job.id, cipher.name, dirs.crack_method.label)

    try:
        result = cipher.crack(text, dirs, job)
    except CrackCancelled:
        job.transition(CrackState.CANCELLED)
        logger.info("crack job %s cancelled after %d ms", job.id, job.elapsed_ms())
        key, plain, activity = job.best_so_far()
        lines = [f"Crack of {cipher.name} was cancelled at {job.percent}%."]
        if job.message:
            lines.append(job.message)
        if key is not None:
            lines.append(f"Best key so far: {key}")
        return CrackResult(
            cipher_name=cipher.name,
            method=dirs.crack_method,
            success=False,
            cipher_text=text,
            explain="\n".join(lines) + "\n" + activity,
            plain_text=plain,
            key=_best_key(key),
            id=job.id,
            milliseconds=job.elapsed_ms(),
            percent=job.percent,
            state=CrackState.CANCELLED,
        )
    except Exception as e:
        logger.exception("crack job %s: %s crack raised", job.id, cipher.name)
        job.transition(CrackState.COMPLETE)
        return CrackResult(
            cipher_name=cipher.name,
            method=dirs.crack_method,
            success=False,
            cipher_text=text,
            explain=f"Fail: {cipher.name} crack stopped with an error: {e}",
            id=job.id,
            milliseconds=job.elapsed_ms(),
            percent=job.percent,
            state=CrackState.COMPLETE,
        )

    job.transition(CrackState.COMPLETE)
    logger.info("crack job %s complete: success=%s in %d ms", job.id, result.success, job.elapsed_ms())
    return CrackResult(
        cipher_name=result.cipher_name,
        method=result.method,
        success=result.success,
        cipher_text=result.cipher_text,
        explain=result.explain,
        plain_text=result.plain_text,
        key=result.key,
        id=job.id,
        milliseconds=job.elapsed_ms(),
        percent=100,
        state=CrackState.COMPLETE,
    )


def crack_method_supported(cipher_name: str, method: CrackMethod) -> bool:
    cipher = get_cipher(cipher_name)
    return cipher is not None and method in getattr(cipher, "crack_methods", ())
