from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .directives import CrackMethod


class CrackState(Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETE = "complete"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class CrackResult:
    cipher_name: str
    method: CrackMethod
    success: bool
    cipher_text: str
    explain: str
    plain_text: Optional[str] = None

    # Discovered key material, keyed by Directives field name (e.g. {"shift": 3})
    key: dict[str, Any] = field(default_factory=dict)

    id: int = 0
    milliseconds: int = 0
    percent: int = 100
    state: CrackState = CrackState.COMPLETE

    @property
    def cancelled(self) -> bool:
        return self.state is CrackState.CANCELLED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "cipher_name": self.cipher_name,
            "method": self.method.value,
            "success": self.success,
            "cipher_text": self.cipher_text,
            "plain_text": self.plain_text,
            "explain": self.explain,
            "key": dict(self.key),
            "milliseconds": self.milliseconds,
            "percent": self.percent,
            "state": self.state.value,
        }


@dataclass(frozen=True)
class FrequencyEntry:
    gram: str
    count: int
    percent: float  # share of all grams of this size in the text
    normal: float  # expected percentage in the language (0 when unknown)

    def to_dict(self) -> dict[str, Any]:
        return {"gram": self.gram, "count": self.count, "percent": self.percent, "normal": self.normal}


@dataclass(frozen=True)
class TextReport:
    length: int
    alphabetic: int
    distinct_symbols: int
    ioc: float
    expected_ioc: float
    entropy: float
    vowel_percent: float
    rare_percent: float
    suggestions: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "length": self.length,
            "alphabetic": self.alphabetic,
            "distinct_symbols": self.distinct_symbols,
            "ioc": self.ioc,
            "expected_ioc": self.expected_ioc,
            "entropy": self.entropy,
            "vowel_percent": self.vowel_percent,
            "rare_percent": self.rare_percent,
            "suggestions": self.suggestions,
        }
