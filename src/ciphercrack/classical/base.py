from __future__ import annotations

from typing import Any, Optional

from ciphercrack.core.directives import CrackMethod, Directives
from ciphercrack.core.job import CrackJob
from ciphercrack.core.results import CrackResult
from ciphercrack.core.scoring import crib_set
from ciphercrack.core.search import SearchOutcome


class Cipher:
    """
    Shared behaviour for the registered ciphers. Subclasses set `name`,
    `crack_methods` and override encode/decode/crack and the parameter checks.
    """

    name = ""
    family = ""
    crack_methods: tuple[CrackMethod, ...] = ()

    # ----------------------------
    # Validation
    # ----------------------------

    def validate(self, dirs: Directives) -> Optional[str]:
        """None if the directives can be used, else the reason they cannot."""
        alphabet = dirs.alphabet
        if not alphabet or len(alphabet) < 2:
            return "Alphabet is empty or too short"
        if len(set(alphabet)) != len(alphabet):
            return "Alphabet contains duplicate symbols"
        if dirs.padding_chars is None:
            return "Set of padding chars is missing"
        if dirs.crack_method is CrackMethod.NONE:
            return self.validate_parameters(dirs)
        return self.validate_crack(dirs)

    def validate_parameters(self, dirs: Directives) -> Optional[str]:
        return None

    def validate_crack(self, dirs: Directives) -> Optional[str]:
        if dirs.crack_method not in self.crack_methods:
            return f"Invalid crack method {dirs.crack_method.label} for {self.name}"
        if not crib_set(dirs.cribs):
            return "Some cribs must be provided"
        return None

    def requires_dictionary(self, dirs: Directives) -> Optional[str]:
        if dirs.language is None:
            return "Missing language"
        if dirs.dictionary is None or len(dirs.dictionary) == 0:
            return f"No dictionary is available for {dirs.language.name}"
        return None

    # ----------------------------
    # Contract
    # ----------------------------

    def encode(self, text: str, dirs: Directives) -> str:
        raise NotImplementedError

    def decode(self, text: str, dirs: Directives) -> str:
        raise NotImplementedError

    def crack(self, text: str, dirs: Directives, job: CrackJob) -> CrackResult:
        return self.not_yet_able(text, dirs)

    def fitness(self, text: str, dirs: Directives) -> float:
        raise NotImplementedError(f"{self.name} has no fitness measure")

    def describe(self, dirs: Directives) -> str:
        return f"{self.name} cipher"

    # ----------------------------
    # Result helpers
    # ----------------------------

    def not_yet_able(self, text: str, dirs: Directives) -> CrackResult:
        return self.failure(text, dirs, f"Fail: Not yet able to crack {self.name} cipher.\n")

    def failure(self, text: str, dirs: Directives, explain: str, plain_text: Optional[str] = None,
                key: Optional[dict[str, Any]] = None) -> CrackResult:
        return CrackResult(
            cipher_name=self.name,
            method=dirs.crack_method,
            success=False,
            cipher_text=text,
            explain=explain,
            plain_text=plain_text,
            key=key or {},
        )

    def success(self, text: str, dirs: Directives, plain_text: str, explain: str,
                key: dict[str, Any]) -> CrackResult:
        return CrackResult(
            cipher_name=self.name,
            method=dirs.crack_method,
            success=True,
            cipher_text=text,
            explain=explain,
            plain_text=plain_text,
            key=key,
        )

    def from_outcome(self, text: str, dirs: Directives, outcome: SearchOutcome, key: dict[str, Any],
                     success_line: str, fail_line: str) -> CrackResult:
        """Build the result for a finished search; `key` is only reported on success."""
        if outcome.found:
            return self.success(text, dirs, outcome.plain_text, success_line + "\n" + outcome.explain, key)
        return self.failure(text, dirs, fail_line + "\n" + outcome.explain)
