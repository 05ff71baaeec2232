from .directives import CrackMethod, Directives, KeywordExtend
from .features import analyze_text, suggest_ciphers
from .job import CrackCancelled, CrackJob, CrackService
from .registry import get_cipher, list_ciphers, register_cipher, run_crack
from .results import CrackResult, CrackState, FrequencyEntry, TextReport

__all__ = [
    "CrackMethod",
    "Directives",
    "KeywordExtend",
    "analyze_text",
    "suggest_ciphers",
    "CrackCancelled",
    "CrackJob",
    "CrackService",
    "get_cipher",
    "list_ciphers",
    "register_cipher",
    "run_crack",
    "CrackResult",
    "CrackState",
    "FrequencyEntry",
    "TextReport",
]
