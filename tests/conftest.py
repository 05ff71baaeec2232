from __future__ import annotations

import pytest

from ciphercrack.classical import register_all
from ciphercrack.core.language import english

register_all()


@pytest.fixture
def lang():
    return english()
