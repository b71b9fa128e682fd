# (c) Copyright IBM Corp. 2025

import os
from typing import Generator

import pytest


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep PORTHOUND_* settings of the developer's shell out of the tests"""
    for key in list(os.environ):
        if key.startswith("PORTHOUND_"):
            monkeypatch.delenv(key, raising=False)
    yield
