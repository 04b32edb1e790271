from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_settings_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.upper().startswith("PSHELP_"):
            monkeypatch.delenv(name, raising=False)
