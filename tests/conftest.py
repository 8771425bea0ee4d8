import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Strip ZONEKIT_* variables and point settings discovery at an empty location."""
    import os

    for key in list(os.environ):
        if key.startswith("ZONEKIT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ZONEKIT_SETTINGS_FILE", str(tmp_path / "missing.yaml"))
    return tmp_path
