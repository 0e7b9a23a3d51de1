import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep WAITRETRY_* variables from the outer environment out of tests"""
    for name in ("WAITRETRY_POLICY", "WAITRETRY_RETRY_COUNT", "WAITRETRY_SEED"):
        monkeypatch.delenv(name, raising=False)
