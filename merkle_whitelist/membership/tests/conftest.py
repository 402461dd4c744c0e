import pytest

from merkle_whitelist.membership import feature_flags


@pytest.fixture(autouse=True)
def default_hash(monkeypatch: pytest.MonkeyPatch) -> None:
    feature_flags.set_hash_name(None)
    monkeypatch.delenv("MERKLE_WHITELIST_HASH", raising=False)
    yield
    feature_flags.set_hash_name(None)
