from __future__ import annotations

from pathlib import Path

from core.config import TOKEN_KEY, AppConfig, config
from core.logger import _redact
from core.storage import MemoryStorage, SessionStateStorage, get_storage_backend


def test_api_base_url_normalizes_prefix(tmp_path: Path) -> None:
    cfg = AppConfig(backend_url="http://ledger.local:8001/", api_prefix="api/", data_dir=tmp_path, logs_dir=tmp_path / "logs")
    assert cfg.api_base_url == "http://ledger.local:8001/api"
    assert cfg.max_upload_bytes == 20 * 1024 * 1024


def test_unknown_log_level_falls_back_to_info(tmp_path: Path) -> None:
    cfg = AppConfig(log_level="chatty", data_dir=tmp_path, logs_dir=tmp_path)
    assert cfg.log_level == "INFO"


def test_defaults() -> None:
    assert config.token_key == TOKEN_KEY == "ledgeros_token"
    assert config.recent_txn_limit == 100
    assert config.min_password_length == 4
    assert set(config.allowed_statement_ext) == {"pdf", "csv", "xls", "xlsx"}


def test_storage_without_state_is_private_memory() -> None:
    first, second = get_storage_backend(), get_storage_backend()
    assert isinstance(first, MemoryStorage)
    first.set(TOKEN_KEY, "mine")
    assert second.get(TOKEN_KEY) is None


def test_session_state_storage_keeps_tokens_per_browser() -> None:
    alice_state: dict = {}
    bob_state: dict = {}
    alice = get_storage_backend(alice_state)
    bob = get_storage_backend(bob_state)
    assert isinstance(alice, SessionStateStorage)

    alice.set(TOKEN_KEY, "alice-token")
    assert alice.get(TOKEN_KEY) == "alice-token"
    assert alice_state == {"storage:ledgeros_token": "alice-token"}
    assert bob.get(TOKEN_KEY) is None

    alice.remove(TOKEN_KEY)
    alice.remove("never-set")
    assert alice_state == {}


def test_tokens_are_redacted_from_log_messages() -> None:
    record = {"message": "GET /api/accounts?token=abc123&limit=5 -> 200", "extra": {}}
    _redact(record)
    assert record["message"] == "GET /api/accounts?token=***&limit=5 -> 200"
    assert record["extra"]["component"] == "app"
