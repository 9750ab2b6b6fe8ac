import pytest

from packages.caselogic.claim_gate import ChatClaimPolicy
from packages.core.config import DEFAULT_BASE_URL, load_config

_VARS = (
    "PORTAL_API_BASE_URL",
    "PORTAL_TIMEOUT_SECONDS",
    "PORTAL_MAX_RETRIES",
    "PORTAL_SLA_TARGET_MINUTES",
    "PORTAL_CHAT_CLAIM_POLICY",
    "PORTAL_UNREAD_POLL_SECONDS",
    "PORTAL_MESSAGE_POLL_SECONDS",
    "PORTAL_TOKEN",
    "PORTAL_SESSION_ID",
    "PORTAL_DOCTOR_ID",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        # setenv first so teardown removes whatever load_dotenv wrote
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path) -> None:
    config = load_config(tmp_path / "missing.env")
    assert config.base_url == DEFAULT_BASE_URL
    assert config.sla_target_minutes == 30
    assert config.chat_claim_policy is ChatClaimPolicy.PROMPT
    assert config.token is None


def test_dotenv_file_is_loaded(tmp_path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text(
        "PORTAL_API_BASE_URL=https://portal.example/api/\n"
        "PORTAL_CHAT_CLAIM_POLICY=AUTO\n"
        "PORTAL_SLA_TARGET_MINUTES=45\n"
        "PORTAL_DOCTOR_ID=doc-7\n",
        encoding="utf-8",
    )
    config = load_config(env_path)
    assert config.base_url == "https://portal.example/api"
    assert config.chat_claim_policy is ChatClaimPolicy.AUTO
    assert config.sla_target_minutes == 45
    assert config.doctor_id == "doc-7"


def test_environment_wins_over_dotenv(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text("PORTAL_MAX_RETRIES=9\n", encoding="utf-8")
    monkeypatch.setenv("PORTAL_MAX_RETRIES", "1")
    assert load_config(env_path).max_retries == 1


def test_bad_integer_is_reported(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTAL_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ValueError) as excinfo:
        load_config(tmp_path / "missing.env")
    assert "PORTAL_TIMEOUT_SECONDS" in str(excinfo.value)


def test_unknown_policy_rejected(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORTAL_CHAT_CLAIM_POLICY", "sometimes")
    with pytest.raises(ValueError):
        load_config(tmp_path / "missing.env")
