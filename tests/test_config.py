from x402.http import DEFAULT_FACILITATOR_URL

from startup_idea.config import DEFAULT_PORT, load_settings

_VARS = [
    "BIZNEWS_MCP_SERVER_URL",
    "OPENAI_API_KEY",
    "EVM_PRIVATE_KEY",
    "SVM_PRIVATE_KEY",
    "FACILITATOR_URL",
    "EVM_RECIPIENT_ADDRESS",
    "SVM_RECIPIENT_ADDRESS",
    "X402_TESTNET",
    "SOLANA_RPC_URL",
    "OPENAI_MODEL",
    "HOST",
    "PORT",
    "LOG_LEVEL",
]


def _clear(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_environment_is_empty(monkeypatch) -> None:
    _clear(monkeypatch)
    settings = load_settings(dotenv=False)

    assert settings.openai_api_key is None
    assert settings.evm_private_key is None
    assert settings.facilitator_url == DEFAULT_FACILITATOR_URL
    assert settings.testnet is True
    assert settings.port == DEFAULT_PORT
    assert settings.openai_model == "o4-mini"


def test_blank_values_count_as_missing(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", "   ")
    assert load_settings(dotenv=False).openai_api_key is None


def test_values_are_read(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("BIZNEWS_MCP_SERVER_URL", "http://news.example/mcp")
    monkeypatch.setenv("SVM_RECIPIENT_ADDRESS", "So1ana")
    monkeypatch.setenv("X402_TESTNET", "false")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings(dotenv=False)

    assert settings.biznews_server_url == "http://news.example/mcp"
    assert settings.svm_recipient_address == "So1ana"
    assert settings.testnet is False
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
