"""
Unit tests for LLMService.

Tests cover:
- Configuration loading and validation
- API key resolution (explicit, GEMINI_API_KEY, GOOGLE_API_KEY)
- Model alias resolution
- Completion success and failure (litellm mocked)
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from migration_agent.infrastructure.llm.llm_service import DEFAULT_CONFIG_PATH, LLMService


@pytest.fixture(autouse=True)
def clear_api_keys(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


@pytest.fixture
def mock_config(tmp_path):
    """Create temporary config file."""
    config_content = """
default_model: "main"
models:
  main: "gemini/gemini-2.0-flash-exp"
  fast: "gemini/gemini-2.0-flash"
default_params:
  temperature: 0.2
  max_tokens: 512
  effort: "ignored"
timeout: 15
providers:
  gemini:
    api_key_env:
      - "GEMINI_API_KEY"
      - "GOOGLE_API_KEY"
logging:
  log_token_usage: true
"""
    config_file = tmp_path / "llm_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return str(config_file)


def make_response(content, total_tokens=42):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage = MagicMock(total_tokens=total_tokens, prompt_tokens=30, completion_tokens=12)
    return response


class TestLLMServiceInitialization:
    """Test LLMService initialization and configuration loading."""

    def test_packaged_default_config_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_init_with_packaged_config(self):
        service = LLMService()
        assert service.default_model == "main"
        assert service.models["main"].startswith("gemini/")

    def test_init_loads_config(self, mock_config):
        service = LLMService(config_path=mock_config)
        assert service.default_model == "main"
        assert service.timeout == 15
        assert service.models["fast"] == "gemini/gemini-2.0-flash"

    def test_init_missing_config_raises_error(self):
        with pytest.raises(FileNotFoundError, match="LLM config not found"):
            LLMService(config_path="nonexistent.yaml")

    def test_init_empty_config_raises_error(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")
        with pytest.raises(ValueError, match="empty or invalid"):
            LLMService(config_path=str(config_file))

    def test_init_missing_models_raises_error(self, tmp_path):
        config_file = tmp_path / "no_models.yaml"
        config_file.write_text('default_model: "main"\n', encoding="utf-8")
        with pytest.raises(ValueError, match="at least one model"):
            LLMService(config_path=str(config_file))


class TestApiKeyResolution:
    """Test API key discovery order."""

    def test_missing_key(self, mock_config):
        service = LLMService(config_path=mock_config)
        assert service.api_key is None
        assert service.has_api_key is False

    def test_explicit_key_wins(self, mock_config, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        service = LLMService(config_path=mock_config, api_key="explicit")
        assert service.api_key == "explicit"

    def test_gemini_env_key(self, mock_config, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert LLMService(config_path=mock_config).api_key == "gemini-key"

    def test_google_env_key_fallback(self, mock_config, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert LLMService(config_path=mock_config).api_key == "google-key"


class TestModelResolution:
    def test_default_alias(self, mock_config):
        service = LLMService(config_path=mock_config)
        assert service._resolve_model(None) == "gemini/gemini-2.0-flash-exp"

    def test_named_alias(self, mock_config):
        service = LLMService(config_path=mock_config)
        assert service._resolve_model("fast") == "gemini/gemini-2.0-flash"

    def test_unknown_alias_passes_through(self, mock_config):
        service = LLMService(config_path=mock_config)
        assert service._resolve_model("gemini/gemini-1.5-pro") == "gemini/gemini-1.5-pro"


class TestComplete:
    """Test completion calls with litellm mocked."""

    @pytest.mark.asyncio
    async def test_complete_success(self, mock_config):
        service = LLMService(config_path=mock_config, api_key="key")
        mock_response = make_response("# Best Migration Option: Express Entry")

        with patch(
            "litellm.acompletion", new_callable=AsyncMock, return_value=mock_response
        ) as mock_completion:
            result = await service.complete(messages=[{"role": "user", "content": "hi"}])

        assert result["success"] is True
        assert result["content"] == "# Best Migration Option: Express Entry"
        assert result["usage"]["total_tokens"] == 42

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.0-flash-exp"
        assert kwargs["api_key"] == "key"
        assert kwargs["timeout"] == 15
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 512
        assert "effort" not in kwargs

    @pytest.mark.asyncio
    async def test_complete_kwargs_override_defaults(self, mock_config):
        service = LLMService(config_path=mock_config, api_key="key")

        with patch(
            "litellm.acompletion", new_callable=AsyncMock, return_value=make_response("ok")
        ) as mock_completion:
            await service.complete(messages=[], model="fast", temperature=0.9)

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.0-flash"
        assert kwargs["temperature"] == 0.9

    @pytest.mark.asyncio
    async def test_complete_failure_is_reported_not_raised(self, mock_config):
        service = LLMService(config_path=mock_config, api_key="key")

        with patch(
            "litellm.acompletion",
            new_callable=AsyncMock,
            side_effect=TimeoutError("Request timed out"),
        ) as mock_completion:
            result = await service.complete(messages=[{"role": "user", "content": "hi"}])

        assert result["success"] is False
        assert result["error"] == "Request timed out"
        assert result["error_type"] == "TimeoutError"
        # Never retried
        assert mock_completion.await_count == 1

    @pytest.mark.asyncio
    async def test_complete_with_empty_content(self, mock_config):
        service = LLMService(config_path=mock_config, api_key="key")

        with patch("litellm.acompletion", new_callable=AsyncMock, return_value=make_response(None)):
            result = await service.complete(messages=[])

        assert result["success"] is True
        assert result["content"] == ""
