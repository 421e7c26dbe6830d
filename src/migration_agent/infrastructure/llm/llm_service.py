"""
LLM Service for centralized LLM interactions.

This module wraps litellm behind a small YAML-configured service: model
aliases, default parameters, request timeout and API key discovery. Calls
are made exactly once; failures are reported in the result dict and never
retried.
"""

import os
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import litellm
import structlog
import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "llm_config.yaml"

ALLOWED_PARAMS = ("temperature", "top_p", "max_tokens", "stop")


class LLMService:
    """
    Centralized service for LLM completions via litellm.

    The API key is taken from the constructor when given, otherwise from the
    first environment variable listed under ``providers.gemini.api_key_env``
    that is set.
    """

    def __init__(
        self,
        config_path: Optional[str | Path] = None,
        api_key: Optional[str] = None,
    ):
        """
        Initialize LLMService with configuration.

        Args:
            config_path: Path to YAML configuration file (packaged default if None)
            api_key: Explicit API key, overrides environment lookup

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        self.logger = structlog.get_logger().bind(component="llm_service")
        self._load_config(Path(config_path) if config_path else DEFAULT_CONFIG_PATH)
        self._initialize_provider(api_key)

        self.logger.info(
            "llm_service_initialized",
            default_model=self.default_model,
            model_aliases=list(self.models.keys()),
            api_key_set=self.has_api_key,
        )

    def _load_config(self, config_file: Path) -> None:
        """
        Load and validate configuration from YAML file.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is empty or defines no models
        """
        if not config_file.exists():
            raise FileNotFoundError(f"LLM config not found: {config_file}")

        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if config is None:
            raise ValueError(f"Config file is empty or invalid: {config_file}")

        self.default_model = config.get("default_model", "main")
        self.models: Dict[str, str] = config.get("models", {})
        self.default_params: Dict[str, Any] = config.get("default_params", {})
        self.timeout = config.get("timeout", 60)

        if not self.models:
            raise ValueError("Config must define at least one model in 'models' section")

        self.logging_config = config.get("logging", {})
        self.provider_config = config.get("providers", {})

    def _initialize_provider(self, api_key: Optional[str]) -> None:
        """Resolve the API key from the constructor or the environment."""
        gemini_config = self.provider_config.get("gemini", {})
        key_envs = gemini_config.get("api_key_env", ["GEMINI_API_KEY", "GOOGLE_API_KEY"])
        if isinstance(key_envs, str):
            key_envs = [key_envs]
        self.api_key_envs: List[str] = list(key_envs)

        self.api_key = api_key or next(
            (os.getenv(name) for name in self.api_key_envs if os.getenv(name)), None
        )

        if not self.api_key:
            self.logger.warning(
                "llm_api_key_missing",
                env_vars=self.api_key_envs,
                hint="Get a key at https://aistudio.google.com/app/apikey",
            )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def _resolve_model(self, model_alias: Optional[str]) -> str:
        """Resolve a model alias to the litellm model name (unknown aliases pass through)."""
        if model_alias is None:
            model_alias = self.default_model
        return self.models.get(model_alias, model_alias)

    async def complete(
        self,
        messages: List[Dict[str, Any]],
        model: Optional[str] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Perform a single LLM completion.

        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model alias or None (uses default)
            **kwargs: Parameter overrides (temperature, max_tokens, ...)

        Returns:
            Dict with:
            - success: bool
            - content: str (if successful)
            - usage: Dict with token counts (if successful)
            - error: str (if failed)
            - error_type: str (if failed)
        """
        actual_model = self._resolve_model(model)
        merged = {**self.default_params, **kwargs}
        params = {k: v for k, v in merged.items() if k in ALLOWED_PARAMS}

        start_time = time.time()
        self.logger.info(
            "llm_completion_started",
            model=actual_model,
            message_count=len(messages),
        )

        try:
            response = await litellm.acompletion(
                model=actual_model,
                messages=messages,
                timeout=self.timeout,
                api_key=self.api_key,
                **params,
            )
        except Exception as e:
            error_type = type(e).__name__
            self.logger.error(
                "llm_completion_failed",
                model=actual_model,
                error_type=error_type,
                error=str(e)[:200],
            )
            return {
                "success": False,
                "error": str(e),
                "error_type": error_type,
                "model": actual_model,
            }

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        usage = getattr(response, "usage", None) or {}
        if isinstance(usage, dict):
            token_stats = usage
        else:
            token_stats = {
                "total_tokens": getattr(usage, "total_tokens", 0),
                "prompt_tokens": getattr(usage, "prompt_tokens", 0),
                "completion_tokens": getattr(usage, "completion_tokens", 0),
            }

        latency_ms = int((time.time() - start_time) * 1000)
        if self.logging_config.get("log_token_usage", True):
            self.logger.info(
                "llm_completion_success",
                model=actual_model,
                tokens=token_stats.get("total_tokens", 0),
                latency_ms=latency_ms,
            )

        return {
            "success": True,
            "content": content or "",
            "usage": token_stats,
            "model": actual_model,
            "latency_ms": latency_ms,
        }
