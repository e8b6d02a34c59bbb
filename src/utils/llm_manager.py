"""LLM instance management.

This module builds chat model instances for the OpenAI-compatible providers
registered in ``config.LLM_PROVIDERS`` and lists the models a provider
exposes.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from langchain_openai import ChatOpenAI
from openai import OpenAI

from config import (
    LLM_PROVIDERS,
    NON_CHAT_MODEL_KEYWORDS,
    QUIZ_LLM_PROVIDER,
    QUIZ_MAX_OUTPUT_TOKENS,
    QUIZ_MODEL,
    TEMPERATURE,
)
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_llm_manager_instance: Optional["LLMManager"] = None


def is_chat_model(model_id: str) -> bool:
    lowered = model_id.lower()
    return not any(keyword in lowered for keyword in NON_CHAT_MODEL_KEYWORDS)


def get_llm_manager() -> "LLMManager":
    """Return a singleton LLMManager instance."""
    global _llm_manager_instance
    if _llm_manager_instance is None:
        _llm_manager_instance = LLMManager()
    return _llm_manager_instance


class LLMManager:
    """Caches chat model instances per provider/model."""

    def __init__(self, provider: str = QUIZ_LLM_PROVIDER, model: Optional[str] = QUIZ_MODEL) -> None:
        self._validate_provider(provider)
        self.provider = provider
        self.model = model or LLM_PROVIDERS[provider]["default_model"]
        self.active_llms: Dict[str, Any] = {}
        logger.info("LLMManager initialized (provider=%s, model=%s)", self.provider, self.model)

    def _validate_provider(self, provider: str) -> None:
        if provider not in LLM_PROVIDERS:
            raise ConfigurationError(f"Unsupported provider: {provider}")

    def _get_api_key(self) -> str:
        env_key = LLM_PROVIDERS[self.provider]["env_key"]
        api_key = os.getenv(env_key) if env_key else None
        if not api_key:
            raise ConfigurationError("API key not configured")
        return api_key

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"api_key": self._get_api_key()}
        base_url = LLM_PROVIDERS[self.provider]["base_url"]
        if base_url:
            kwargs["base_url"] = base_url
        return kwargs

    def get_quiz_llm(self) -> Any:
        """Return a chat model that is forced to reply with a JSON object.

        Raises:
            ConfigurationError: If the provider's API key is not set.
        """
        cache_key = f"quiz:{self.provider}:{self.model}"
        cached = self.active_llms.get(cache_key)
        if cached:
            return cached

        llm = ChatOpenAI(
            model=self.model,
            temperature=TEMPERATURE,
            max_tokens=QUIZ_MAX_OUTPUT_TOKENS,
            max_retries=0,
            **self._client_kwargs(),
        ).bind(response_format={"type": "json_object"})
        self.active_llms[cache_key] = llm
        return llm

    def list_models(self) -> List[Dict[str, Any]]:
        """Return the models exposed by the configured provider, sorted by id.

        Each entry carries ``name`` (the model id), ``display_name`` (falls
        back to the id when the provider sends none) and ``chat``, which is
        False for embedding, image and other non-chat models.

        Raises:
            ConfigurationError: If the provider's API key is not set.
        """
        client = OpenAI(**self._client_kwargs())
        models = []
        for model in client.models.list():
            models.append(
                {
                    "name": model.id,
                    "display_name": getattr(model, "display_name", None) or model.id,
                    "chat": is_chat_model(model.id),
                }
            )
        return sorted(models, key=lambda m: m["name"])
