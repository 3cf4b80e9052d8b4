"""Provider registry: maps service keys to client classes."""

import logging
from typing import Callable

from git_commit_helper.ai.base import AIService, AIError
from git_commit_helper.ai.chat_completions import DeepSeekService, OpenAIService, GrokService, QwenService
from git_commit_helper.ai.claude import ClaudeService
from git_commit_helper.ai.copilot import CopilotService
from git_commit_helper.ai.gemini import GeminiService
from git_commit_helper.config import Config, ServiceConfig, display_name

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[AIService]] = {
    "deepseek": DeepSeekService,
    "openai": OpenAIService,
    "claude": ClaudeService,
    "copilot": CopilotService,
    "gemini": GeminiService,
    "grok": GrokService,
    "qwen": QwenService,
}


def default_model(service: str) -> str:
    provider = PROVIDERS.get(service)
    return provider.DEFAULT_MODEL if provider else ""


def create_service(service_config: ServiceConfig, config: Config | None = None,
                   confirm_retry: Callable[[str], bool] | None = None) -> AIService:
    """Build the client for one configured service."""
    provider = PROVIDERS.get(service_config.service)
    if provider is None:
        raise AIError(f"Unknown AI service: {service_config.service}")

    config = config or Config()
    logger.info("Creating %s client", display_name(service_config.service))
    return provider(
        api_key=service_config.api_key,
        model=service_config.model,
        endpoint=service_config.api_endpoint,
        timeout=config.timeout_seconds,
        max_tokens=config.max_tokens,
        confirm_retry=confirm_retry,
    )


def create_default_service(config: Config) -> AIService:
    return create_service(config.get_default_service(), config)
