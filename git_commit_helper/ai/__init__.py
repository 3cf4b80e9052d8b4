"""AI Service Package"""

from git_commit_helper.ai.base import AIService, AIError, RequestTimeout
from git_commit_helper.ai.registry import PROVIDERS, create_service, create_default_service, default_model
from git_commit_helper.ai.fallback import (
    FallbackOrchestrator,
    chat_with_fallback,
    translate_with_fallback,
)

__all__ = [
    "AIService",
    "AIError",
    "RequestTimeout",
    "PROVIDERS",
    "create_service",
    "create_default_service",
    "default_model",
    "FallbackOrchestrator",
    "chat_with_fallback",
    "translate_with_fallback",
]
