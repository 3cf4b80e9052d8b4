"""Ordered fallback across configured AI services.

Order: the default service, then every other configured service in config
order. When all of them failed the user may pick services from a menu to
retry, each at most once more.
"""

import logging
import os
from typing import Callable

from git_commit_helper import NO_TRANSLATE_ENV
from git_commit_helper.ai.base import AIService, AIError
from git_commit_helper.ai.registry import create_service
from git_commit_helper.config import Config, ConfigError, display_name
from git_commit_helper.interactive import confirm, select
from git_commit_helper.output import print_warning

logger = logging.getLogger(__name__)


def ask_retry_service(candidates: list[str]) -> str | None:
    """Offer the services not yet retried after every automatic attempt failed."""
    print("\nAll attempts so far have failed.")
    if not confirm("Retry with another AI service?", default=True, on_eof=False):
        return None
    idx = select("Choose a service", [display_name(s) for s in candidates])
    return None if idx is None else candidates[idx]


class FallbackOrchestrator:
    """Runs an action against services until one succeeds."""

    def __init__(self, config: Config,
                 factory: Callable[..., AIService] = create_service,
                 select_retry: Callable[[list[str]], str | None] | None = None):
        self.config = config
        self.factory = factory
        self.select_retry = select_retry or ask_retry_service
        self.tried: list[str] = []

    def _attempt(self, service: str, action: Callable[[AIService], str]) -> str | None:
        self.tried.append(service)
        service_config = self.config.get_service(service)
        if service_config is None:
            logger.debug("Service %s is not configured, skipping", service)
            return None
        try:
            client = self.factory(service_config, self.config)
            return action(client)
        except AIError as e:
            logger.warning("%s failed: %s", display_name(service), e)
            print_warning(f"{display_name(service)} failed: {e}")
            return None

    def run(self, action: Callable[[AIService], str]) -> str:
        if not self.config.services:
            raise ConfigError("No AI service configured. Run: git-commit-helper config")

        logger.debug("Trying default service %s", self.config.default_service)
        result = self._attempt(self.config.default_service, action)
        if result is not None:
            return result

        for service_config in self.config.services:
            if service_config.service in self.tried:
                continue
            logger.debug("Trying fallback service %s", service_config.service)
            result = self._attempt(service_config.service, action)
            if result is not None:
                return result

        retried: list[str] = []
        while True:
            candidates = [s.service for s in self.config.services if s.service not in retried]
            if not candidates:
                break
            choice = self.select_retry(candidates)
            if choice is None:
                break
            retried.append(choice)
            logger.debug("User picked %s for retry", choice)
            result = self._attempt(choice, action)
            if result is not None:
                return result

        raise AIError("All AI services failed")


def chat_with_fallback(config: Config, system_prompt: str, user_content: str,
                       orchestrator: FallbackOrchestrator | None = None) -> str:
    orchestrator = orchestrator or FallbackOrchestrator(config)
    return orchestrator.run(lambda client: client.chat(system_prompt, user_content))


def translate_with_fallback(config: Config, text: str,
                            orchestrator: FallbackOrchestrator | None = None) -> str:
    if os.environ.get(NO_TRANSLATE_ENV):
        return text.strip()
    orchestrator = orchestrator or FallbackOrchestrator(config)
    return orchestrator.run(lambda client: client.translate(text))
