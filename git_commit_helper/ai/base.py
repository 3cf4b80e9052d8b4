"""AI Service Base Classes and Shared Code"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Callable
from urllib.parse import urlsplit

from git_commit_helper.interactive import confirm
from git_commit_helper.output import print_progress
from git_commit_helper.prompts.builder import build_translation_prompt

logger = logging.getLogger(__name__)

SECRET_KEYS = {"api_key", "key", "authorization", "token"}


class AIError(Exception):
    """Raised when an AI service call fails."""
    pass


class RequestTimeout(AIError):
    """Raised by a provider when a single request timed out."""
    pass


def ask_retry_on_timeout(service_name: str) -> bool:
    return confirm(f"Request to {service_name} timed out. Retry?", default=True, on_eof=False)


def log_request(url: str, body: dict) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("Sending request to %s", _mask_url(url))
    logger.debug("Request body: %s", json.dumps(body, indent=2, ensure_ascii=False))


def log_response(payload) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if isinstance(payload, (dict, list)):
        payload = json.dumps(payload, indent=2, ensure_ascii=False)
    logger.debug("Received response: %s", payload)


def _mask_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = "&".join(
        f"{k}=***" if k.lower() in SECRET_KEYS else f"{k}={v}"
        for k, _, v in (p.partition("=") for p in parts.query.split("&"))
    )
    return parts._replace(query=query).geturl()


def host_of(url: str, fallback: str) -> str:
    return urlsplit(url).hostname or fallback


class AIService(ABC):
    """Uniform chat interface over one vendor's API.

    Subclasses implement _complete(); chat() wraps it in the timeout retry loop.
    """

    service: str = ""
    DEFAULT_MODEL: str = ""
    DEFAULT_ENDPOINT: str = ""

    def __init__(self, model: str | None = None, endpoint: str | None = None,
                 timeout: int = 20, max_tokens: int = 2048,
                 confirm_retry: Callable[[str], bool] | None = None):
        self.model = model or self.DEFAULT_MODEL
        self.endpoint = (endpoint or self.DEFAULT_ENDPOINT).rstrip('/')
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.confirm_retry = confirm_retry or ask_retry_on_timeout

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def _complete(self, system_prompt: str, user_content: str) -> str:
        """Send one request and return the response text."""
        pass

    def chat(self, system_prompt: str, user_content: str) -> str:
        attempt = 0
        while True:
            attempt += 1
            try:
                return self._complete(system_prompt, user_content)
            except RequestTimeout as e:
                logger.warning("%s request timed out (attempt %d): %s", self.name, attempt, e)
                if not self.confirm_retry(self.name):
                    raise AIError(f"Request to {self.name} timed out") from e

    def translate(self, text: str) -> str:
        return self.chat(build_translation_prompt(text), text)

    def _progress(self, url: str, done: bool = False) -> None:
        host = host_of(url, self.endpoint)
        print_progress(f"Requesting {host}", 100 if done else None)
