"""Claude (Anthropic) AI Client"""

from git_commit_helper.ai.base import AIService, AIError, RequestTimeout, log_request, log_response


class ClaudeService(AIService):
    """Claude API client built on the anthropic SDK."""

    service = "claude"
    DEFAULT_ENDPOINT = "https://api.anthropic.com"
    DEFAULT_MODEL = "claude-3-sonnet-20240229"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        if not api_key:
            raise AIError(
                "No API key configured for Claude.\n"
                "  git-commit-helper service edit"
            )
        self.api_key = api_key
        # The SDK appends /v1 itself
        if self.endpoint.endswith('/v1'):
            self.endpoint = self.endpoint[:-3]

        try:
            from anthropic import Anthropic
        except ImportError:
            raise AIError(
                "Anthropic SDK not installed. Run:\n"
                "  pip install anthropic"
            )
        # Retries are driven by chat(), not by the SDK
        self._client = Anthropic(
            api_key=self.api_key,
            base_url=self.endpoint,
            timeout=float(self.timeout),
            max_retries=0,
        )

    @property
    def name(self) -> str:
        return f"Claude ({self.model})"

    def _complete(self, system_prompt: str, user_content: str) -> str:
        from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AuthenticationError

        request = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_content}],
        }
        url = f"{self.endpoint}/v1/messages"
        log_request(url, request)
        self._progress(url)

        try:
            response = self._client.messages.create(**request)
        except APITimeoutError:
            raise RequestTimeout(f"no response within {self.timeout}s")
        except AuthenticationError:
            raise AIError("Invalid Claude API key.")
        except APIStatusError as e:
            raise AIError(f"Claude API call failed ({e.status_code}): {e.message}")
        except APIConnectionError as e:
            raise AIError(f"Claude request failed: {e.message}")

        self._progress(url, done=True)
        log_response(str(response))

        for block in response.content:
            if block.type == "text":
                return block.text
        return ""
