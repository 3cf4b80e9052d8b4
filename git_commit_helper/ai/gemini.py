"""Google Gemini generateContent client"""

from urllib.parse import quote

from git_commit_helper.ai.base import AIService, AIError
from git_commit_helper.ai.chat_completions import post_json


class GeminiService(AIService):
    """Gemini REST client. The key travels as a query parameter."""

    service = "gemini"
    DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        if not api_key:
            raise AIError("No API key configured for Gemini")
        self.api_key = api_key

    @property
    def name(self) -> str:
        return f"Gemini ({self.model})"

    def _url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent?key={quote(self.api_key)}"

    def _body(self, system_prompt: str, user_content: str) -> dict:
        # generateContent has no system role in v1beta's simple form; both go in one part
        return {
            "contents": [{"parts": [{"text": f"{system_prompt}\n\n{user_content}"}]}],
            "generationConfig": {"maxOutputTokens": self.max_tokens},
        }

    def _complete(self, system_prompt: str, user_content: str) -> str:
        url = self._url()
        self._progress(url)
        result = post_json(url, self._body(system_prompt, user_content), {}, self.timeout, "Gemini")
        self._progress(url, done=True)
        try:
            return result["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            return ""
