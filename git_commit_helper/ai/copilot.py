"""GitHub Copilot chat client.

The configured api_key is a GitHub OAuth token. It is exchanged for a
short-lived Copilot token, which then authorizes an OpenAI-style
chat completion request.
"""

import json
import logging
import time
import urllib.error
import urllib.request

from git_commit_helper import __version__
from git_commit_helper.ai.base import AIError, RequestTimeout
from git_commit_helper.ai.chat_completions import ChatCompletionService, _is_timeout

logger = logging.getLogger(__name__)

TOKEN_URL = "https://api.github.com/copilot_internal/v2/token"
EDITOR_VERSION = f"git-commit-helper/{__version__}"


class CopilotService(ChatCompletionService):
    service = "copilot"
    DISPLAY = "Copilot"
    DEFAULT_ENDPOINT = "https://api.githubcopilot.com"
    DEFAULT_MODEL = "gpt-4o"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(api_key, **kwargs)
        self._token: str | None = None
        self._token_expires = 0

    def _exchange_token(self) -> str:
        """Return a cached Copilot token, fetching a new one when expired."""
        if self._token and time.time() < self._token_expires - 60:
            return self._token

        logger.debug("Requesting Copilot token from %s", TOKEN_URL)
        req = urllib.request.Request(TOKEN_URL, headers={
            "Authorization": f"token {self.api_key}",
            "Accept": "application/json",
            "User-Agent": EDITOR_VERSION,
            "Editor-Version": EDITOR_VERSION,
        })
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                data = json.loads(response.read().decode('utf-8'))
        except urllib.error.HTTPError as e:
            if e.code in (401, 403, 404):
                raise AIError("GitHub token rejected by Copilot. Check the token and your Copilot subscription.")
            raise AIError(f"Copilot token request failed ({e.code}): {e.reason}")
        except urllib.error.URLError as e:
            if _is_timeout(e):
                raise RequestTimeout(f"no token response within {self.timeout}s")
            raise AIError(f"Copilot token request failed: {e.reason}")
        except TimeoutError:
            raise RequestTimeout(f"no token response within {self.timeout}s")
        except OSError as e:
            raise AIError(f"Copilot token request failed: {e}")
        except json.JSONDecodeError:
            raise AIError("Invalid token response from GitHub")

        token = data.get("token")
        if not token:
            raise AIError("GitHub did not return a Copilot token")
        self._token = token
        self._token_expires = int(data.get("expires_at") or time.time() + 600)
        return token

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._exchange_token()}",
            "Editor-Version": EDITOR_VERSION,
            "Copilot-Integration-Id": "vscode-chat",
            "User-Agent": EDITOR_VERSION,
        }
