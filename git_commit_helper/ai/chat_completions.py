"""OpenAI-compatible chat completion services.

DeepSeek, OpenAI, Grok and Qwen all speak the same wire format:
POST {endpoint}/chat/completions with a Bearer key, answer text at
choices[0].message.content.
"""

import http.client
import json
import socket
import urllib.error
import urllib.request

from git_commit_helper.ai.base import AIService, AIError, RequestTimeout, log_request, log_response


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return True
    return isinstance(exc, urllib.error.URLError) and isinstance(exc.reason, (socket.timeout, TimeoutError))


def _error_message(payload: str) -> str:
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError):
        return payload.strip()[:200] or "unknown error"
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return err["message"]
        if isinstance(err, str):
            return err
        if data.get("message"):
            return data["message"]
    return "unknown error"


def post_json(url: str, body: dict, headers: dict, timeout: int, service_name: str) -> dict:
    """POST a JSON body and decode the JSON answer.

    Raises RequestTimeout on timeouts and AIError on every other failure.
    """
    log_request(url, body)
    data = json.dumps(body).encode('utf-8')
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", **headers},
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            raw = response.read().decode('utf-8')
    except urllib.error.HTTPError as e:
        payload = e.read().decode('utf-8', errors='replace')
        log_response(payload)
        raise AIError(f"{service_name} API call failed ({e.code}): {_error_message(payload)}")
    except urllib.error.URLError as e:
        if _is_timeout(e):
            raise RequestTimeout(f"no response within {timeout}s")
        raise AIError(f"{service_name} request failed: {e.reason}")
    except (socket.timeout, TimeoutError):
        raise RequestTimeout(f"no response within {timeout}s")
    except http.client.HTTPException as e:
        raise AIError(f"Incomplete response from {service_name}: {e}")
    except OSError as e:
        raise AIError(f"Connection to {service_name} lost: {e}")

    try:
        result = json.loads(raw)
    except json.JSONDecodeError:
        raise AIError(f"Invalid JSON response from {service_name}")
    log_response(result)
    return result


class ChatCompletionService(AIService):
    """Base for services that implement the OpenAI chat completions API."""

    DISPLAY = ""
    TEMPERATURE: float | None = None

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        if not api_key:
            raise AIError(f"No API key configured for {self.DISPLAY}")
        self.api_key = api_key

    @property
    def name(self) -> str:
        return f"{self.DISPLAY} ({self.model})"

    def _url(self) -> str:
        return f"{self.endpoint}/chat/completions"

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    def _body(self, system_prompt: str, user_content: str) -> dict:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": self.max_tokens,
        }
        if self.TEMPERATURE is not None:
            body["temperature"] = self.TEMPERATURE
        return body

    def _complete(self, system_prompt: str, user_content: str) -> str:
        url = self._url()
        self._progress(url)
        result = post_json(url, self._body(system_prompt, user_content), self._headers(),
                           self.timeout, self.DISPLAY)
        self._progress(url, done=True)
        return extract_choice_text(result)


def extract_choice_text(result: dict) -> str:
    try:
        content = result["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content or ""


class DeepSeekService(ChatCompletionService):
    service = "deepseek"
    DISPLAY = "DeepSeek"
    DEFAULT_ENDPOINT = "https://api.deepseek.com/v1"
    DEFAULT_MODEL = "deepseek-chat"


class OpenAIService(ChatCompletionService):
    service = "openai"
    DISPLAY = "OpenAI"
    DEFAULT_ENDPOINT = "https://api.openai.com/v1"
    DEFAULT_MODEL = "gpt-3.5-turbo"


class GrokService(ChatCompletionService):
    service = "grok"
    DISPLAY = "Grok"
    DEFAULT_ENDPOINT = "https://api.x.ai/v1"
    DEFAULT_MODEL = "grok-3-latest"


class QwenService(ChatCompletionService):
    service = "qwen"
    DISPLAY = "Qwen"
    DEFAULT_ENDPOINT = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    DEFAULT_MODEL = "qwen-plus"
    TEMPERATURE = 0.1
