"""Remote Code Hosts - fetch changes from GitHub and Gerrit for review."""

import http.client
import logging
import socket
import urllib.error
import urllib.request

from git_commit_helper.output import print_progress

logger = logging.getLogger(__name__)

USER_AGENT = "git-commit-helper"
DEFAULT_TIMEOUT = 30


class RemoteError(Exception):
    """Raised when a remote change cannot be located or fetched."""
    pass


def http_get(url: str, headers: dict | None = None, label: str = "",
             timeout: int = DEFAULT_TIMEOUT) -> str:
    """GET url and return the body as text; any failure raises RemoteError."""
    logger.debug("GET %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT, **(headers or {})})
    if label:
        print_progress(label)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            body = response.read().decode('utf-8', errors='replace')
    except urllib.error.HTTPError as e:
        raise RemoteError(f"Request to {url} failed: HTTP {e.code} {e.reason}")
    except urllib.error.URLError as e:
        raise RemoteError(f"Could not reach {url}: {e.reason}")
    except (socket.timeout, TimeoutError):
        raise RemoteError(f"Request to {url} timed out after {timeout}s")
    except http.client.HTTPException as e:
        raise RemoteError(f"Bad response from {url}: {e!r}")
    if label:
        print_progress(label, 100)
    logger.debug("Received %d bytes", len(body))
    return body


__all__ = ["RemoteError", "http_get", "USER_AGENT"]
