"""Gerrit changes through the REST API (authenticated /a/ endpoints)."""

import base64
import binascii
import json
import logging
import os
import re
from dataclasses import dataclass
from urllib.parse import quote

from git_commit_helper.config import Config, GerritConfig
from git_commit_helper.remote import RemoteError, http_get

logger = logging.getLogger(__name__)

# Gerrit prefixes JSON answers with this line against XSSI
XSSI_PREFIX = ")]}'"

# https://gerrit.example.com/c/group/project/+/179042[/2]
GERRIT_URL_RE = re.compile(r'^(?P<base>https?://.+?)/c/(?P<project>.+?)/\+/(?P<change>\d+)')


@dataclass
class GerritTarget:
    base_url: str
    project: str
    change: str


def is_gerrit_url(url: str) -> bool:
    return '/+/' in url


def parse_gerrit_url(url: str) -> GerritTarget:
    match = GERRIT_URL_RE.match(url.strip())
    if not match:
        raise RemoteError(f"Invalid Gerrit URL: {url}")
    return GerritTarget(
        base_url=match.group('base'),
        project=match.group('project').rstrip('/'),
        change=match.group('change'),
    )


def auth_header(gerrit: GerritConfig | None = None) -> dict:
    """Authorization header: config token, config user/password, then env."""
    if gerrit and gerrit.token:
        logger.debug("Using Gerrit token from config")
        return {"Authorization": f"Bearer {gerrit.token}"}
    if gerrit and gerrit.username and gerrit.password:
        logger.debug("Using Gerrit user %s from config", gerrit.username)
        return _basic(gerrit.username, gerrit.password)

    username = os.environ.get("GERRIT_USERNAME")
    password = os.environ.get("GERRIT_PASSWORD")
    if username and password:
        logger.debug("Using Gerrit user %s from environment", username)
        return _basic(username, password)
    token = os.environ.get("GERRIT_TOKEN")
    if token:
        logger.debug("Using Gerrit token from environment")
        return {"Authorization": f"Bearer {token}"}

    logger.debug("No Gerrit credentials found, trying anonymous access")
    return {}


def _basic(username: str, password: str) -> dict:
    encoded = base64.b64encode(f"{username}:{password}".encode('utf-8')).decode('ascii')
    return {"Authorization": f"Basic {encoded}"}


def get_change_info(url: str, config: Config | None = None) -> str:
    """Subject line of the change."""
    target = parse_gerrit_url(url)
    api_url = f"{target.base_url}/a/changes/{target.change}"
    headers = {"Accept": "application/json", **auth_header(config.gerrit if config else None)}
    text = http_get(api_url, headers, "Requesting Gerrit change info")
    if text.startswith(XSSI_PREFIX):
        text = text[len(XSSI_PREFIX):]
    try:
        return json.loads(text)["subject"]
    except (json.JSONDecodeError, KeyError, TypeError):
        raise RemoteError(f"Unexpected change info from {api_url}")


def get_change_diff(url: str, config: Config | None = None) -> str:
    """Patch of the current revision."""
    target = parse_gerrit_url(url)
    project = quote(target.project, safe='')
    api_url = f"{target.base_url}/a/changes/{project}~{target.change}/revisions/current/patch"
    headers = {"Accept": "text/plain", **auth_header(config.gerrit if config else None)}
    encoded = http_get(api_url, headers, "Requesting Gerrit change patch").strip()
    if not encoded:
        raise RemoteError("No code changes found")
    try:
        patch = base64.b64decode(encoded, validate=False)
    except (binascii.Error, ValueError) as e:
        raise RemoteError(f"Could not decode Gerrit patch: {e}")
    return patch.decode('utf-8', errors='replace')
