"""Endpoint and header construction for the two API-key styles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

import httpx

from toolwire.config.normalize import normalize_tools

if TYPE_CHECKING:
    from toolwire.config.models import ServerProfile

REDACTED = "REDACTED"


def add_query_params(
    base_url: str,
    tools: list[str] | None,
    api_key: str | None,
    api_key_param: str,
) -> str:
    """Add ``tools`` and the API key as query parameters unless already present."""
    url = httpx.URL(base_url)
    if tools and "tools" not in url.params:
        url = url.copy_set_param("tools", ",".join(tools))
    if api_key and api_key_param not in url.params:
        url = url.copy_set_param(api_key_param, api_key)
    return str(url)


def fill_placeholder(base_url: str, api_key: str | None, placeholder: str) -> str:
    if not api_key:
        return base_url
    return base_url.replace(placeholder, api_key)


def resolve_endpoint(
    profile: ServerProfile,
    base_url: str,
    tools: list[str] | None,
    api_key: str | None,
) -> str:
    """Apply *profile*'s API-key style to *base_url*."""
    if profile.auth == "bearer":
        if not profile.api_key_placeholder:
            return base_url
        return fill_placeholder(base_url, api_key, profile.api_key_placeholder)
    return add_query_params(base_url, tools, api_key, profile.api_key_param or "apiKey")


def redact_endpoint(endpoint: str, api_key: str | None, api_key_param: str | None = None) -> str:
    """Hide the API key in *endpoint*, whether it sits in a param or in the path."""
    if api_key_param:
        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL:
            return endpoint
        if api_key_param in url.params:
            return str(url.copy_set_param(api_key_param, REDACTED))
        return endpoint
    if api_key:
        return endpoint.replace(api_key, REDACTED)
    return endpoint


def parse_tools_from_url(value: str | None) -> list[str] | None:
    if not value:
        return None
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return None
    if "tools" not in url.params:
        return None
    return normalize_tools(url.params.get("tools"))


def build_headers(api_key: str | None, extra: Mapping[str, str] | None) -> dict[str, str]:
    """Copy *extra* and add a bearer token unless an Authorization header exists."""
    headers = dict(extra or {})
    if api_key and not any(key.lower() == "authorization" for key in headers):
        headers["Authorization"] = f"Bearer {api_key}"
    return headers
