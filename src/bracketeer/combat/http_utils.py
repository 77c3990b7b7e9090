"""Shared HTTP helpers for remote resolvers."""

from __future__ import annotations

from typing import Any, Dict

import requests

from .base import (
    ResolverProtocolError,
    ResolverServerError,
    ResolverTimeout,
    ResolverUnavailable,
)


def post_json(
    url: str,
    payload: Dict[str, Any],
    *,
    headers: Dict[str, str] | None = None,
    timeout_s: float = 30.0,
) -> Dict[str, Any]:
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout_s)
    except requests.exceptions.Timeout as exc:
        raise ResolverTimeout(f"No response from {url} within {timeout_s}s.") from exc
    except requests.exceptions.RequestException as exc:
        raise ResolverUnavailable(str(exc)) from exc

    if response.status_code >= 400:
        raise map_http_error(response.status_code, response.text)
    try:
        data = response.json()
    except ValueError as exc:
        raise ResolverProtocolError(f"Response from {url} is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise ResolverProtocolError(f"Response from {url} must be a JSON object.")
    return data


def map_http_error(status: int, message: str) -> Exception:
    if status in (408, 504):
        return ResolverTimeout(message)
    if 500 <= status < 600:
        return ResolverServerError(message)
    return ResolverUnavailable(message)


__all__ = ["map_http_error", "post_json"]
