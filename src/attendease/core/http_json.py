"""Small JSON-over-HTTP helper shared by the agent and scheduler adapters."""

from __future__ import annotations

import json
from typing import Any
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen


def _error_detail(body: str, fallback: str) -> str:
    detail = body.strip() or fallback
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return detail
    if isinstance(parsed, dict):
        err = parsed.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or err.get("code") or detail)
        if isinstance(err, str):
            return err
        if isinstance(parsed.get("message"), str):
            return parsed["message"]
    return detail


def request_json(
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    payload: dict[str, Any] | None = None,
    query: dict[str, Any] | None = None,
    timeout_sec: float = 30,
) -> Any:
    """Send one request and decode the JSON body.

    Raises `RuntimeError("HTTP <code>: <detail>")` for HTTP errors; network
    errors surface as `OSError` and bad bodies as `ValueError`.
    """
    if query:
        clean_query = {key: value for key, value in query.items() if value is not None}
        if clean_query:
            url = f"{url}?{urlencode(clean_query)}"
    req_headers = {"Accept": "application/json", **(headers or {})}
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        req_headers.setdefault("Content-Type", "application/json")
    req = Request(url, data=data, headers=req_headers, method=method.upper())
    try:
        with urlopen(req, timeout=timeout_sec) as response:
            body = response.read().decode("utf-8")
    except HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        raise RuntimeError(f"HTTP {exc.code}: {_error_detail(body, str(exc))}") from exc
    if not body.strip():
        return {}
    return json.loads(body)


def bearer_headers(api_key: Any) -> dict[str, str]:
    if isinstance(api_key, str) and api_key:
        return {"Authorization": f"Bearer {api_key}"}
    return {}
