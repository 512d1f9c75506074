import os
from typing import Any, Dict, Optional

import requests

API_URL = os.getenv("API_URL", "http://localhost:8000")


def _friendly_message(default: str, resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return default
    message = data.get("message") or data.get("detail") or default
    errors = data.get("errors") or []
    if errors:
        details = "; ".join(f"{e.get('field')}: {e.get('message')}" for e in errors)
        message = f"{message} ({details})"
    return message


def _handle(resp: requests.Response) -> Any:
    if resp.ok:
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()
    raise RuntimeError(_friendly_message("Request failed", resp))


def get(path: str, params: Optional[Dict[str, Any]] = None) -> Any:
    return _handle(requests.get(f"{API_URL}{path}", params=params, timeout=10))


def get_bytes(path: str) -> bytes:
    resp = requests.get(f"{API_URL}{path}", timeout=30)
    if resp.ok:
        return resp.content
    raise RuntimeError(_friendly_message("Download failed", resp))


def post(path: str, payload: Dict[str, Any]) -> Any:
    return _handle(requests.post(f"{API_URL}{path}", json=payload, timeout=10))


def put(path: str, payload: Dict[str, Any]) -> Any:
    return _handle(requests.put(f"{API_URL}{path}", json=payload, timeout=10))


def patch(path: str, payload: Dict[str, Any]) -> Any:
    return _handle(requests.patch(f"{API_URL}{path}", json=payload, timeout=10))


def delete(path: str) -> Any:
    return _handle(requests.delete(f"{API_URL}{path}", timeout=10))
