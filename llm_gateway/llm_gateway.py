from __future__ import annotations  # LLM request gateway module

import json
import logging
import os
from contextlib import AbstractContextManager
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Protocol, Sequence, Tuple

from config import LlmRoute


logger = logging.getLogger(__name__)  # Module logger setup

_SSE_DONE = "[DONE]"


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


class StreamingResponse(Protocol):  # Response yielded by ``client.stream``
    @property
    def status_code(self) -> int: ...

    def iter_lines(self) -> Iterable[str]: ...


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> HttpResponse: ...

    def stream(
        self, method: str, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float
    ) -> AbstractContextManager[StreamingResponse]: ...


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class LlmUnavailableError(LlmGatewayError):  # No route or credentials configured
    pass


def complete(
    system_prompt: str,
    messages: Sequence[Dict[str, str]],
    *,
    cfg: Optional[LlmRoute],
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> str:  # Send one chat completion and return the reply text
    route = _require_route(cfg)
    payload = _payload(route, system_prompt, messages, options)
    headers = _headers(route)
    url = f"{route.base_url}{route.endpoint}"
    attempts = route.max_retries + 1
    preview = _preview(payload["messages"])
    logger.info("LLM request start route=%s model=%s attempts=%d preview=%s", route.name, route.model, attempts, preview)
    last_error: Optional[Exception] = None
    for attempt in range(attempts):
        try:
            response, close_cb = _post(url, payload, headers, route.timeout_s, client)
        except Exception as exc:  # noqa: BLE001
            logger.warning("LLM transport failure attempt=%d/%d: %s", attempt + 1, attempts, exc)
            last_error = exc
            continue
        try:
            if response.status_code >= 500:
                logger.warning("LLM server error status=%s attempt=%d/%d", response.status_code, attempt + 1, attempts)
                last_error = LlmGatewayError(f"LLM returned status {response.status_code}")
                continue
            if response.status_code >= 400:
                logger.error("LLM error status: %s", response.status_code)
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            try:
                data = response.json()
            except Exception as exc:  # noqa: BLE001
                logger.error("Invalid JSON payload from LLM: %s", exc)
                raise LlmGatewayError("LLM payload was not JSON") from exc
            content = _extract_content(data)
            logger.info("LLM request done route=%s model=%s attempt=%d", route.name, route.model, attempt + 1)
            return content
        finally:
            _close_safely(close_cb)
    raise LlmGatewayError("LLM transport failed") from last_error


def stream_complete(
    system_prompt: str,
    messages: Sequence[Dict[str, str]],
    *,
    cfg: Optional[LlmRoute],
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> Iterator[str]:  # Yield reply chunks from an OpenAI-compatible SSE stream
    route = _require_route(cfg)
    payload = _payload(route, system_prompt, messages, options)
    payload["stream"] = True
    headers = _headers(route)
    url = f"{route.base_url}{route.endpoint}"
    logger.info("LLM stream start route=%s model=%s", route.name, route.model)
    owned = None
    if client is None:
        owned = _default_client(route.timeout_s)
        client = owned
    try:
        with client.stream("POST", url, json=payload, headers=headers, timeout=route.timeout_s) as response:
            if response.status_code >= 400:
                logger.error("LLM stream error status: %s", response.status_code)
                raise LlmGatewayError(f"LLM returned status {response.status_code}")
            for line in response.iter_lines():
                chunk = _parse_sse_line(line)
                if chunk is None:
                    continue
                if chunk == _SSE_DONE:
                    break
                if chunk:
                    yield chunk
    except LlmGatewayError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("LLM stream failure: %s", exc)
        raise LlmGatewayError("LLM stream failed") from exc
    finally:
        if owned is not None:
            owned.close()
    logger.info("LLM stream done route=%s model=%s", route.name, route.model)


def _require_route(cfg: Optional[LlmRoute]) -> LlmRoute:  # Reject calls without a usable route
    if cfg is None:
        raise LlmUnavailableError("No LLM route configured")
    if cfg.api_key_env and not os.getenv(cfg.api_key_env):
        raise LlmUnavailableError(f"{cfg.api_key_env} is not set")
    return cfg


def _payload(
    route: LlmRoute,
    system_prompt: str,
    messages: Sequence[Dict[str, str]],
    options: Optional[Dict[str, Any]],
) -> Dict[str, Any]:  # Build chat-completions payload with the system prompt first
    chat = [{"role": "system", "content": system_prompt}]
    chat.extend(msg for msg in _normalize_messages(messages) if msg["role"] != "system")
    payload: Dict[str, Any] = {"model": route.model, "messages": chat}
    if route.temperature is not None:
        payload["temperature"] = route.temperature
    if options:
        payload.update(options)
    return payload


def _headers(route: LlmRoute) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if route.api_key_env:
        api_key = os.getenv(route.api_key_env)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
    headers.update(route.extra_headers)
    return headers


def _default_client(timeout: float) -> Any:  # httpx transport used when no client is injected
    import httpx

    return httpx.Client(timeout=timeout)


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    http_client = _default_client(timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _normalize_messages(messages: Sequence[Dict[str, str]]) -> list[Dict[str, str]]:  # Ensure message payload shape
    normalized: list[Dict[str, str]] = []
    for item in messages:
        if not isinstance(item, dict):
            raise TypeError("Each chat message must be a dict with role/content")
        role = str(item.get("role", "")).strip()
        content = str(item.get("content", ""))
        if not role:
            raise ValueError("Chat message missing role")
        normalized.append({"role": role, "content": content})
    return normalized


def _preview(messages: Sequence[Dict[str, str]]) -> str:  # Build preview string for logging
    for message in reversed(messages):
        text = message.get("content", "").strip()
        if text:
            first = text.splitlines()[0]
            return first if len(first) <= 120 else first[:117] + "..."
    return ""


def _extract_content(data: Any) -> str:  # Extract message content from LLM response
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content.strip()
        if isinstance(data.get("content"), str):
            return data["content"].strip()
    raise LlmGatewayError("LLM response missing content")


def _parse_sse_line(line: str) -> Optional[str]:  # Decode one ``data:`` line into a text delta
    line = line.strip()
    if not line.startswith("data:"):
        return None
    data = line[len("data:") :].strip()
    if data == _SSE_DONE:
        return _SSE_DONE
    try:
        event = json.loads(data)
    except json.JSONDecodeError:
        logger.warning("Skipping malformed SSE line: %s", data[:80])
        return None
    choices = event.get("choices") if isinstance(event, dict) else None
    if not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return content if isinstance(content, str) else None
