"""Shared parsing and HTTP retry utilities for remote generation responses."""

import json
import re
import sys

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from mvp_studio.errors import GenerationFailure

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


def strip_fences(text: str) -> str:
    """Strip markdown code fences from a service response if present."""
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text.strip()


def _is_transient(exc: BaseException) -> bool:
    """Return True if the exception is a transient HTTP/network error worth retrying."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.ConnectError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in (429, 500, 502, 503)
    return False


async def post_with_retry(client: httpx.AsyncClient, url: str, payload: dict) -> httpx.Response:
    """POST payload as JSON with exponential backoff on transient errors.

    Retries on HTTP 429/500/502/503, connection errors, and timeouts.
    Non-transient errors (auth failures, bad requests) are raised immediately.
    """
    from mvp_studio.config import get_config

    config = get_config()
    retries = config.get("generation_max_retries", 3)

    @retry(
        stop=stop_after_attempt(retries + 1),  # +1 because first attempt counts
        wait=wait_exponential(
            multiplier=1,
            min=config.get("generation_retry_min_wait", 2),
            max=config.get("generation_retry_max_wait", 16),
        ),
        retry=retry_if_exception(_is_transient),
        reraise=True,
        before_sleep=lambda state: print(
            f"[MVP] Transient error: {state.outcome.exception()!r}. "
            f"Retrying in {state.next_action.sleep:.0f}s "
            f"(attempt {state.attempt_number}/{retries})...",
            file=sys.stderr,
        ),
    )
    async def _post():
        response = await client.post(url, json=payload)
        response.raise_for_status()
        return response

    return await _post()


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _parse_page(raw, i: int) -> dict:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str) or not raw["name"].strip():
        raise GenerationFailure(f"Page {i} in generation response is missing 'name'.")

    for key in ("purpose", "description", "layout", "priority"):
        if raw.get(key) is not None and not isinstance(raw[key], str):
            raise GenerationFailure(f"Page {i} '{key}' must be a string.")
    for key in ("components", "user_actions", "data_requirements"):
        if raw.get(key) is not None and not _is_str_list(raw[key]):
            raise GenerationFailure(f"Page {i} '{key}' must be a list of strings.")

    page = {
        "name": raw["name"],
        "purpose": raw.get("purpose") or raw.get("description") or f"{raw['name']} page",
        "components": list(raw.get("components") or []),
        "layout": raw.get("layout") or "vertical",
    }
    for key in ("priority", "user_actions", "data_requirements"):
        if raw.get(key) is not None:
            page[key] = raw[key]
    return page


def _parse_tool(raw, i: int) -> dict:
    if not isinstance(raw, dict):
        raise GenerationFailure(f"Builder tool {i} in generation response is not an object.")
    for key in ("name", "url"):
        if not isinstance(raw.get(key), str) or not raw[key].strip():
            raise GenerationFailure(f"Builder tool {i} is missing '{key}'.")
    if not _is_str_list(raw.get("reasons")):
        raise GenerationFailure(f"Builder tool {i} 'reasons' must be a list of strings.")
    return dict(raw)


def parse_pages_response(text: str) -> dict:
    """Parse a discovery response into {"pages": [...], "builder_tools": [...] | None}.

    Pages may use either "purpose" or "description" for the page goal.
    Raises GenerationFailure if the body is not JSON or any page or tool
    field has the wrong type.
    """
    try:
        data = json.loads(strip_fences(text))
    except (json.JSONDecodeError, TypeError) as exc:
        raise GenerationFailure("Generation service returned invalid JSON.", cause=exc) from exc

    if not isinstance(data, dict) or not isinstance(data.get("pages"), list):
        raise GenerationFailure("Generation service response missing 'pages' list.")

    pages = [_parse_page(raw, i) for i, raw in enumerate(data["pages"])]

    tools = data.get("builder_tools")
    if tools is not None:
        if not isinstance(tools, list):
            raise GenerationFailure("Generation service 'builder_tools' must be a list.")
        tools = [_parse_tool(raw, i) for i, raw in enumerate(tools)]

    return {"pages": pages, "builder_tools": tools}
