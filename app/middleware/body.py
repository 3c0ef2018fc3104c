# =============================================================================
# app/middleware/body.py - URL-Encoded Body Parsing
# =============================================================================
# Parses application/x-www-form-urlencoded request bodies into a dict stored
# on request.state.body. Bracketed keys nest the way HTML forms expect:
#
#   name=Ada&tags[]=x&tags[]=y&address[city]=London
#   -> {"name": "Ada", "tags": ["x", "y"], "address": {"city": "London"}}
#
# Numeric indices build lists (a[0]=x&a[1]=y -> ["x", "y"]). A key used both
# as a scalar and as a nested key keeps both values in order of appearance:
# a=1&a[b]=2 -> {"a": ["1", {"b": "2"}]}.
#
# The raw body is replayed to the downstream app, so handlers can still call
# request.body() or request.form() themselves.
# =============================================================================

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import parse_qsl

from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Same default ceiling as Express's body-parser
DEFAULT_LIMIT_BYTES = 100 * 1024

# Larger indices stay dict keys so a[999999]=x can't allocate a huge list
ARRAY_INDEX_LIMIT = 20

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str]:
    match = _KEY_RE.match(key)
    if match is None:
        return [key]
    return [match.group(1)] + _SEGMENT_RE.findall(match.group(2))


def _insert(container: dict[str, Any], segments: list[str], value: str) -> None:
    head, rest = segments[0], segments[1:]

    if not rest:
        # Repeated plain keys collect into a list
        if head in container:
            existing = container[head]
            container[head] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            container[head] = value
        return

    if rest == [""]:
        existing = container.get(head)
        if isinstance(existing, list):
            existing.append(value)
        elif existing is None:
            container[head] = [value]
        else:
            container[head] = [existing, value]
        return

    child = container.get(head)
    if isinstance(child, dict):
        target = child
    elif isinstance(child, list) and child and isinstance(child[-1], dict):
        target = child[-1]
    elif child is None:
        target = {}
        container[head] = target
    else:
        # Key was already used as a scalar; keep both
        target = {}
        container[head] = (child if isinstance(child, list) else [child]) + [target]
    _insert(target, rest, value)


def _compact(node: Any) -> Any:
    """Turn dicts keyed only by small indices (a[0]=x&a[1]=y) into lists."""
    if isinstance(node, list):
        return [_compact(item) for item in node]
    if not isinstance(node, dict):
        return node

    node = {key: _compact(value) for key, value in node.items()}
    if node and all(
        key.isascii() and key.isdigit() and int(key) <= ARRAY_INDEX_LIMIT for key in node
    ):
        # sparse indices close up, as in qs
        return [node[key] for key in sorted(node, key=int)]
    return node


def parse_urlencoded(body: str) -> dict[str, Any]:
    """
    Parse a URL-encoded body with nested (bracketed) keys.

    Args:
        body: Decoded request body, e.g. "a[b]=1&c=2"

    Returns:
        Nested dict of strings, lists and dicts

    Example:
        parse_urlencoded("a[b]=1&c=2")  # {"a": {"b": "1"}, "c": "2"}
    """
    result: dict[str, Any] = {}
    for key, value in parse_qsl(body, keep_blank_values=True):
        _insert(result, _split_key(key), value)
    return {key: _compact(value) for key, value in result.items()}


class UrlEncodedBodyMiddleware:
    """Fill request.state.body for form posts; every request gets at least {}."""

    def __init__(self, app: ASGIApp, limit: int = DEFAULT_LIMIT_BYTES):
        self.app = app
        self.limit = limit

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        state.setdefault("body", {})

        content_type = Headers(scope=scope).get("content-type", "")
        if content_type.split(";", 1)[0].strip().lower() != FORM_CONTENT_TYPE:
            await self.app(scope, receive, send)
            return

        chunks: list[bytes] = []
        size = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.limit:
                logger.warning(f"Rejected form body larger than {self.limit} bytes")
                response = PlainTextResponse("Payload Too Large", status_code=413)
                await response(scope, receive, send)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        state["body"] = parse_urlencoded(body.decode("utf-8", errors="replace"))

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)
