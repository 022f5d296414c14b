from __future__ import annotations

import json
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl

from fastapi import Request

from ...domain.value_objects import TokenRequest

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _parse_body(raw: bytes, content_type: str) -> Optional[Mapping[str, Any]]:
    """
    Parse a request body the way a body-parsing middleware would:

      - no body           -> {}
      - JSON object       -> dict
      - urlencoded form   -> dict (last value wins)
      - anything else     -> None (no parsed body)
    """
    if not raw:
        return {}

    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == JSON_CONTENT_TYPE or media_type.endswith("+json"):
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    if media_type == FORM_CONTENT_TYPE:
        try:
            return dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
        except UnicodeDecodeError:
            return None

    return None


async def build_token_request(request: Request) -> TokenRequest:
    """
    Adapt a FastAPI / Starlette request into a TokenRequest.

    Header lookups stay case-insensitive (Starlette's Headers mapping).
    """
    raw = await request.body()
    return TokenRequest(
        query=dict(request.query_params),
        body=_parse_body(raw, request.headers.get("content-type", "")),
        headers=request.headers,
    )
