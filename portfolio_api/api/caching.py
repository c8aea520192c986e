"""ETag revalidation for public read endpoints."""

import hashlib
from typing import Any

from fastapi import Request, Response

from portfolio_api.services.kv_store import serialize_value

CACHE_CONTROL = "public, no-cache, must-revalidate"


def generate_etag(content: str) -> str:
    return hashlib.sha1(content.encode("utf-8")).hexdigest()


def _normalize(tag: str) -> str:
    if tag.startswith("W/"):
        tag = tag[2:]
    return tag.replace('"', "")


def etag_response(request: Request, payload: Any) -> Response:
    """JSON response carrying an ETag; 304 when If-None-Match already matches"""
    body = serialize_value(payload)
    etag = generate_etag(body)
    headers = {"ETag": f'"{etag}"', "Cache-Control": CACHE_CONTROL}

    if_none_match = request.headers.get("if-none-match")
    if if_none_match and _normalize(if_none_match) == etag:
        return Response(status_code=304, headers=headers)

    return Response(content=body, media_type="application/json", headers=headers)
