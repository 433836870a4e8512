"""
Notebook API - Request Dependencies
===================================

What:  FastAPI dependencies that hand per-process collaborators to handlers.
How:   `create_app()` stores the DocumentStore and TokenVerifier on `app.state`;
       these functions read them back for each request. Tests build an app
       around their own store/verifier and nothing here changes.
"""

import json
from typing import Any, Dict

from fastapi import Request

from notebook_api.database import DocumentStore
from notebook_api.exceptions import ValidationError
from notebook_api.services.identity import TokenVerifier


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_verifier(request: Request) -> TokenVerifier:
    return request.app.state.verifier


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON and cannot be stored faithfully
    raise ValueError(f"Unsupported JSON constant {name}")


async def document_body(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a JSON object.

    Declared after `authorize` in route signatures, so the body is only read
    once the caller is authenticated.

    Raises:
        ValidationError: the body is not valid JSON or not a JSON object (→ 400)
    """
    try:
        payload = json.loads(await request.body(), parse_constant=_reject_constant)
    except ValueError:
        raise ValidationError(message="Request body must be a JSON object") from None
    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return payload
