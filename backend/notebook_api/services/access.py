"""
Notebook API - Access Scoping
=============================

What:  The single authorization policy applied to every resource operation.
How:   `authorize()` is a FastAPI dependency that authenticates the request and
       yields the subject id. `scoped_filter()` combines that subject id with
       any resource-identifying constraint, so a store query built from it can
       never match a document owned by someone else.
Who:   `authorize` is declared by every protected route; `scoped_filter`,
       `parse_document_id` and `strip_owner_fields` are used by ResourceService.

Request states:
    Unauthenticated ── header ok & token valid ──▶ Authenticated(subject) ──▶ Responded
           │                       │
           │ no/malformed header   │ verification failed
           ▼                       ▼
    MissingCredential (401)   InvalidCredential (403)

    Both failure states are terminal and are reached before any store access.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from notebook_api.dependencies import get_verifier
from notebook_api.exceptions import AuthMissingError, InvalidIdentifierError
from notebook_api.middleware.request_id import request_id_var
from notebook_api.services.identity import TokenVerifier

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

OWNER_FIELD = "owner"

# Fields a caller may never set: the id is store-assigned, the owner comes
# from the verified token. `userId` is accepted as an owner alias by clients.
RESERVED_FIELDS = frozenset({"id", "_id", OWNER_FIELD, "userId"})


async def authorize(
    request: Request,
    verifier: TokenVerifier = Depends(get_verifier),
) -> str:
    """
    Authenticate the request and return the caller's subject id.

    On success the subject id and the full Identity are attached to
    `request.state` for the rest of the request.

    Raises:
        AuthMissingError: header absent, not `Bearer <credential>`, or empty credential
        AuthInvalidError: the credential failed verification
    """
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        raise AuthMissingError()

    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthMissingError()

    identity = await verifier.verify(token)

    request.state.subject_id = identity.subject
    request.state.identity = identity
    logger.debug("[%s] Authenticated subject %s", request_id_var.get(""), identity.subject)
    return identity.subject


def scoped_filter(subject_id: str, extra_filter: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge an ownership constraint into `extra_filter`.

    The owner constraint is applied last, so an `owner` key in
    `extra_filter` can never widen the query to another subject.

    Example:
        scoped_filter("u1", {"id": oid}) == {"id": oid, "owner": "u1"}
    """
    scoped = dict(extra_filter or {})
    scoped[OWNER_FIELD] = subject_id
    return scoped


def parse_document_id(raw_id: str, resource: str) -> uuid.UUID:
    """
    Parse a path id in its canonical string form.

    Only the lowercase-or-uppercase hyphenated 36-character form is accepted;
    braces, `urn:uuid:` prefixes and bare hex are rejected like any other
    malformed id.

    Raises:
        InvalidIdentifierError: `raw_id` is not a canonical document id (→ 400)
    """
    try:
        parsed = uuid.UUID(raw_id)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(resource=resource, raw_id=raw_id) from None
    if str(parsed) != raw_id.lower():
        raise InvalidIdentifierError(resource=resource, raw_id=raw_id)
    return parsed


def strip_owner_fields(body: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of `body` without the reserved id/owner fields."""
    dropped = RESERVED_FIELDS.intersection(body)
    if dropped:
        logger.debug("Ignoring reserved fields in request body: %s", sorted(dropped))
    return {key: value for key, value in body.items() if key not in RESERVED_FIELDS}
