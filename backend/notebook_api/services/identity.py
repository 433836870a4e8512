"""
Notebook API - Identity Verifier
================================

What:  Turns a bearer credential into a verified subject identifier.
How:   python-jose `jwt.decode` checks the signature against the configured
       signing material (HMAC secret or issuer public key), then the `exp`,
       `nbf`, `iss` and `aud` claims. The `sub` claim becomes the subject id.
Who:   Called by `authorize()` in services/access.py for every protected route.

Failure semantics:
    Any verification problem raises AuthInvalidError (→ 403). The reason is
    kept in the exception context for the server log; the client only ever
    sees "Invalid token". A server with no signing material rejects every
    token instead of trusting unsigned ones.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from notebook_api.exceptions import AuthInvalidError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """A verified caller: the stable subject id plus the raw token claims."""

    subject: str
    claims: Dict[str, Any] = field(default_factory=dict)


class TokenVerifier:
    """
    Verifies JWT bearer credentials issued by a trusted identity provider.

    Args:
        secret:      Shared HMAC key (HS256/HS384/HS512)
        public_key:  PEM public key (RS*/ES*/PS*); preferred over `secret` when both are set
        algorithms:  Accepted `alg` values; tokens signed otherwise are rejected
        issuer:      Expected `iss`, or None to skip the check
        audience:    Expected `aud`, or None to skip the check
        leeway:      Seconds of clock skew tolerated on `exp`/`nbf`
    """

    def __init__(
        self,
        secret: str = "",
        public_key: str = "",
        algorithms: Optional[List[str]] = None,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        leeway: int = 0,
    ):
        self._key = public_key or secret
        self.algorithms = algorithms or ["HS256"]
        self.issuer = issuer
        self.audience = audience
        self.leeway = leeway

    @classmethod
    def from_settings(cls, settings) -> "TokenVerifier":
        return cls(
            secret=settings.jwt_secret,
            public_key=settings.jwt_public_key,
            algorithms=settings.jwt_algorithms_list,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            leeway=settings.jwt_leeway_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self._key)

    async def verify(self, token: str) -> Identity:
        """
        Verify `token` and return the caller's identity.

        Raises:
            AuthInvalidError: the token is not a valid credential from the trusted issuer
        """
        if not self.configured:
            raise AuthInvalidError(reason="no signing material configured")

        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_aud": self.audience is not None,
                    "leeway": self.leeway,
                },
            )
        except ExpiredSignatureError:
            raise AuthInvalidError(reason="token expired") from None
        except JWTError as e:
            raise AuthInvalidError(reason=str(e) or type(e).__name__) from None

        subject = claims.get("sub")
        if not subject or not isinstance(subject, str):
            raise AuthInvalidError(reason="token has no subject")

        return Identity(subject=subject, claims=claims)
