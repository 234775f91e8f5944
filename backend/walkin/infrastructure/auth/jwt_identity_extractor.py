"""Bearer token → author claims, backed by PyJWT.

Signatures are verified against the configured secret unless
``verify_signature`` is turned off, in which case the payload is trusted
as-is (legacy behaviour, logged loudly at construction).

Expiry is checked here rather than by PyJWT so that the rule is the same in
both modes: a numeric ``exp`` strictly before now is expired, an ``exp``
that is not a Unix timestamp makes the token malformed.
"""

import logging
import math
import time
from collections.abc import Callable
from typing import Any

import jwt

from walkin.application.interfaces import IdentityExtractor
from walkin.domain.exceptions import (
    AuthenticationError,
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)

logger = logging.getLogger(__name__)

# Claims are returned untouched; only ``exp`` is interpreted, by _check_expiry
_NO_CLAIM_CHECKS = {
    "verify_exp": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_sub": False,
    "verify_jti": False,
}


class JwtIdentityExtractor(IdentityExtractor):
    """Infrastructure adapter implementing the IdentityExtractor port."""

    def __init__(
        self,
        secret: str,
        algorithms: list[str] | None = None,
        *,
        verify_signature: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret
        self._algorithms = list(algorithms or ["HS256"])
        self._verify_signature = verify_signature
        self._clock = clock

        if not verify_signature:
            logger.warning(
                "Bearer token signatures are NOT verified; token claims are trusted unchecked."
            )

    def extract_claims(self, token: str) -> dict[str, Any]:
        raw = (token or "").strip()
        if raw.count(".") != 2:
            raise MalformedTokenError("invalid token format")

        try:
            claims = jwt.decode(
                raw,
                key=self._secret if self._verify_signature else "",
                algorithms=self._algorithms,
                options={"verify_signature": self._verify_signature, **_NO_CLAIM_CHECKS},
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignatureError("token signature is invalid") from exc
        except jwt.DecodeError as exc:
            raise MalformedTokenError(f"failed to decode token: {exc}") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError(f"invalid token: {exc}") from exc

        self._check_expiry(claims)
        logger.debug("Extracted claims for uid=%s", claims.get("uid"))
        return claims

    def _check_expiry(self, claims: dict[str, Any]) -> None:
        exp = claims.get("exp")
        if exp is None:
            return
        if isinstance(exp, bool):
            raise MalformedTokenError("exp claim is not a Unix timestamp")
        try:
            exp_ts = float(exp)
        except (TypeError, ValueError) as exc:
            raise MalformedTokenError("exp claim is not a Unix timestamp") from exc
        if not math.isfinite(exp_ts):
            raise MalformedTokenError("exp claim is not a Unix timestamp")
        if exp_ts < self._clock():
            raise TokenExpiredError("token is expired")
