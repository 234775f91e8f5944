"""Abstract interface (port) for turning a bearer token into trusted claims."""

from abc import ABC, abstractmethod
from typing import Any

from walkin.domain.entities import Authenticated, AuthenticationResult, Rejected
from walkin.domain.exceptions import AuthenticationError


class IdentityExtractor(ABC):
    """Port for bearer-token authentication, implemented in the infrastructure layer."""

    @abstractmethod
    def extract_claims(self, token: str) -> dict[str, Any]:
        """Return the token's claims unmodified.

        Raises:
            MalformedTokenError: not a three-segment token with a JSON object payload.
            TokenExpiredError: ``exp`` lies in the past.
            InvalidSignatureError: the signature does not verify.
        """
        ...

    def authenticate(self, token: str) -> AuthenticationResult:
        """Single entry point with two outcomes: ``Authenticated`` or ``Rejected``."""
        try:
            return Authenticated(claims=self.extract_claims(token))
        except AuthenticationError as exc:
            return Rejected(reason=exc.reason, error=exc)
