"""Outcome of authenticating a bearer token."""

from dataclasses import dataclass
from typing import Any

from walkin.domain.exceptions import AuthenticationError


@dataclass(frozen=True)
class Authenticated:
    claims: dict[str, Any]

    @property
    def uid(self) -> Any:
        return self.claims.get("uid")


@dataclass(frozen=True)
class Rejected:
    reason: str
    error: AuthenticationError


AuthenticationResult = Authenticated | Rejected
