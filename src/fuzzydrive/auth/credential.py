"""OAuth credential record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class Credential:
    """
    Access token plus the data needed to renew it.

    A credential is replaced wholesale on refresh or re-authorization; use
    `with_refresh_token` to carry the previous refresh token forward.
    """

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: int = 0
    token_type: str = "Bearer"

    def __post_init__(self) -> None:
        if not isinstance(self.access_token, str) or not self.access_token:
            raise ValueError("Credential.access_token must be a non-empty string")

    def with_refresh_token(self, refresh_token: Optional[str]) -> Credential:
        """Return a copy whose refresh token falls back to `refresh_token`."""
        if self.refresh_token:
            return self
        return Credential(
            access_token=self.access_token,
            refresh_token=refresh_token,
            expires_in=self.expires_in,
            token_type=self.token_type,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "token_type": self.token_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credential:
        refresh_token = data.get("refresh_token")
        return cls(
            access_token=data["access_token"],
            refresh_token=refresh_token if isinstance(refresh_token, str) else None,
            expires_in=int(data.get("expires_in") or 0),
            token_type=str(data.get("token_type") or "Bearer"),
        )
