from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthSession:
    """What the identity provider hands back after sign-in or sign-up.

    Stored in the Flask session cookie, so it only holds plain values.
    """

    user_id: str
    email: str
    display_name: str = ""
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.email

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["AuthSession"]:
        if not data or not data.get("user_id"):
            return None
        return cls(
            user_id=str(data["user_id"]),
            email=str(data.get("email") or ""),
            display_name=str(data.get("display_name") or ""),
            id_token=data.get("id_token"),
            refresh_token=data.get("refresh_token"),
        )
