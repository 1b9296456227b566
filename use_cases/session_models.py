"""Session DTOs shared across application layers."""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    email: str
    expires_at: datetime


# A decoded session carries exactly the signed claims.
Session = SessionClaims


@dataclass(frozen=True)
class AuthResult:
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["error"] is None:
            data.pop("error")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthResult":
        return cls(success=bool(data.get("success")), error=data.get("error"))


def session_to_dict(session: Session) -> Dict[str, Any]:
    return {
        "userId": session.user_id,
        "email": session.email,
        "expiresAt": session.expires_at.isoformat(),
    }
