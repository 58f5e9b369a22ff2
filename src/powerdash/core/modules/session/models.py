"""Session management models."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import NewType

AuthToken = NewType("AuthToken", str)

# Absolute lifetime of a session; activity does not extend it.
SESSION_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class Session:
    """User authentication session, held in memory only."""

    user_id: int
    auth_token: AuthToken
    created_at: datetime
    expires_at: datetime

    def is_expired(self, at: datetime) -> bool:
        return at >= self.expires_at
