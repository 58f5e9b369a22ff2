import secrets
import threading
from collections.abc import Callable
from datetime import datetime

import structlog

from powerdash.core.core import Service
from powerdash.core.db import Database
from powerdash.core.modules.session.models import SESSION_TTL, AuthToken, Session
from powerdash.errors import AuthenticationError
from powerdash.utils import now, token_prefix

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions.

    Sessions live in a lock-guarded map owned by this service and are lost on restart.
    """

    def __init__(self, database: Database, clock: Callable[[], datetime] = now) -> None:
        super().__init__(database)
        self.clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[AuthToken, Session] = {}

    def create_session(self, user_id: int) -> Session:
        created_at = self.clock()
        with self._lock:
            self._purge_expired(created_at)
            auth_token = AuthToken(secrets.token_urlsafe(32))
            while auth_token in self._sessions:
                auth_token = AuthToken(secrets.token_urlsafe(32))
            session = Session(
                user_id=user_id,
                auth_token=auth_token,
                created_at=created_at,
                expires_at=created_at + SESSION_TTL,
            )
            self._sessions[auth_token] = session
        logger.debug("session_created", user_id=user_id, token=token_prefix(auth_token))
        return session

    def validate(self, auth_token: AuthToken | None) -> int:
        """Return the owning user ID of a live session.

        Raises:
            AuthenticationError: If the token is missing, unknown, expired, or its user is gone
        """
        if not auth_token:
            raise AuthenticationError("Not authenticated")

        with self._lock:
            session = self._sessions.get(auth_token)
            if session is not None and session.is_expired(self.clock()):
                del self._sessions[auth_token]
                logger.debug("session_expired", user_id=session.user_id, token=token_prefix(auth_token))
                session = None

        if session is None:
            raise AuthenticationError("Invalid or expired session")

        if not self.core.services.user.has_user(session.user_id):
            self.invalidate_session(auth_token)
            raise AuthenticationError("Invalid or expired session")

        return session.user_id

    def is_auth_token_valid(self, auth_token: AuthToken | None) -> bool:
        try:
            self.validate(auth_token)
        except AuthenticationError:
            return False
        return True

    def invalidate_session(self, auth_token: AuthToken | None) -> None:
        """Invalidate a session. Unknown or missing tokens are ignored."""
        if not auth_token:
            return
        with self._lock:
            session = self._sessions.pop(auth_token, None)
        if session is not None:
            logger.debug("session_invalidated", user_id=session.user_id, token=token_prefix(auth_token))

    def _purge_expired(self, at: datetime) -> None:
        expired = [token for token, session in self._sessions.items() if session.is_expired(at)]
        for token in expired:
            del self._sessions[token]
