import threading

import bcrypt
import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from powerdash.core.core import Service
from powerdash.core.db import Database
from powerdash.core.modules.user.models import User
from powerdash.core.modules.user.validators import MAX_PASSWORD_BYTES, validate_password, validate_username
from powerdash.errors import AlreadyInitializedError, InvalidCredentialsError, NotFoundError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Stores users in the embedded database and guards first-run registration.

    Methods are blocking (SQLite and bcrypt) and safe to call from worker threads.
    """

    def __init__(self, database: Database) -> None:
        super().__init__(database)
        self._register_lock = threading.Lock()

    def has_any_user(self) -> bool:
        """Check if at least one user is registered."""
        with self.database.session_scope() as session:
            return session.scalar(select(func.count()).select_from(User)) > 0

    def has_user(self, user_id: int) -> bool:
        """Check if user exists by ID."""
        with self.database.session_scope() as session:
            return session.get(User, user_id) is not None

    def register(self, username: str, password: str, confirm_password: str | None = None) -> User:
        """Create the first and only self-registered user.

        Raises:
            AlreadyInitializedError: If any user already exists
            ValidationError: If username or password is invalid
        """
        with self._register_lock:
            if self.has_any_user():
                raise AlreadyInitializedError

            validate_username(username)
            validate_password(password, confirm_password)
            password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

            try:
                with self.database.session_scope() as session:
                    # The database file may be shared with another process
                    if session.scalar(select(func.count()).select_from(User)) > 0:
                        raise AlreadyInitializedError
                    user = User(username=username, password_hash=password_hash)
                    session.add(user)
            except IntegrityError as e:
                raise AlreadyInitializedError from e

        logger.info("user_registered", user_id=user.id, username=username)
        return user

    def verify(self, username: str, password: str) -> User:
        """Verify password against stored hash.

        Raises:
            NotFoundError: If no user has this username
            InvalidCredentialsError: If the password does not match
        """
        with self.database.session_scope() as session:
            user = session.scalars(select(User).where(User.username == username)).one_or_none()
        if user is None:
            raise NotFoundError(f"User '{username}' not found")

        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES or not bcrypt.checkpw(encoded, user.password_hash.encode("utf-8")):
            raise InvalidCredentialsError
        return user

    async def on_start(self) -> None:
        """Create the schema and report how many users exist."""
        self.database.create_schema()
        with self.database.session_scope() as session:
            user_count = session.scalar(select(func.count()).select_from(User))
        logger.info("user_service_started", user_count=user_count, registration_open=user_count == 0)
