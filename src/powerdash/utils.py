from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def token_prefix(token: str) -> str:
    """Shorten a secret token for log output."""
    return f"{token[:8]}..."
