from powerdash.errors import ValidationError

MAX_PASSWORD_BYTES = 72


def validate_username(username: str) -> str:
    """Validate username and return it unchanged.

    Usernames are case-sensitive and stored as given; a name made only of
    whitespace is rejected.

    Raises:
        ValidationError: If username is empty
    """
    if not username.strip():
        raise ValidationError("Username and password are required")
    return username


def validate_password(password: str, confirm_password: str | None = None) -> None:
    """Validate password meets requirements.

    Requirements:
    - Not empty
    - At most 72 bytes when encoded, the bcrypt input limit
    - Equal to confirm_password when one is given

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password:
        raise ValidationError("Username and password are required")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

    if confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords do not match")
