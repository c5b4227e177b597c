import re

from storefront.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_RE = re.compile(r"^[a-zA-ZąćęłńóśźżĄĆĘŁŃÓŚŹŻ\s\-']+$")
MIN_PASSWORD_LENGTH = 8


def validate_email(email: str) -> None:
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError("Invalid email format")


def validate_password(password: str, confirm_password: str) -> None:
    """Validate a new password.

    Requirements:
    - Matches the confirmation
    - Minimum length of 8 characters
    - At least one uppercase letter, one lowercase letter and one digit

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if password != confirm_password:
        raise ValidationError("Passwords do not match")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if not (re.search(r"[A-Z]", password) and re.search(r"[a-z]", password) and re.search(r"\d", password)):
        raise ValidationError("Password must contain uppercase letters, lowercase letters and digits")


def validate_name(name: str) -> None:
    if not NAME_RE.fullmatch(name):
        raise ValidationError("First and last name may contain only letters")
