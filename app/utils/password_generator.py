"""Random password generation for accounts created or reset on a user's behalf."""
import secrets
import string

SPECIAL_CHARACTERS = "@$!%*?&#^()"
PASSWORD_LENGTH = 10

_REQUIRED_POOLS = (string.ascii_lowercase, string.ascii_uppercase, string.digits, SPECIAL_CHARACTERS)
_ALLOWED = "".join(_REQUIRED_POOLS)


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    """Password with at least one character from every required pool, shuffled."""
    if length < len(_REQUIRED_POOLS):
        raise ValueError(f"Password length must be at least {len(_REQUIRED_POOLS)}")
    characters = [secrets.choice(pool) for pool in _REQUIRED_POOLS]
    characters += [secrets.choice(_ALLOWED) for _ in range(length - len(_REQUIRED_POOLS))]
    secrets.SystemRandom().shuffle(characters)
    return "".join(characters)
