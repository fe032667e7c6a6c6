"""Document id generation."""

import secrets
import string

from slate_clone.core.constants import AUTO_ID_LENGTH

_ALPHABET = string.ascii_letters + string.digits


def auto_id() -> str:
    """Return a random 20 character alphanumeric document id."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(AUTO_ID_LENGTH))
