"""Short-lived credential token generation.

Tokens are short hex strings meant to be typed or pasted from an email.
Collisions are not checked; lookups always pair the token with an email.
"""

import secrets

INVITATION_TOKEN_BYTES = 3
RESET_TOKEN_BYTES = 4


def issue_invitation_token() -> str:
    """Return a 6-character lowercase hex invitation token."""
    return secrets.token_hex(INVITATION_TOKEN_BYTES)


def issue_reset_token() -> str:
    """Return an 8-character lowercase hex password reset token."""
    return secrets.token_hex(RESET_TOKEN_BYTES)
