"""Unit tests for token generation."""

import re

from collabportal.domain.services.token_issuer import issue_invitation_token, issue_reset_token

HEX = re.compile(r"^[0-9a-f]+$")


def test_invitation_token_is_six_hex_chars():
    token = issue_invitation_token()
    assert len(token) == 6
    assert HEX.match(token)


def test_reset_token_is_eight_hex_chars():
    token = issue_reset_token()
    assert len(token) == 8
    assert HEX.match(token)


def test_tokens_vary_between_calls():
    """Successive tokens should not all be identical."""
    tokens = {issue_reset_token() for _ in range(20)}
    assert len(tokens) > 1
