"""CollabPortal - brand and influencer collaboration portal.

Admins invite creators, publish sponsorship proposals to selected users or
tags and review the responses; creators accept or decline from their
dashboard and talk to the admins in per-proposal chats.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
