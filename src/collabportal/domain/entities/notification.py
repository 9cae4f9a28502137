"""Notification entity types."""

from enum import Enum


class NotificationType(str, Enum):
    """How the client presents a notification."""

    INFO = "info"
    ACTION = "action"
    POPUP = "popup"
