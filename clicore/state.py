"""Notification suppression state shared by the interpreter and its commands."""

from dataclasses import dataclass, fields

__all__ = [
    "NotificationState",
]


@dataclass
class NotificationState:
    """Notifications a running command may ask to suppress.

    A command registered with ``suppress_notification="user_selected_context"``
    runs with that flag raised; observers check it before notifying.
    """

    user_selected_context: bool = False  # inferior, thread or frame selection

    @classmethod
    def flag_names(cls) -> frozenset[str]:
        """Return the names of the known notification flags."""
        return frozenset(f.name for f in fields(cls))
