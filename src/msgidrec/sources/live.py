"""In-memory scheduler sessions.

Concrete implementation of the live session provider: the uncommitted
telemetry messages of each data stream, plus which stream is being edited.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from msgidrec.models.records import LiveMessage

__all__ = ["SchedulerSession", "SchedulerSessions", "iter_message_ids"]


@dataclass
class SchedulerSession:
    """Messages of one data stream held by an open scheduler.

    Attributes
    ----------
    rate_name : str
        Rate column the stream is scheduled on.
    messages : list[LiveMessage]
        Current (possibly unsaved) messages.
    """

    rate_name: str
    messages: list[LiveMessage] = field(default_factory=list)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SchedulerSession":
        """Create a session from its JSON representation."""
        return SchedulerSession(
            rate_name=data["rate"],
            messages=[_message_from_dict(m) for m in data.get("messages", [])],
        )


@dataclass
class SchedulerSessions:
    """All sessions of an open scheduler.

    Attributes
    ----------
    sessions : list[SchedulerSession]
        One session per data stream.
    active_index : int | None
        Index of the session currently being edited.
    """

    sessions: list[SchedulerSession] = field(default_factory=list)
    active_index: int | None = None

    def __post_init__(self) -> None:
        if self.active_index is not None and not 0 <= self.active_index < len(self.sessions):
            raise ValueError(
                f"active_index {self.active_index} out of range for {len(self.sessions)} sessions"
            )

    @property
    def active_session(self) -> SchedulerSession | None:
        if self.active_index is None:
            return None
        return self.sessions[self.active_index]

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "SchedulerSessions":
        """Create the session set from its JSON representation."""
        return SchedulerSessions(
            sessions=[SchedulerSession.from_dict(s) for s in data.get("sessions", [])],
            active_index=data.get("active"),
        )


def _message_from_dict(data: dict[str, Any]) -> LiveMessage:
    return LiveMessage(
        name=data["name"],
        id=data.get("id", ""),
        sub_messages=[_message_from_dict(s) for s in data.get("sub_messages", [])],
    )


def iter_message_ids(messages: Sequence[LiveMessage]) -> Iterator[tuple[str, str]]:
    """Yield ``(name, id)`` for each message and sub-message with an ID.

    Messages come before their own sub-messages.
    """
    for message in messages:
        if message.id.strip():
            yield message.name, message.id
        for sub_message in message.sub_messages:
            if sub_message.id.strip():
                yield sub_message.name, sub_message.id
