"""Message data models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

USER = "user"
ASSISTANT = "assistant"
SENDERS = (USER, ASSISTANT)


@dataclass(frozen=True)
class Message:
    """
    A single turn in the chat log.

    Attributes:
        id: Per-session sequence number, strictly increasing, never reused
        text: Non-empty content; assistant text may contain "\\n" line breaks
        sender: Either "user" or "assistant"
        timestamp: Creation time, only used for display
    """
    id: int
    text: str
    sender: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.sender not in SENDERS:
            raise ValueError(f"Unknown sender {self.sender!r}, expected one of {SENDERS}")
        if not self.text:
            raise ValueError("Message text must not be empty")

    @property
    def is_user(self) -> bool:
        return self.sender == USER

    @property
    def is_assistant(self) -> bool:
        return self.sender == ASSISTANT

    def lines(self) -> List[str]:
        """Split the text into the lines a chat bubble renders."""
        return self.text.split("\n")

    def display_time(self) -> str:
        """Format the timestamp as HH:MM for the bubble footer."""
        return self.timestamp.strftime("%H:%M")
