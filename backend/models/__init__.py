"""Data models for the Estate Assistant chat widget."""
from .message import Message, USER, ASSISTANT, SENDERS

__all__ = [
    "Message",
    "USER",
    "ASSISTANT",
    "SENDERS",
]
