"""Services for the Estate Assistant chat widget."""
from .response_generator import ResponseGenerator, ResponseMatch
from .conversation_engine import ConversationEngine

__all__ = ['ResponseGenerator', 'ResponseMatch', 'ConversationEngine']
