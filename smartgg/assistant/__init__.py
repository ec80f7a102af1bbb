"""Module assistant - conversation, contexte joueur et réponses locales."""

from smartgg.assistant.context import AssistantContextCache
from smartgg.assistant.conversation import Assistant, Conversation, greeting_text
from smartgg.assistant.fallback import (
    FallbackCategory,
    classify_message,
    fallback_insights,
    fallback_reply,
)

__all__ = [
    "Assistant",
    "AssistantContextCache",
    "Conversation",
    "greeting_text",
    "FallbackCategory",
    "classify_message",
    "fallback_insights",
    "fallback_reply",
]
