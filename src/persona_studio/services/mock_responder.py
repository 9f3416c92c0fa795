"""Templated stand-in for the conversational agent."""

import random
import re
from enum import Enum

_GREETING = re.compile(r"^(hi|hello|hey|good morning|good evening)")

ELABORATIONS = (
    " Based on my values and experiences, this matters a lot to me.",
    " It's something I'm passionate about.",
    " This is part of what drives my interest in this field.",
    " I've had to think carefully about this in my career.",
    " This connects to one of my core interests.",
)


class MessageCategory(str, Enum):
    GREETING = "greeting"
    QUESTION = "question"
    DEFAULT = "default"


def categorize(message: str) -> MessageCategory:
    if _GREETING.match(message.lower()):
        return MessageCategory.GREETING
    if message.rstrip().endswith("?"):
        return MessageCategory.QUESTION
    return MessageCategory.DEFAULT


def _templates(category: MessageCategory, persona_name: str | None) -> tuple[str, ...]:
    if category is MessageCategory.GREETING:
        return (
            f"Hi! I'm {persona_name or 'here'} to help. What would you like to know about me?",
            f"Hello! I'm {persona_name or 'your persona'}. What's on your mind?",
            "Hey! Great to connect with you. What can I tell you about myself?",
        )
    if category is MessageCategory.QUESTION:
        return (
            "That's a great question! Based on my background and experience, I think...",
            "Interesting question. Let me share my perspective on that...",
            "I've thought about this quite a bit. Here's what I believe...",
        )
    return (
        f"Thanks for sharing that. As {persona_name or 'someone'} with my background, I see it differently...",
        "That resonates with me. From my experience, I'd say...",
        "I appreciate your point of view. Here's how I tend to approach similar situations...",
    )


class MockResponder:
    """Picks a canned reply for the message category plus a random elaboration."""

    agent_name = "MockAgent"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def respond(self, message: str, persona_name: str | None = None) -> str:
        base = self.rng.choice(_templates(categorize(message), persona_name))
        return base + self.rng.choice(ELABORATIONS)
