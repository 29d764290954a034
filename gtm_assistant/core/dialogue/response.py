"""
Response templates for the GTM assistant.

Every user-visible sentence the dialogue manager emits comes from here.
Failure messages are fixed text; nothing from a renderer or an exception
is ever interpolated into them.
"""

import random
from typing import Optional

from gtm_assistant.core.intelligence.slots.types import SlotName


GREETINGS: tuple[str, ...] = (
    "Hello! I'm your expert AI assistant for the e& GTM team. It's wonderful to meet you!",
    "Good day! I'm your dedicated sales enablement specialist. How may I assist you today?",
    "Welcome! I'm your intelligent partner for all things e& business solutions. What can I help you with?",
    "Hello there! I'm your expert guide through e&'s products and services. How can I make your day more productive?",
)

# Capability groups shown for capability queries and the status endpoint
CAPABILITIES: dict[str, tuple[str, ...]] = {
    "Content Generation & Marketing Assets": (
        "Product brochures, white papers, and fact sheets",
        "Competitive battlecards and customer success stories",
        "Industry-specific playbooks and solution blueprints",
    ),
    "Visual Content Creation": (
        "Professional images and infographics",
        "Product visualizations and business diagrams",
        "Industry-specific visual representations",
    ),
    "Market Intelligence & Analysis": (
        "UAE B2B market insights and trends",
        "Industry analysis and competitive intelligence",
        "Sector-specific solution mapping",
    ),
    "Sales Enablement Support": (
        "EDM and SMS campaign creation",
        "Event landing pages and digital invitations",
        "Speaker bios and welcome notes",
    ),
}

SLOT_QUESTIONS: dict[SlotName, str] = {
    SlotName.SUBJECT: (
        "What specific product or service would you like to visualize? "
        "(e.g., Business Pro Fiber, Mobile POS, Security Solutions)"
    ),
    SlotName.DOMAIN_CONTEXT: (
        "What industry or business context should this represent? "
        "(e.g., retail, healthcare, tech/telecom, SMB)"
    ),
}


class ResponseGenerator:
    """Template-based replies; no I/O."""

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize generator.

        Args:
            rng: Random source for greeting variety (seed it in tests)
        """
        self._rng = rng or random.Random()

    def greeting(self) -> str:
        """Generate greeting response."""
        return self._rng.choice(GREETINGS)

    def capabilities(self) -> str:
        """Summarize what the assistant can do."""
        lines = ["I'm your expert AI assistant for the e& GTM team. Here's what I can do for you:"]
        for group, items in CAPABILITIES.items():
            lines.append("")
            lines.append(f"**{group}**")
            lines.extend(f"• {item}" for item in items)
        lines.append("")
        lines.append("What would you like to work on today?")
        return "\n".join(lines)

    def insights_acknowledgment(self) -> str:
        """Acknowledge a market insights request."""
        return (
            "I will compile UAE B2B market insights with trends, drivers, "
            "and risks for the specified sector."
        )

    def questions(self, missing: list[SlotName]) -> str:
        """One bullet question per missing slot, in slot order.

        Args:
            missing: Slots still required

        Returns:
            Bullet list of questions
        """
        return "\n".join(f"• {SLOT_QUESTIONS[slot]}" for slot in missing)

    def gather(self, missing: list[SlotName]) -> str:
        """Open a clarification round for a new request."""
        return (
            "I'd be delighted to create a visual for you! To ensure I generate "
            "exactly what you need, I'd like to gather some details first:\n\n"
            f"{self.questions(missing)}\n\n"
            "Once I have these details, I'll hand the request to our visual "
            "specialist to create it."
        )

    def still_missing(self, missing: list[SlotName]) -> str:
        """Re-ask only the slots that are still open."""
        return (
            "Thank you for that information! I still need a few more details:\n\n"
            f"{self.questions(missing)}"
        )

    def executing(self, description: str, follow_up: bool = False) -> str:
        """Announce that the command is going to the renderer.

        Args:
            description: Plain-language description of the content
            follow_up: True when the request was completed over several turns

        Returns:
            Announcement text
        """
        if follow_up:
            opener = "Excellent! Now I have everything I need."
        else:
            opener = "Perfect! I have all the information I need."
        return f"{opener} I'm starting on it right away.\n\nCreating: {description}"

    def rendered(self, artifact_handle: str) -> str:
        """Generate response after a successful render."""
        return f"Your visual is ready: {artifact_handle}"

    def render_failed(self) -> str:
        """Generic apology after a renderer failure."""
        return (
            "I apologize, but I wasn't able to create that visual just now. "
            "Please try your request again in a moment."
        )

    def general(self) -> str:
        """Redirect to what the assistant can do."""
        return (
            "I understand you're looking for assistance. I'm here to help with "
            "content generation, visual creation, market analysis, and sales "
            "enablement for the e& GTM team.\n\n"
            "What specific task would you like to work on? I can create marketing "
            "materials, generate visuals, provide market insights, or help with "
            "any other e& business needs."
        )

    def capability_list(self) -> list[str]:
        """Flat capability list for status endpoints."""
        return [item for items in CAPABILITIES.values() for item in items]
