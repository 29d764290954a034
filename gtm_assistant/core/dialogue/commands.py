"""
Command translation.

Turns the text of a fully specified generation request into the
renderer's controlled vocabulary: a domain tag, an ordered element list
and a style. Deterministic keyword-to-tag tables, first match wins for
the domain and subject.
"""

import logging
from typing import Optional

from gtm_assistant.core.intelligence.matching import contains_any
from gtm_assistant.core.intelligence.session.models import StructuredCommand

logger = logging.getLogger(__name__)


# Closed vocabularies understood by the renderer
DOMAINS: frozenset[str] = frozenset({
    "tech_telecom",
    "retail",
    "healthcare",
    "education",
    "finance",
    "manufacturing",
    "government",
    "hospitality",
    "logistics",
    "real_estate",
})

ELEMENTS: frozenset[str] = frozenset({
    "office_building",
    "network",
    "router",
    "wifi_signal",
    "smartphone",
    "server",
    "cloud",
    "security_shield",
    "analytics_dashboard",
    "chart",
    "retail_store",
    "hospital",
    "school",
    "payment_terminal",
    "data_center",
    "tower",
    "laptop",
})

STYLES: frozenset[str] = frozenset({
    "professional_b2b",
    "corporate_layout",
})

DEFAULT_DOMAIN = "tech_telecom"
DEFAULT_STYLE = "professional_b2b"
DEFAULT_SUBJECT = "business solution"

# Always present: B2B framing
BASE_ELEMENT = "office_building"

# (keywords, domain); connectivity products pin the telecom domain first
DOMAIN_RULES: list[tuple[tuple[str, ...], str]] = [
    (("business pro", "fiber", "internet"), "tech_telecom"),
    (("retail",), "retail"),
    (("healthcare",), "healthcare"),
    (("education",), "education"),
    (("finance",), "finance"),
    (("manufacturing",), "manufacturing"),
    (("government",), "government"),
    (("hospitality",), "hospitality"),
    (("logistics",), "logistics"),
    (("real estate",), "real_estate"),
    (("telecom", "technology"), "tech_telecom"),
]

DOMAIN_ELEMENTS: dict[str, tuple[str, ...]] = {
    "retail": ("retail_store",),
    "healthcare": ("hospital",),
    "education": ("school",),
    "finance": ("payment_terminal",),
}

# (keywords, elements added when any keyword is present)
ELEMENT_RULES: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (("business pro", "fiber", "internet", "connectivity"), ("network", "router", "wifi_signal", "server")),
    (("mobile", "phone", "pos"), ("smartphone", "network")),
    (("security", "protection"), ("security_shield", "server")),
    (("cloud", "microsoft"), ("cloud", "server")),
    (("analytics", "data"), ("analytics_dashboard", "chart")),
]

# (keywords, subject label, user-facing description)
SUBJECT_RULES: list[tuple[tuple[str, ...], str, str]] = [
    (
        ("business pro fiber",),
        "Business Pro Fiber",
        "a professional visualization of Business Pro Fiber internet "
        "connectivity solution for tech/telecom businesses",
    ),
    (
        ("mobile pos",),
        "Mobile POS",
        "a retail-focused visualization of Mobile POS payment solution",
    ),
    (
        ("security",),
        "Security Solutions",
        "a security-focused business solution visualization",
    ),
    (
        ("cloud",),
        "Cloud Services",
        "a cloud services business solution visualization",
    ),
    (
        ("analytics",),
        "Analytics",
        "an analytics and data business solution visualization",
    ),
]

DEFAULT_DESCRIPTION = "a professional business solution visualization based on your requirements"


class CommandTranslator:
    """Maps request text onto a StructuredCommand."""

    def __init__(self, default_domain: str = DEFAULT_DOMAIN, style: str = DEFAULT_STYLE):
        if default_domain not in DOMAINS:
            raise ValueError(f"Unknown domain: {default_domain}")
        if style not in STYLES:
            raise ValueError(f"Unknown style: {style}")
        self._default_domain = default_domain
        self._style = style

    def translate(self, text: str) -> StructuredCommand:
        """
        Build the renderer command for a request.

        Args:
            text: Request text (original utterance plus any follow-ups)

        Returns:
            StructuredCommand in the renderer's vocabulary
        """
        domain = self.infer_domain(text)
        command = StructuredCommand(
            subject=self.infer_subject(text),
            domain=domain,
            elements=self.infer_elements(text, domain),
            style=self._style,
        )
        logger.debug(f"Translated command: {command.to_prompt()}")
        return command

    def infer_domain(self, text: str) -> str:
        """First matching domain rule, else the default domain."""
        for keywords, domain in DOMAIN_RULES:
            if contains_any(text, keywords):
                return domain
        return self._default_domain

    def infer_elements(self, text: str, domain: str) -> list[str]:
        """Base element, then domain defaults, then keyword elements; no duplicates."""
        elements = [BASE_ELEMENT]
        elements.extend(DOMAIN_ELEMENTS.get(domain, ()))
        for keywords, triggered in ELEMENT_RULES:
            if contains_any(text, keywords):
                elements.extend(triggered)
        return list(dict.fromkeys(elements))

    def infer_subject(self, text: str) -> str:
        rule = self._subject_rule(text)
        return rule[1] if rule else DEFAULT_SUBJECT

    def describe(self, text: str) -> str:
        """Plain-language description of what will be produced."""
        rule = self._subject_rule(text)
        return rule[2] if rule else DEFAULT_DESCRIPTION

    def _subject_rule(self, text: str) -> Optional[tuple[tuple[str, ...], str, str]]:
        for rule in SUBJECT_RULES:
            if contains_any(text, rule[0]):
                return rule
        return None
