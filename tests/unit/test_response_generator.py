"""Tests for response templates."""

import random

import pytest

from gtm_assistant.core.dialogue.response import (
    CAPABILITIES,
    GREETINGS,
    SLOT_QUESTIONS,
    ResponseGenerator,
)
from gtm_assistant.core.intelligence.slots.types import SlotName


class TestResponseGenerator:
    """Test reply text."""

    @pytest.fixture
    def generator(self):
        return ResponseGenerator(rng=random.Random(7))

    def test_greeting(self, generator):
        assert generator.greeting() in GREETINGS

    def test_greeting_seeded(self):
        a = ResponseGenerator(rng=random.Random(1))
        b = ResponseGenerator(rng=random.Random(1))

        assert [a.greeting() for _ in range(5)] == [b.greeting() for _ in range(5)]

    def test_capabilities_lists_every_group(self, generator):
        message = generator.capabilities()

        for group in CAPABILITIES:
            assert group in message

    def test_questions_in_slot_order(self, generator):
        message = generator.questions([SlotName.SUBJECT, SlotName.DOMAIN_CONTEXT])
        lines = message.split("\n")

        assert lines == [
            f"• {SLOT_QUESTIONS[SlotName.SUBJECT]}",
            f"• {SLOT_QUESTIONS[SlotName.DOMAIN_CONTEXT]}",
        ]

    def test_gather_only_asks_missing(self, generator):
        message = generator.gather([SlotName.DOMAIN_CONTEXT])

        assert SLOT_QUESTIONS[SlotName.DOMAIN_CONTEXT] in message
        assert SLOT_QUESTIONS[SlotName.SUBJECT] not in message

    def test_still_missing(self, generator):
        message = generator.still_missing([SlotName.SUBJECT])

        assert SLOT_QUESTIONS[SlotName.SUBJECT] in message

    def test_executing(self, generator):
        first = generator.executing("a retail visual")
        follow_up = generator.executing("a retail visual", follow_up=True)

        assert "a retail visual" in first
        assert first != follow_up

    def test_rendered(self, generator):
        assert "https://cdn.example.com/a.png" in generator.rendered("https://cdn.example.com/a.png")

    def test_render_failed_is_generic(self, generator):
        message = generator.render_failed()

        assert "apologize" in message
        assert "try" in message

    def test_general(self, generator):
        assert generator.general()

    def test_capability_list(self, generator):
        items = generator.capability_list()

        assert len(items) == sum(len(group) for group in CAPABILITIES.values())
