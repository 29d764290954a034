"""
GTM Assistant Tests

Unit tests live in tests/unit; tests/test_chat_api.py drives the FastAPI
app through its lifespan with an in-memory session store.

Running Tests:
    # Install with test extras
    pip install -e ".[test]"

    # Run everything
    pytest tests -v

    # Run the dialogue flow tests only
    pytest tests/unit/test_dialogue_manager.py -v

Test Coverage:
    - Intent classification and keyword matching
    - Slot gating (permissive and strict vocabularies)
    - Stage machine, dialogue context and session store backends
    - Command translation and response templates
    - Renderer client and failure handling
    - Chat, session and health endpoints
"""
