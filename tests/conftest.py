"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from records_intel.llm.client import LLMResponse
from records_intel.storage.database import create_session_factory


class FakeChatClient:
    """Scripted stand-in for the chat client.

    Each call consumes the next scripted item: an exception is raised, a
    string is returned as the response content. The last item repeats once
    the script runs out.
    """

    def __init__(self, script, model_name="fake-model", prompt_tokens=1000, completion_tokens=200):
        self.script = list(script)
        self.model_name = model_name
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.calls = []

    def complete(self, messages):
        self.calls.append(messages)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return LLMResponse(
            content=item,
            model=self.model_name,
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
        )


@pytest.fixture
def scenario_text() -> str:
    """Short document text naming two known persons, a date and a place."""
    return "Jeffrey Epstein met with Ghislaine Maxwell on January 5, 2005 in Palm Beach."


@pytest.fixture
def long_document_text() -> str:
    """Document text long enough to pass the minimum length filter."""
    return (
        "Page 1 Deposition of a witness taken under oath. "
        "The witness described visits by Jeffrey Epstein to the residence. "
        + "The witness answered further questions about the schedule. " * 5
        + "Page 2 Ghislaine Maxwell was present at several of the visits in Palm Beach. "
        + "Counsel asked about travel arrangements and staff. " * 5
    )


@pytest.fixture
def valid_response_payload() -> dict:
    """A model response that satisfies the response schema."""
    return {
        "documentType": "deposition",
        "dateOriginal": "2005-01-05",
        "summary": "Deposition excerpt describing visits to the residence.",
        "persons": [
            {
                "name": "Jeffrey Epstein",
                "role": "Subject",
                "category": "key figure",
                "context": "Visited the residence",
                "mentionCount": 2,
            },
            {
                "name": "Ghislaine Maxwell",
                "role": "Associate",
                "category": "associate",
                "context": "Present during visits",
                "mentionCount": 1,
            },
        ],
        "connections": [
            {
                "person1": "Jeffrey Epstein",
                "person2": "Ghislaine Maxwell",
                "relationshipType": "associate",
                "description": "Seen together at the residence",
                "strength": 4,
            }
        ],
        "events": [
            {
                "date": "2005-01-05",
                "title": "Residence visit",
                "description": "Visit described by the witness",
                "category": "meeting",
                "significance": 3,
                "personsInvolved": ["Jeffrey Epstein", "Ghislaine Maxwell"],
            }
        ],
        "locations": ["Palm Beach"],
        "keyFacts": ["Visits occurred in January 2005"],
    }


@pytest.fixture
def valid_response(valid_response_payload) -> str:
    """Valid response serialized the way a model returns it."""
    return json.dumps(valid_response_payload)


@pytest.fixture
def fake_client_factory():
    """Build scripted fake chat clients."""
    return FakeChatClient


@pytest.fixture
def session_factory(tmp_path: Path):
    """SQLite session factory with all tables created."""
    return create_session_factory(f"sqlite:///{tmp_path / 'records.db'}")


@pytest.fixture
def write_extracted(tmp_path: Path):
    """Write an extracted document JSON file below ``tmp_path/extracted``."""
    root = tmp_path / "extracted"

    def _write(relative_path: str, text: str, **fields) -> Path:
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"text": text, **fields}), encoding="utf-8")
        return path

    _write.root = root
    return _write
