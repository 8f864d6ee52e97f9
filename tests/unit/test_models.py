"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from records_intel.models import (
    CATEGORY_SPECIFICITY,
    AnalysisResult,
    AnalysisTier,
    Connection,
    DryRunEstimate,
    Event,
    ExtractedDocument,
    PersonCategory,
    PersonMention,
    RunSummary,
    TieredAnalysisResult,
)


def _result(**overrides) -> AnalysisResult:
    fields = dict(
        file_name="doc.pdf",
        data_set="1",
        document_type="email",
        summary="A summary",
        persons=[
            PersonMention(name="Sarah Kellen", role="Assistant", category=PersonCategory.STAFF, context="c")
        ],
        locations=["New York"],
    )
    fields.update(overrides)
    return AnalysisResult(**fields)


class TestPersonMention:
    """Tests for PersonMention."""

    def test_camel_case_aliases(self):
        person = PersonMention.model_validate(
            {"name": "Sarah Kellen", "role": "Assistant", "category": "staff", "context": "c", "mentionCount": 3}
        )
        assert person.mention_count == 3
        assert person.to_json_dict()["mentionCount"] == 3

    def test_populate_by_field_name(self):
        person = PersonMention(name="A B", role="r", category="other", context="c", mention_count=2)
        assert person.mention_count == 2

    def test_invalid_category(self):
        with pytest.raises(ValidationError):
            PersonMention(name="A B", role="r", category="celebrity", context="c")

    def test_mention_count_positive(self):
        with pytest.raises(ValidationError):
            PersonMention(name="A B", role="r", category="other", context="c", mention_count=0)


class TestConnectionAndEvent:
    """Tests for dedup keys and bounds."""

    def test_connection_key_is_order_independent(self):
        forward = Connection(person1="A", person2="B", relationship_type="friend", description="", strength=2)
        backward = Connection(person1="B", person2="A", relationship_type="friend", description="", strength=4)
        assert forward.dedup_key == backward.dedup_key == ("A", "B", "friend")

    def test_strength_bounds(self):
        with pytest.raises(ValidationError):
            Connection(person1="A", person2="B", relationship_type="x", description="", strength=6)

    def test_event_key(self):
        event = Event(date="2002-03", title="Flight", description="d", category="travel", significance=3)
        assert event.dedup_key == ("2002-03", "Flight")
        assert event.persons_involved == []


class TestTieredAnalysisResult:
    """Tests for TieredAnalysisResult."""

    def test_from_result_copies_lists(self):
        result = _result()

        tiered = TieredAnalysisResult.from_result(result, AnalysisTier.LLM, cost_cents=0.5, input_tokens=10)
        tiered.persons.append(tiered.persons[0])
        tiered.locations.append("Paris")

        assert len(result.persons) == 1
        assert result.locations == ["New York"]
        assert tiered.tier == AnalysisTier.LLM
        assert tiered.cost_cents == 0.5
        assert tiered.input_tokens == 10
        assert tiered.analyzed_at == result.analyzed_at

    def test_json_contract_keys(self):
        tiered = TieredAnalysisResult.from_result(_result(), AnalysisTier.RULE_BASED)

        data = tiered.to_json_dict()

        assert {"fileName", "dataSet", "documentType", "keyFacts", "analyzedAt", "tier", "costCents"} <= set(data)
        assert data["tier"] == 0

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            TieredAnalysisResult.from_result(_result(), AnalysisTier.LLM, cost_cents=-1)


class TestRunModels:
    """Tests for run input and reporting models."""

    def test_extracted_document_ignores_extra_keys(self):
        doc = ExtractedDocument.model_validate({"text": "hello", "fileName": "a.pdf", "pages": 3})
        assert doc.text == "hello"
        assert doc.file_name == "a.pdf"
        assert doc.file_size_bytes is None

    def test_run_summary_defaults(self):
        summary = RunSummary()
        assert summary.processed == 0
        assert summary.total_cost_cents == 0.0
        assert summary.ledger_failures == 0
        assert not summary.budget_exhausted
        assert summary.dry_run is None

    def test_within_budget(self):
        assert DryRunEstimate(estimated_cost_cents=5.0).within_budget
        assert DryRunEstimate(estimated_cost_cents=5.0, budget_cents=5.0).within_budget
        assert not DryRunEstimate(estimated_cost_cents=5.01, budget_cents=5.0).within_budget


class TestCategorySpecificity:
    """Tests for the category ranking."""

    def test_ranking_follows_declaration_order(self):
        assert CATEGORY_SPECIFICITY["key figure"] == 0
        assert CATEGORY_SPECIFICITY["victim"] < CATEGORY_SPECIFICITY["witness"]
        assert CATEGORY_SPECIFICITY["other"] == len(PersonCategory) - 1
