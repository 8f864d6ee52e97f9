"""Unit tests for batch analysis runs and roster generation."""

import json

import pytest
from sqlalchemy.exc import OperationalError

from records_intel.analysis.cost import CostTracker
from records_intel.analysis.llm_analyzer import LLMAnalyzer
from records_intel.analysis.tiered import TieredAnalyzer
from records_intel.config.settings import Settings
from records_intel.models import AnalysisTier, BudgetRecord, PersonCategory, RosterEntry
from records_intel.pipeline.priority import get_ai_priority
from records_intel.pipeline.roster import build_roster, generate_roster, roster_gazetteer
from records_intel.pipeline.runner import RunOptions, run_analysis
from records_intel.processing.aggregation import JsonDirectoryMentionSource, PersonAggregator
from records_intel.storage.ledger import BudgetLedger
from records_intel.storage.output import JsonOutputStore


def _no_sleep(seconds):
    pass


@pytest.fixture
def corpus(write_extracted, long_document_text):
    """Three analyzable documents, one short and one unreadable."""
    write_extracted("ds1/doc-a.json", long_document_text, fileName="doc-a.pdf", fileSizeBytes=1000)
    write_extracted("ds1/doc-b.json", long_document_text, fileName="doc-b.pdf", fileSizeBytes=1000)
    write_extracted("ds2/doc-c.json", long_document_text, fileName="doc-c.pdf", fileSizeBytes=1000)
    write_extracted("ds2/doc-short.json", "too short", fileName="doc-short.pdf")
    write_extracted("ds2/doc-broken.json", "x").write_text("{broken", encoding="utf-8")
    return write_extracted.root


def _llm_analyzer(client, budget_cents=None):
    return TieredAnalyzer(
        CostTracker(0.27, 1.10, budget_cents=budget_cents),
        llm_analyzer=LLMAnalyzer(client, chunk_delay_seconds=0, sleep=_no_sleep),
    )


class TestPriority:
    """Tests for get_ai_priority."""

    def test_priority_tiers(self):
        assert get_ai_priority("9", 100, priority_data_sets=["9"]) == 3
        assert get_ai_priority("1", 100) == 2
        assert get_ai_priority("unknown", 100) == 1
        assert get_ai_priority("1", 10_000, large_file_bytes=5_000) == 1
        assert get_ai_priority("1", None, large_file_bytes=5_000) == 2


class TestRunOptions:
    """Tests for RunOptions construction."""

    def test_from_settings_ignores_none_overrides(self, tmp_path):
        settings = Settings(extracted_dir=tmp_path, min_text_length=50, budget_cents=100)

        options = RunOptions.from_settings(settings, limit=None, budget_cents=None, min_priority=2)

        assert options.input_dir == tmp_path
        assert options.min_text_length == 50
        assert options.budget_cents == 100
        assert options.min_priority == 2
        assert options.limit is None


class TestRunAnalysis:
    """Tests for run_analysis."""

    def test_tier_zero_run(self, corpus, tmp_path):
        store = JsonOutputStore(tmp_path / "out")
        options = RunOptions(input_dir=corpus, tier=AnalysisTier.RULE_BASED)

        summary = run_analysis(options, TieredAnalyzer(CostTracker(0.27, 1.10)), store, sleep=_no_sleep)

        assert summary.discovered == 5
        assert summary.processed == 3
        assert summary.skipped_short == 1
        assert summary.skipped_unreadable == 1
        assert summary.total_cost_cents == 0.0
        assert store.existing_ids() == {"doc-a", "doc-b", "doc-c"}
        record = store.read_analysis("doc-a")
        assert record.tier == AnalysisTier.RULE_BASED
        assert record.file_name == "doc-a.pdf"
        assert record.data_set == "1"

    def test_second_run_is_noop(self, corpus, tmp_path):
        store = JsonOutputStore(tmp_path / "out")
        options = RunOptions(input_dir=corpus, tier=AnalysisTier.RULE_BASED)
        analyzer = TieredAnalyzer(CostTracker(0.27, 1.10))
        run_analysis(options, analyzer, store, sleep=_no_sleep)
        before = {p.name: p.read_text(encoding="utf-8") for p in (tmp_path / "out").iterdir()}

        summary = run_analysis(options, analyzer, store, sleep=_no_sleep)

        assert summary.already_analyzed == 3
        assert summary.processed == 0
        after = {p.name: p.read_text(encoding="utf-8") for p in (tmp_path / "out").iterdir()}
        assert after == before

    def test_skip_existing_accepts_pdf_suffix(self, corpus, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        (out / "doc-a.pdf.json").write_text("{}", encoding="utf-8")
        options = RunOptions(input_dir=corpus, tier=AnalysisTier.RULE_BASED)

        summary = run_analysis(options, TieredAnalyzer(CostTracker(0.27, 1.10)), JsonOutputStore(out))

        assert summary.already_analyzed == 1
        assert summary.processed == 2

    def test_limit_applies_after_skip(self, corpus, tmp_path):
        options = RunOptions(input_dir=corpus, tier=AnalysisTier.RULE_BASED, limit=2)

        summary = run_analysis(options, TieredAnalyzer(CostTracker(0.27, 1.10)), JsonOutputStore(tmp_path / "out"))

        assert summary.selected == 2
        assert summary.processed == 2

    def test_tier_one_run_records_cost(
        self, corpus, tmp_path, fake_client_factory, valid_response, session_factory
    ):
        client = fake_client_factory([valid_response], prompt_tokens=100_000, completion_tokens=10_000)
        store = JsonOutputStore(tmp_path / "out")
        ledger = BudgetLedger(session_factory)
        sleeps = []
        options = RunOptions(input_dir=corpus, document_delay_seconds=1.5)

        summary = run_analysis(options, _llm_analyzer(client), store, ledger=ledger, sleep=sleeps.append)

        assert summary.processed == 3
        assert summary.total_persons == 6
        assert summary.total_connections == 3
        assert summary.total_events == 3
        # 100k input at 0.27 + 10k output at 1.10 = 0.038 -> 0.04 per document
        assert summary.total_cost_cents == pytest.approx(0.12)
        assert ledger.period_total() == pytest.approx(0.12)
        assert [r.document_id for r in ledger.records()] == ["doc-a", "doc-b", "doc-c"]
        assert ledger.records()[0].model == "fake-model"
        # a pause follows each analyzed document except the last candidate
        assert sleeps == [1.5, 1.5, 1.5]
        record = store.read_analysis("doc-b")
        assert record.tier == AnalysisTier.LLM
        assert record.cost_cents == pytest.approx(0.04)

    def test_budget_halts_before_next_document(self, corpus, tmp_path, fake_client_factory, valid_response):
        client = fake_client_factory([valid_response], prompt_tokens=1_000_000, completion_tokens=0)
        options = RunOptions(input_dir=corpus, budget_cents=0.5, document_delay_seconds=0)

        summary = run_analysis(options, _llm_analyzer(client), JsonOutputStore(tmp_path / "out"))

        # 0.27 per document: the second call starts below the cap, the third does not
        assert summary.processed == 2
        assert summary.budget_exhausted
        assert summary.total_cost_cents == pytest.approx(0.54)
        assert len(client.calls) == 2

    def test_ledger_spend_counts_toward_cap(
        self, corpus, tmp_path, fake_client_factory, valid_response, session_factory
    ):
        ledger = BudgetLedger(session_factory)
        ledger.append(BudgetRecord(model="fake-model", cost_cents=100.0))
        client = fake_client_factory([valid_response])
        options = RunOptions(input_dir=corpus, budget_cents=100.0)

        summary = run_analysis(options, _llm_analyzer(client), JsonOutputStore(tmp_path / "out"), ledger=ledger)

        assert summary.processed == 0
        assert summary.budget_exhausted
        assert client.calls == []

    def test_priority_filter(self, corpus, tmp_path, fake_client_factory, valid_response):
        client = fake_client_factory([valid_response])
        options = RunOptions(input_dir=corpus, min_priority=3, priority_data_sets=["2"], document_delay_seconds=0)

        summary = run_analysis(options, _llm_analyzer(client), JsonOutputStore(tmp_path / "out"))

        assert summary.skipped_priority == 2
        assert summary.processed == 1

    def test_placeholder_record_written(self, corpus, tmp_path, fake_client_factory):
        client = fake_client_factory(["no json here"])
        store = JsonOutputStore(tmp_path / "out")
        options = RunOptions(input_dir=corpus, document_delay_seconds=0)

        summary = run_analysis(options, _llm_analyzer(client), store)

        assert summary.processed == 3
        assert summary.placeholder_records == 3
        assert summary.invalid_chunks == 3
        assert store.read_analysis("doc-a").summary == "Unable to analyze document"

    def test_dry_run_writes_nothing(self, corpus, tmp_path, fake_client_factory):
        client = fake_client_factory(["unused"])
        out = tmp_path / "out"
        options = RunOptions(input_dir=corpus, dry_run=True, budget_cents=1000)

        summary = run_analysis(options, _llm_analyzer(client), JsonOutputStore(out))

        assert not out.exists()
        assert client.calls == []
        estimate = summary.dry_run
        assert estimate.documents == 3
        assert estimate.skipped_short == 1
        assert estimate.skipped_unreadable == 1
        assert estimate.estimated_input_tokens > 0
        assert estimate.estimated_output_tokens == 1500
        assert estimate.estimated_cost_cents > 0
        assert estimate.within_budget
        assert summary.processed == 0

    def test_write_failure_contained(self, corpus, fake_client_factory, valid_response):
        class FailingStore:
            def existing_ids(self):
                return set()

            def write_analysis(self, file_id, record):
                raise OSError("disk full")

        options = RunOptions(input_dir=corpus, tier=AnalysisTier.RULE_BASED)

        summary = run_analysis(options, TieredAnalyzer(CostTracker(0.27, 1.10)), FailingStore())

        assert summary.failed_documents == 3
        assert summary.processed == 0

    def test_undecodable_file_skipped(self, write_extracted, long_document_text, tmp_path):
        write_extracted("ds1/a.json", long_document_text, fileName="a.pdf")
        write_extracted("ds1/b.json", "x").write_bytes(b'{"text": "\xff\xfe bad bytes"}')
        write_extracted("ds1/c.json", long_document_text, fileName="c.pdf")
        store = JsonOutputStore(tmp_path / "out")
        options = RunOptions(input_dir=write_extracted.root, tier=AnalysisTier.RULE_BASED)

        summary = run_analysis(options, TieredAnalyzer(CostTracker(0.27, 1.10)), store)

        assert summary.skipped_unreadable == 1
        assert summary.processed == 2
        assert store.existing_ids() == {"a", "c"}

    def test_ledger_failure_keeps_record(self, corpus, tmp_path, fake_client_factory, valid_response):
        class LockedLedger:
            def period_total(self):
                return 0.0

            def append(self, record):
                raise OperationalError("insert", {}, Exception("database is locked"))

        client = fake_client_factory([valid_response], prompt_tokens=100_000, completion_tokens=10_000)
        store = JsonOutputStore(tmp_path / "out")
        options = RunOptions(input_dir=corpus, document_delay_seconds=0)

        summary = run_analysis(options, _llm_analyzer(client), store, ledger=LockedLedger())

        assert summary.processed == 3
        assert summary.ledger_failures == 3
        assert summary.failed_documents == 0
        assert summary.total_cost_cents == pytest.approx(0.12)
        assert store.existing_ids() == {"doc-a", "doc-b", "doc-c"}

    def test_tier_zero_dry_run_is_free(self, corpus, tmp_path):
        options = RunOptions(
            input_dir=corpus, tier=AnalysisTier.RULE_BASED, dry_run=True, min_priority=3, budget_cents=0
        )

        summary = run_analysis(options, TieredAnalyzer(CostTracker(0.27, 1.10)), JsonOutputStore(tmp_path / "out"))

        estimate = summary.dry_run
        assert estimate.documents == 3
        assert estimate.skipped_priority == 0
        assert estimate.estimated_cost_cents == 0.0
        assert estimate.within_budget


class TestRoster:
    """Tests for roster generation."""

    def test_build_and_generate(self, tmp_path):
        analyses = tmp_path / "analyses"
        analyses.mkdir()
        documents = {
            "a": [("Jeffrey Epstein", 5, "Defendant", "key figure"), ("Ghislaine Maxwell", 2, "Associate", "associate")],
            "b": [("Jeff Epstein", 1, "Financier", "associate"), ("FBI Field Office", 9, "Agency", "other")],
            "c": [("Maxwell, Ghislaine", 1, "Unknown", "other"), ("Sarah Kellen", 1, "Assistant", "staff")],
        }
        for file_id, persons in documents.items():
            payload = {
                "persons": [
                    {"name": n, "role": r, "category": c, "context": "x", "mentionCount": m}
                    for n, m, r, c in persons
                ]
            }
            (analyses / f"{file_id}.json").write_text(json.dumps(payload), encoding="utf-8")

        aggregator = PersonAggregator(JsonDirectoryMentionSource(analyses))
        entries, source_names = build_roster(aggregator, top_n=2)

        assert source_names == 4
        assert [e.name for e in entries] == ["Jeffrey Epstein", "Ghislaine Maxwell"]
        assert entries[0].total_mentions == 6
        assert entries[0].category == "key figure"
        assert entries[1].total_mentions == 3

        path = tmp_path / "roster.json"
        generate_roster(aggregator, path, top_n=300)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert [p["name"] for p in data["persons"]] == ["Jeffrey Epstein", "Ghislaine Maxwell", "Sarah Kellen"]

    def test_roster_gazetteer(self):
        entries = [
            RosterEntry(name="Sarah Kellen", role="Assistant", category="staff"),
            RosterEntry(name="Larry Visoski", role="Pilot", category="pilot"),
        ]

        gazetteer = roster_gazetteer(entries)

        assert gazetteer == [
            ("sarah kellen", "Assistant", PersonCategory.STAFF),
            ("larry visoski", "Pilot", PersonCategory.OTHER),
        ]
