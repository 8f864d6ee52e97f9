"""Append-only budget ledger of paid model usage."""

from datetime import datetime, timezone

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from records_intel.models import BudgetRecord
from records_intel.storage.tables import BudgetEntry

logger = structlog.get_logger(__name__)


def current_period_start(now: datetime | None = None) -> datetime:
    """First instant of the current calendar month, UTC."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class BudgetLedger:
    """Records spend and reports the total for an accounting period.

    Entries are only ever inserted; nothing updates or deletes them.

    Args:
        session_factory: SQLAlchemy session factory for the ledger database.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def append(self, record: BudgetRecord) -> None:
        with self._session_factory() as session:
            session.add(
                BudgetEntry(
                    date=record.date.astimezone(timezone.utc),
                    model=record.model,
                    input_tokens=record.input_tokens,
                    output_tokens=record.output_tokens,
                    cost_cents=record.cost_cents,
                    document_id=record.document_id,
                    job_type=record.job_type,
                )
            )
            session.commit()

        logger.debug("budget_record_appended", document_id=record.document_id, cost_cents=record.cost_cents)

    def period_total(self, period_start: datetime | None = None) -> float:
        """Sum of cost in cents since ``period_start`` (default: this month)."""
        period_start = period_start or current_period_start()
        with self._session_factory() as session:
            total = session.execute(
                select(func.coalesce(func.sum(BudgetEntry.cost_cents), 0.0)).where(
                    BudgetEntry.date >= period_start
                )
            ).scalar_one()
        return float(total)

    def records(self, period_start: datetime | None = None) -> list[BudgetRecord]:
        """Ledger entries in insertion order, optionally from a start date."""
        query = select(BudgetEntry).order_by(BudgetEntry.id)
        if period_start is not None:
            query = query.where(BudgetEntry.date >= period_start)

        with self._session_factory() as session:
            return [
                BudgetRecord(
                    date=row.date,
                    model=row.model,
                    input_tokens=row.input_tokens,
                    output_tokens=row.output_tokens,
                    cost_cents=row.cost_cents,
                    document_id=row.document_id,
                    job_type=row.job_type,
                )
                for row in session.execute(query).scalars()
            ]
