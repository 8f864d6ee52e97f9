"""
ORM tables for analysis records, person mentions, spend and the roster.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from records_intel.storage.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisRecord(Base):
    __tablename__ = "ai_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_id = Column(String(255), unique=True, nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    data_set = Column(String(32), nullable=False)
    document_type = Column(String(100), nullable=False)
    date_original = Column(String(64), nullable=True)
    summary = Column(Text, nullable=False)
    tier = Column(Integer, nullable=False)
    cost_cents = Column(Float, nullable=False, default=0.0)
    input_tokens = Column(Integer, nullable=False, default=0)
    output_tokens = Column(Integer, nullable=False, default=0)
    analyzed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    payload = Column(Text, nullable=False)  # full camelCase JSON record

    persons = relationship(
        "AnalysisPerson", back_populates="analysis", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<AnalysisRecord(id={self.id}, file_id={self.file_id!r}, tier={self.tier})>"


class AnalysisPerson(Base):
    __tablename__ = "ai_analysis_persons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_id = Column(Integer, ForeignKey("ai_analyses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    normalized_name = Column(String(255), nullable=False, index=True)
    role = Column(String(255), nullable=True)
    category = Column(String(32), nullable=True)
    mention_count = Column(Integer, nullable=False, default=1)

    analysis = relationship("AnalysisRecord", back_populates="persons")


class BudgetEntry(Base):
    __tablename__ = "budget_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    model = Column(String(100), nullable=False)
    input_tokens = Column(Integer, nullable=False, default=0)
    output_tokens = Column(Integer, nullable=False, default=0)
    cost_cents = Column(Float, nullable=False, default=0.0)
    document_id = Column(String(255), nullable=True)
    job_type = Column(String(64), nullable=False)


class RosterPerson(Base):
    __tablename__ = "roster_persons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    role = Column(String(255), nullable=False)
    category = Column(String(32), nullable=False)
    total_mentions = Column(Integer, nullable=False, default=0)
    doc_count = Column(Integer, nullable=False, default=0)
