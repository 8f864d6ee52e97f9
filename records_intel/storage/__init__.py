"""Storage: database access, output stores and the budget ledger."""

from .database import Base, create_db_engine, create_session_factory, init_db
from .ledger import BudgetLedger
from .output import (
    DatabaseOutputStore,
    JsonOutputStore,
    OutputStore,
    read_roster,
    write_roster,
)

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "BudgetLedger",
    "DatabaseOutputStore",
    "JsonOutputStore",
    "OutputStore",
    "read_roster",
    "write_roster",
]
