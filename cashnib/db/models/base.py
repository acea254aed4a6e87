"""
Shared SQLAlchemy base and helpers.
"""
from sqlalchemy import Numeric
from sqlalchemy.orm import declarative_base
from datetime import datetime, UTC

from .. import sqlite_compiler_shims  # noqa: F401


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


def Money():
    """Currency column type; values round-trip as floats with 2 decimals."""
    return Numeric(14, 2, asdecimal=False)


Base = declarative_base()
