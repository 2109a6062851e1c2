"""Declarative Base — metadata shared by every Ops Map table.

Invariants:
    - Every ORM model subclasses Base, so Base.metadata lists the whole schema
    - Constraint names are deterministic (naming convention below)

Design Decisions:
    - Named constraints let alembic batch migrations rebuild SQLite tables
      without guessing at anonymous constraint names
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
