"""Shared base for SQLModel domain entities"""

import uuid
from sqlmodel import SQLModel, Column
from sqlalchemy import BigInteger, Integer


def generate_uuid() -> str:
    return str(uuid.uuid4())


def id_column() -> Column:
    """Auto-increment primary key (BIGINT, plain INTEGER on SQLite so rowid applies)"""
    return Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )


class BaseModel(SQLModel):
    pass
