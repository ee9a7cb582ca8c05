from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Thesis(SQLModel, table=True):
    """
    A finished analysis: the text that was analysed and the thesis produced for it.
    Rows are written once and never updated.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    text: str = Field(sa_column=Column(Text, nullable=False))
    thesis: str = Field(sa_column=Column(Text, nullable=False))
    provenance: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
