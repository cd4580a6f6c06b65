"""Declarative base for the survey tables (users, questions, evaluations, responses)."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
