#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the catalog API.

- Declarative Base shared by every table
- TimestampMixin: created_at / updated_at set by the database

Notes:
- We use server-side defaults (func.now()) so timestamps are set consistently by the DB.
- For SQLite, func.now() maps to CURRENT_TIMESTAMP.
- Primary keys are declared per model: users get a store-assigned integer,
  refresh tokens are keyed by their JWT ID.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


class TimestampMixin:
    """created_at / updated_at columns for persistent models."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
