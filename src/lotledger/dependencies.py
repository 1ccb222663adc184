"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Generator

from fastapi import Request
from sqlmodel import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    """Provide a database session bound to the application's engine."""

    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def pagination_params(limit: int = 50, offset: int = 0) -> tuple[int, int]:
    limit = max(1, min(limit, 200))
    return limit, max(offset, 0)
