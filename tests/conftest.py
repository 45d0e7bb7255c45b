"""Shared fixtures."""

import pytest

from mercado.analytics import current_list_total
from mercado.db import SessionStore
from mercado.models import Analysis, Item, Session


@pytest.fixture
def store(tmp_path):
    """A SessionStore backed by a temporary database."""
    s = SessionStore(db_path=tmp_path / "shopping.db")
    yield s
    s.close()


def make_item(
    name: str = "Arroz 5kg",
    price: float = 10.0,
    category: str = "mercearia",
    analysis: Analysis = Analysis.FAIR,
    timestamp: int = 1_700_000_000_000,
) -> Item:
    return Item(
        name=name,
        price=price,
        category=category,
        analysis=analysis,
        timestamp=timestamp,
    )


def make_session(
    id: str = "s1",
    total: float | None = None,
    timestamp: int = 1_700_000_000_000,
    items: list[Item] | None = None,
    name: str = "Compra",
) -> Session:
    items = items if items is not None else []
    return Session(
        id=id,
        name=name,
        items=tuple(items),
        total=total if total is not None else current_list_total(items),
        timestamp=timestamp,
    )
