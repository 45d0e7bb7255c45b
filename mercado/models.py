"""Data models for scanned products and saved shopping lists."""

from __future__ import annotations

import math
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Analysis(str, Enum):
    """Price judgment returned by the classification service."""

    CHEAP = "cheap"
    FAIR = "fair"
    EXPENSIVE = "expensive"

    @classmethod
    def parse(cls, value: str | Analysis) -> Analysis:
        """Accept the English values and the Portuguese labels.

        Raises:
            ValueError: If the value is not a known judgment.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"análise de preço inválida: {value!r}")
        key = value.strip().lower()
        try:
            return _ANALYSIS_LABELS[key]
        except KeyError:
            raise ValueError(f"análise de preço inválida: {value!r}") from None

    @property
    def label(self) -> str:
        return _PT_LABELS[self]


_ANALYSIS_LABELS = {
    "cheap": Analysis.CHEAP,
    "fair": Analysis.FAIR,
    "expensive": Analysis.EXPENSIVE,
    "barato": Analysis.CHEAP,
    "justo": Analysis.FAIR,
    "caro": Analysis.EXPENSIVE,
}

_PT_LABELS = {
    Analysis.CHEAP: "barato",
    Analysis.FAIR: "justo",
    Analysis.EXPENSIVE: "caro",
}


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return uuid.uuid4().hex


def display_date(timestamp: int, fmt: str = "%d/%m/%Y") -> str:
    """Format an epoch-millisecond timestamp in local time."""
    return datetime.fromtimestamp(timestamp / 1000).strftime(fmt)


def _coerce_number(value: object, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what} inválido: {value!r}")
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{what} inválido: {value!r}")
    return float(value)


def _coerce_timestamp(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"timestamp inválido: {value!r}")
    return value


def _coerce_price(value: object) -> float:
    value = _coerce_number(value, "preço")
    if value < 0:
        raise ValueError(f"preço negativo: {value!r}")
    return float(value)


@dataclass(frozen=True)
class ProductGuess:
    """Structured result of classifying one product photo."""

    product_name: str
    price: float
    category: str
    analysis: Analysis
    suggestion: str = ""


@dataclass(frozen=True)
class Item:
    """A single scanned product."""

    name: str
    price: float
    category: str
    analysis: Analysis
    id: str = field(default_factory=new_id)
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "analysis": self.analysis.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Item:
        """Build an Item from its serialized form.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"item inválido: {data!r}")
        try:
            item_id = data["id"]
            name = data["name"]
            category = data["category"]
            timestamp = _coerce_timestamp(data["timestamp"])
            price = _coerce_price(data["price"])
            analysis = Analysis.parse(data["analysis"])
        except KeyError as e:
            raise ValueError(f"campo ausente no item: {e.args[0]}") from None
        if not isinstance(item_id, str) or not isinstance(name, str):
            raise ValueError(f"item inválido: {data!r}")
        if not isinstance(category, str):
            raise ValueError(f"categoria inválida: {category!r}")
        return cls(
            id=item_id,
            name=name,
            price=price,
            category=category,
            analysis=analysis,
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class Session:
    """A completed, saved shopping trip.

    ``total`` is authoritative: it is stored as given and never recomputed
    from ``items`` on read.
    """

    id: str
    name: str
    items: tuple[Item, ...]
    total: float
    timestamp: int

    def __post_init__(self) -> None:
        # Accept any sequence but keep the stored value immutable.
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def display_date(self) -> str:
        return display_date(self.timestamp)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Session:
        """Build a Session from its serialized form.

        Applies the same checks as :meth:`Item.from_dict` to every item.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"lista inválida: {data!r}")
        try:
            session_id = data["id"]
            name = data["name"]
            items = data["items"]
            total = _coerce_number(data["total"], "total")
            timestamp = _coerce_timestamp(data["timestamp"])
        except KeyError as e:
            raise ValueError(f"campo ausente na lista: {e.args[0]}") from None
        if not isinstance(session_id, str) or not isinstance(name, str):
            raise ValueError(f"lista inválida: id={session_id!r} nome={name!r}")
        if not isinstance(items, list):
            raise ValueError(f"lista de itens inválida: {items!r}")
        return cls(
            id=session_id,
            name=name,
            items=tuple(Item.from_dict(i) for i in items),
            total=total,
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str
