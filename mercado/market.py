"""Static sample catalog for the market browsing view.

Prices are fixed examples, not live quotes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MarketProduct:
    name: str
    price: float
    store: str


SAMPLE_PRODUCTS: tuple[MarketProduct, ...] = (
    MarketProduct(name="Arroz Tio João 5kg", price=29.90, store="Carrefour"),
    MarketProduct(name="Feijão Carioca 1kg", price=7.45, store="Extra"),
    MarketProduct(name="Óleo de Soja 900ml", price=6.80, store="Assaí"),
    MarketProduct(name="Leite Integral 1L", price=4.99, store="Pão de Açúcar"),
)


def search(query: str = "") -> list[MarketProduct]:
    """Case-insensitive substring match on product or store name."""
    needle = query.strip().casefold()
    if not needle:
        return list(SAMPLE_PRODUCTS)
    return [
        p
        for p in SAMPLE_PRODUCTS
        if needle in p.name.casefold() or needle in p.store.casefold()
    ]
