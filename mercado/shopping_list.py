"""In-progress shopping list and chat transcript state."""

from __future__ import annotations

from urllib.parse import quote

from .analytics import current_list_total
from .models import ChatMessage, Item, ProductGuess, Session, display_date, new_id, now_ms


def format_money(value: float, currency: str = "R$") -> str:
    return f"{currency} {value:.2f}"


class ShoppingList:
    """Items scanned during the current trip, not yet saved.

    ``revision`` changes on every mutation so that a caller awaiting a slow
    classification can tell whether the list moved underneath it.
    """

    def __init__(self, items: list[Item] | None = None) -> None:
        self._items: list[Item] = list(items or [])
        self._revision = 0

    @classmethod
    def from_session(cls, session: Session) -> ShoppingList:
        """Reopen a saved list for editing."""
        return cls(list(session.items))

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def total(self) -> float:
        return current_list_total(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def add(self, item: Item) -> Item:
        self._items.append(item)
        self._revision += 1
        return item

    def add_guess(self, guess: ProductGuess, now: int | None = None) -> Item:
        """Append the product identified by the classification service."""
        return self.add(
            Item(
                name=guess.product_name,
                price=guess.price,
                category=guess.category,
                analysis=guess.analysis,
                timestamp=now if now is not None else now_ms(),
            )
        )

    def remove(self, item_id: str) -> bool:
        """Remove an item by id. Returns False if it wasn't in the list."""
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[idx]
                self._revision += 1
                return True
        return False

    def clear(self) -> None:
        self._items.clear()
        self._revision += 1

    def to_session(self, now: int | None = None) -> Session:
        """Bundle the current items into a new saved-list record.

        Raises:
            ValueError: If the list is empty.
        """
        if not self._items:
            raise ValueError("A lista atual está vazia.")
        timestamp = now if now is not None else now_ms()
        return Session(
            id=new_id(),
            name=f"Compra {display_date(timestamp)}",
            items=tuple(self._items),
            total=self.total,
            timestamp=timestamp,
        )

    def context_summary(self, currency: str = "R$") -> str:
        """Text context handed to the assistant."""
        listed = ", ".join(
            f"{i.name} ({currency} {i.price:g})" for i in self._items
        ) or "vazia"
        return (
            f"Lista de compras atual: {listed}. "
            f"Total: {format_money(self.total, currency)}"
        )

    def share_text(self, currency: str = "R$") -> str:
        """Plain-text message listing every item and the estimated total."""
        lines = ["🛒 *Minha Lista de Compras*", ""]
        lines += [
            f"• {i.name}: {format_money(i.price, currency)}" for i in self._items
        ]
        lines += ["", f"💰 *Total Estimado: {format_money(self.total, currency)}*"]
        return "\n".join(lines)


def whatsapp_url(text: str) -> str:
    return f"https://wa.me/?text={quote(text, safe='')}"


class ChatTranscript:
    """Ordered conversation with the assistant."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def add_user(self, content: str) -> ChatMessage:
        msg = ChatMessage(role="user", content=content)
        self._messages.append(msg)
        return msg

    def add_assistant(self, content: str) -> ChatMessage:
        msg = ChatMessage(role="assistant", content=content)
        self._messages.append(msg)
        return msg

    def clear(self) -> None:
        self._messages.clear()
