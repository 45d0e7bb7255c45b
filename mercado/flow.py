"""Scan, save and chat flows tying the list state to the services."""

from __future__ import annotations

import logging

from .assistant import AssistantBackend
from .db import SessionStore
from .models import Item, Session
from .shopping_list import ChatTranscript, ShoppingList
from .vision import ClassificationBackend

logger = logging.getLogger(__name__)


async def scan_product(
    backend: ClassificationBackend,
    image: bytes,
    shopping_list: ShoppingList,
    mime_type: str = "image/jpeg",
) -> Item | None:
    """Classify one product photo and append it to the list.

    If the list changed while the classification was in flight (an item
    removed, the list cleared or reopened), the result is dropped and None is
    returned. Cancelling the awaiting task leaves the list untouched.

    Raises:
        ClassificationError: If the product could not be identified.
    """
    revision = shopping_list.revision
    guess = await backend.classify_product(image, mime_type=mime_type)
    if shopping_list.revision != revision:
        logger.info(
            "lista alterada durante a análise; %r descartado", guess.product_name
        )
        return None
    item = shopping_list.add_guess(guess)
    logger.info(
        "produto adicionado: %s %.2f [%s] %s",
        item.name,
        item.price,
        item.category,
        item.analysis.value,
    )
    return item


def save_current_list(
    store: SessionStore, shopping_list: ShoppingList, now: int | None = None
) -> Session:
    """Persist the current list as a saved list, then clear it.

    The list is only cleared once the write succeeded.

    Raises:
        ValueError: If the list is empty.
        StorageWriteError: If the write failed; the list is kept intact.
    """
    session = shopping_list.to_session(now=now)
    store.save_session(session)
    shopping_list.clear()
    return session


async def ask_assistant(
    backend: AssistantBackend,
    transcript: ChatTranscript,
    prompt: str,
    shopping_list: ShoppingList,
    currency: str = "R$",
) -> str:
    """Send a question to the assistant with the current list as context.

    Raises:
        ValueError: If the prompt is blank.
        AssistantError: If no reply was produced. The question stays in the
            transcript so the caller can offer a retry.
    """
    if not prompt.strip():
        raise ValueError("A pergunta está vazia.")
    transcript.add_user(prompt)
    reply = await backend.reply(prompt, shopping_list.context_summary(currency))
    transcript.add_assistant(reply)
    return reply
