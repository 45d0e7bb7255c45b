"""Shopping list and grocery-spend tracker."""

from .analytics import (
    CategoryShare,
    SpendDelta,
    SpendingSummary,
    TrendPoint,
    average_per_session,
    category_breakdown,
    current_list_total,
    period_over_period_delta,
    summarize,
    total_spent,
    trend,
)
from .config import MercadoConfig, load_config
from .db import SessionStore
from .errors import (
    AssistantError,
    ClassificationError,
    MercadoError,
    StorageReadError,
    StorageWriteError,
)
from .models import Analysis, ChatMessage, Item, ProductGuess, Session
from .shopping_list import ChatTranscript, ShoppingList

__all__ = [
    "Analysis",
    "Item",
    "Session",
    "ProductGuess",
    "ChatMessage",
    "ShoppingList",
    "ChatTranscript",
    "SessionStore",
    "MercadoConfig",
    "load_config",
    "MercadoError",
    "StorageReadError",
    "StorageWriteError",
    "ClassificationError",
    "AssistantError",
    "TrendPoint",
    "SpendDelta",
    "CategoryShare",
    "SpendingSummary",
    "total_spent",
    "average_per_session",
    "trend",
    "period_over_period_delta",
    "category_breakdown",
    "current_list_total",
    "summarize",
]
