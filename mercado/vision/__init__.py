"""Product classification backends, response parsing, and factory."""

from __future__ import annotations

import json
import math
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..errors import ClassificationError
from ..models import Analysis, ProductGuess

if TYPE_CHECKING:
    from ..config import MercadoConfig

PROMPT = """\
Analise esta imagem de um produto e seu preço em um supermercado.
Extraia o nome do produto, o preço numérico e a categoria, e determine se o
preço está barato, justo ou caro com base em médias de mercado brasileiras.

Retorne apenas um objeto JSON no formato abaixo (nenhum outro texto):
{
  "productName": "nome do produto",
  "price": 0.0,
  "category": "categoria",
  "analysis": "barato" | "justo" | "caro",
  "suggestion": "dica curta sobre o preço"
}
"""

# "1.234" or "12.345.678": dots used as thousands separators
_THOUSANDS = re.compile(r"^\d{1,3}(\.\d{3})+$")

_REQUIRED_FIELDS = ("productName", "price", "category", "analysis", "suggestion")


class ClassificationBackend(ABC):
    """Abstract base for identifying a product and its price from a photo."""

    @abstractmethod
    async def classify_product(
        self, image: bytes, mime_type: str = "image/jpeg"
    ) -> ProductGuess:
        """Identify the product in a single image.

        Raises:
            ClassificationError: On missing credentials, service failure,
                or a response that doesn't contain every field.
        """
        ...


def strip_fences(text: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def _parse_price(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError(f"preço inválido: {value!r}")
    raw = value
    if isinstance(value, str):
        # "R$ 1.234,56" → 1234.56
        value = value.replace("R$", "").strip()
        if "," in value:
            value = value.replace(".", "").replace(",", ".")
        elif _THOUSANDS.match(value):
            value = value.replace(".", "")
    price = float(value)  # type: ignore[arg-type]
    if price < 0 or math.isnan(price) or math.isinf(price):
        raise ValueError(f"preço inválido: {raw!r}")
    return price


def parse_product_response(text: str | None) -> ProductGuess:
    """Parse the JSON object returned by a classification service.

    Raises:
        ClassificationError: If the payload is empty, not JSON, or any field
            is missing or invalid.
    """
    if not text or not text.strip():
        raise ClassificationError("Resposta vazia do serviço de classificação.")

    try:
        data = json.loads(strip_fences(text))
    except json.JSONDecodeError as e:
        raise ClassificationError(f"Resposta não é JSON válido: {e}") from e

    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        raise ClassificationError("Resposta não contém um objeto de produto.")

    missing = [f for f in _REQUIRED_FIELDS if f not in data]
    if missing:
        raise ClassificationError(
            f"Campos ausentes na resposta: {', '.join(missing)}"
        )

    name = data["productName"]
    category = data["category"]
    suggestion = data["suggestion"]
    if not isinstance(name, str) or not name.strip():
        raise ClassificationError("Nome do produto ausente na resposta.")
    if not isinstance(category, str) or not category.strip():
        raise ClassificationError("Categoria ausente na resposta.")
    if not isinstance(suggestion, str):
        raise ClassificationError("Sugestão inválida na resposta.")

    try:
        price = _parse_price(data["price"])
        analysis = Analysis.parse(data["analysis"])
    except (TypeError, ValueError) as e:
        raise ClassificationError(str(e)) from e

    return ProductGuess(
        product_name=name.strip(),
        price=price,
        category=category.strip(),
        analysis=analysis,
        suggestion=suggestion.strip(),
    )


def create_backend(config: MercadoConfig) -> ClassificationBackend:
    """Create a classification backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiClassifier

            return GeminiClassifier(
                api_key=config.gemini.api_key,
                model=config.gemini.model,
            )
        case "claude":
            from .claude import ClaudeClassifier

            return ClaudeClassifier(
                api_key=config.claude.api_key,
                model=config.claude.model,
            )
        case _:
            raise ValueError(
                f"Backend de visão desconhecido: {backend_name!r}  "
                f"(escolha gemini ou claude)"
            )
