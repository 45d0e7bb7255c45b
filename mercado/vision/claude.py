"""Claude API backend for product classification."""

from __future__ import annotations

import base64
import logging

from ..errors import ClassificationError
from ..models import ProductGuess
from . import PROMPT, ClassificationBackend, parse_product_response

logger = logging.getLogger(__name__)


class ClaudeClassifier(ClassificationBackend):
    """Identify products and judge prices using Claude's vision capability."""

    def __init__(
        self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929"
    ) -> None:
        self._api_key = api_key
        self._model = model

    async def classify_product(
        self, image: bytes, mime_type: str = "image/jpeg"
    ) -> ProductGuess:
        if not self._api_key:
            raise ClassificationError(
                "Chave de API da Anthropic não configurada. "
                "Verifique o arquivo de configuração ou a variável ANTHROPIC_API_KEY."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": mime_type,
                    "data": base64.standard_b64encode(image).decode(),
                },
            },
            {"type": "text", "text": PROMPT},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=1024,
                messages=[{"role": "user", "content": content}],
            )
            text = response.content[0].text
        except Exception as e:
            logger.warning("falha na chamada ao Claude: %s", e)
            raise ClassificationError(f"Erro ao analisar a imagem: {e}") from e

        return parse_product_response(text)
