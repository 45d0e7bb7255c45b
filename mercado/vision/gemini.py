"""Gemini API backend for product classification."""

from __future__ import annotations

import logging

from ..errors import ClassificationError
from ..models import ProductGuess
from . import PROMPT, ClassificationBackend, parse_product_response

logger = logging.getLogger(__name__)


class GeminiClassifier(ClassificationBackend):
    """Identify products and judge prices using Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def classify_product(
        self, image: bytes, mime_type: str = "image/jpeg"
    ) -> ProductGuess:
        if not self._api_key:
            raise ClassificationError(
                "Chave de API do Gemini não configurada. "
                "Verifique o arquivo de configuração ou a variável GEMINI_API_KEY."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        parts: list = [{"mime_type": mime_type, "data": image}, PROMPT]

        try:
            response = await model.generate_content_async(
                parts,
                generation_config={"response_mime_type": "application/json"},
            )
            text = response.text
        except Exception as e:
            logger.warning("falha na chamada ao Gemini: %s", e)
            raise ClassificationError(f"Erro ao analisar a imagem: {e}") from e

        return parse_product_response(text)
