"""Gemini API backend for the shopping assistant."""

from __future__ import annotations

import logging

from ..errors import AssistantError
from . import AssistantBackend, build_prompt

logger = logging.getLogger(__name__)


class GeminiAssistant(AssistantBackend):
    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def reply(self, prompt: str, context: str) -> str:
        if not self._api_key:
            raise AssistantError(
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

        try:
            response = await model.generate_content_async(
                build_prompt(prompt, context)
            )
            text = response.text
        except Exception as e:
            logger.warning("falha na chamada ao Gemini: %s", e)
            raise AssistantError(
                "Desculpe, tive um problema ao processar sua solicitação. "
                f"({e})"
            ) from e

        if not text or not text.strip():
            raise AssistantError("O assistente não retornou resposta.")
        return text.strip()
