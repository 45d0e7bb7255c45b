"""Claude API backend for the shopping assistant."""

from __future__ import annotations

import logging

from ..errors import AssistantError
from . import AssistantBackend, build_prompt

logger = logging.getLogger(__name__)


class ClaudeAssistant(AssistantBackend):
    def __init__(
        self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929"
    ) -> None:
        self._api_key = api_key
        self._model = model

    async def reply(self, prompt: str, context: str) -> str:
        if not self._api_key:
            raise AssistantError(
                "Chave de API da Anthropic não configurada. "
                "Verifique o arquivo de configuração ou a variável ANTHROPIC_API_KEY."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=2048,
                messages=[
                    {"role": "user", "content": build_prompt(prompt, context)}
                ],
            )
            text = "".join(
                getattr(block, "text", "") for block in response.content
            )
        except Exception as e:
            logger.warning("falha na chamada ao Claude: %s", e)
            raise AssistantError(
                "Desculpe, tive um problema ao processar sua solicitação. "
                f"({e})"
            ) from e

        if not text.strip():
            raise AssistantError("O assistente não retornou resposta.")
        return text.strip()
