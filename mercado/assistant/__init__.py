"""Conversational assistant backends and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import MercadoConfig

ASSISTANT_NAME = "Faça suas Compras de Mercado"

SUGGESTED_PROMPTS = (
    "Sugira uma receita com os itens da minha lista",
    "Como economizar no mercado este mês?",
    "Dicas para organizar a despensa",
    "Qual o melhor dia para comprar verduras?",
)


def build_prompt(prompt: str, context: str) -> str:
    """Wrap the user's question with the assistant persona and list context."""
    return (
        f"Você é uma assistente virtual para donas de casa brasileiras chamada "
        f"'{ASSISTANT_NAME}'.\n"
        f"Seu objetivo é ajudar a economizar, organizar finanças e dar dicas "
        f"de casa/receitas.\n"
        f"Contexto atual: {context}\n"
        f"Pergunta do usuário: {prompt}"
    )


class AssistantBackend(ABC):
    """Abstract base for the recipes and savings-tips assistant."""

    @abstractmethod
    async def reply(self, prompt: str, context: str) -> str:
        """Answer a free-text question given a text summary of the list.

        Raises:
            AssistantError: On missing credentials, service failure, or an
                empty reply.
        """
        ...


def create_assistant(config: MercadoConfig) -> AssistantBackend:
    """Create an assistant backend based on configuration."""
    backend_name = config.assistant.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiAssistant

            return GeminiAssistant(
                api_key=config.gemini.api_key,
                model=config.gemini.model,
            )
        case "claude":
            from .claude import ClaudeAssistant

            return ClaudeAssistant(
                api_key=config.claude.api_key,
                model=config.claude.model,
            )
        case _:
            raise ValueError(
                f"Backend de assistente desconhecido: {backend_name!r}  "
                f"(escolha gemini ou claude)"
            )
