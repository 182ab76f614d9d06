"""Helper para chamadas HTTP à API generateContent do Gemini.

Implementação concreta de IO. Nunca levanta exceção de transporte:
qualquer falha vira None e é registrada em log.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

if TYPE_CHECKING:
    from ai.config.settings import AISettings
    from config.settings.ai.gemini import GeminiSettings

logger = logging.getLogger(__name__)

_MAX_ERROR_BODY_CHARS = 1000


class GeminiPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = ""


class GeminiContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: list[GeminiPart] = Field(min_length=1)


class GeminiCandidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: GeminiContent
    finish_reason: str | None = Field(default=None, alias="finishReason")


class GeminiResponse(BaseModel):
    """Subconjunto validado da resposta de generateContent."""

    model_config = ConfigDict(extra="ignore")

    candidates: list[GeminiCandidate] = Field(min_length=1)

    @property
    def first_text(self) -> str:
        return self.candidates[0].content.parts[0].text.strip()


def build_generate_content_payload(prompt: str, settings: AISettings) -> dict[str, object]:
    """Monta o corpo JSON de generateContent."""
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": settings.generation.to_payload(),
        "safetySettings": settings.safety.to_payload(),
    }


def parse_generate_content_response(data: object) -> str | None:
    """Extrai o texto do primeiro candidato, ou None se o payload for inválido."""
    try:
        parsed = GeminiResponse.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "gemini_invalid_payload",
            extra={"error_count": exc.error_count()},
        )
        return None
    text = parsed.first_text
    if not text:
        logger.warning("gemini_empty_response")
        return None
    return text


async def call_gemini_api(
    *,
    http_client: httpx.AsyncClient,
    gemini: GeminiSettings,
    settings: AISettings,
    prompt: str,
) -> str | None:
    """Executa chamada à API Gemini.

    Args:
        http_client: Cliente HTTP async
        gemini: Credenciais, modelo e timeout
        settings: Parâmetros de geração e segurança
        prompt: Prompt completo

    Returns:
        Texto gerado (bruto) ou None em caso de erro
    """
    if not gemini.api_key:
        logger.error("gemini_api_key_missing", extra={"model": gemini.model})
        return None

    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": gemini.api_key,
    }
    payload = build_generate_content_payload(prompt, settings)

    try:
        response = await http_client.post(
            gemini.generate_content_url,
            headers=headers,
            json=payload,
            timeout=gemini.timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()

    except httpx.TimeoutException:
        logger.warning(
            "gemini_timeout",
            extra={"model": gemini.model, "timeout": gemini.timeout_seconds},
        )
        return None

    except httpx.HTTPStatusError as e:
        body_text = e.response.text
        if len(body_text) > _MAX_ERROR_BODY_CHARS:
            body_text = body_text[:_MAX_ERROR_BODY_CHARS] + "..."
        logger.warning(
            "gemini_http_error",
            extra={
                "model": gemini.model,
                "status_code": e.response.status_code,
                "response_text": body_text,
            },
        )
        return None

    except httpx.RequestError as e:
        logger.warning(
            "gemini_network_error",
            extra={"model": gemini.model, "error_type": type(e).__name__},
        )
        return None

    except json.JSONDecodeError:
        logger.warning("gemini_invalid_json", extra={"model": gemini.model})
        return None

    return parse_generate_content_response(data)
