"""Cliente HTTP da API Gemini (único ponto de IO do motor de respostas)."""

from app.infra.ai.gemini_client import GeminiClient

__all__ = ["GeminiClient"]
