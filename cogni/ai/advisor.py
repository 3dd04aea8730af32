"""
Advisory text service - cognitive profile summaries and grade suggestions.

CRITICAL INVARIANTS:
- Advice is best-effort: every failure degrades to a fixed fallback
- Suggestions are never applied; a human grader confirms every score
- Nothing here touches platform state
"""

import json
from typing import Any, Dict, Optional, Sequence

import httpx
from pydantic import BaseModel, Field, ValidationError

from cogni.config import get_settings
from cogni.domain.errors import ExternalServiceError
from cogni.logging_config import get_logger

logger = get_logger(__name__)

SUMMARY_SYSTEM_PROMPT = "You are a professional cognitive psychologist assistant. Speak in friendly Persian."

MISSING_KEY_SUMMARY = "کلید API یافت نشد. لطفاً تنظیمات سیستم را بررسی کنید."
FAILED_SUMMARY = "در حال حاضر امکان دریافت تحلیل هوشمند وجود ندارد."
MISSING_KEY_REASON = "کلید API تنظیم نشده است."
FAILED_REASON = "خطا در ارزیابی خودکار"

_GRADE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER"},
        "reason": {"type": "STRING"},
    },
    "required": ["score", "reason"],
}


class GradeSuggestion(BaseModel):
    """A proposed score for a descriptive answer. Never auto-applied."""

    score: int = Field(0, ge=0, le=100)
    reason: str
    fallback: bool = False


class AdvisoryService:
    """
    Talks to the Gemini generateContent endpoint.

    One request per call, no retry. Missing configuration, transport errors
    and malformed responses all become ExternalServiceError internally and
    are answered with the static fallback.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.api_key = (api_key if api_key is not None else settings.gemini_api_key).strip()
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.advisor_timeout_seconds
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def summarize(self, user_name: str, score_history: Sequence[Any]) -> str:
        """Short motivating cognitive profile in Persian."""
        if not self.configured:
            logger.warning("Advisory API key missing; summary disabled")
            return MISSING_KEY_SUMMARY

        prompt = (
            f"Based on the following cognitive test scores for user {user_name}: "
            f"{json.dumps(list(score_history), ensure_ascii=False, default=str)}, "
            "provide a short, motivating cognitive profile summary in Persian. "
            "Focus on strengths and areas for growth."
        )
        try:
            text = await self._generate(prompt, system_instruction=SUMMARY_SYSTEM_PROMPT)
        except ExternalServiceError as exc:
            logger.warning("Cognitive summary fell back", extra={"error": str(exc)})
            return FAILED_SUMMARY
        return text.strip() or FAILED_SUMMARY

    async def suggest_grade(self, question_context: str, answer_text: str) -> GradeSuggestion:
        """Proposed 0-100 score with a short Persian reason."""
        if not self.configured:
            return GradeSuggestion(score=0, reason=MISSING_KEY_REASON, fallback=True)

        prompt = (
            f"Question: {question_context}\nUser Answer: {answer_text}\n"
            "Rate this answer from 0 to 100 and give a short reason in Persian."
        )
        try:
            raw = await self._generate(prompt, response_schema=_GRADE_SCHEMA)
            return self._parse_suggestion(raw)
        except ExternalServiceError as exc:
            logger.warning("Grade suggestion fell back", extra={"error": str(exc)})
            return GradeSuggestion(score=0, reason=FAILED_REASON, fallback=True)

    @staticmethod
    def _parse_suggestion(raw: str) -> GradeSuggestion:
        try:
            data = json.loads(raw)
            score = int(round(float(data["score"])))
            return GradeSuggestion(score=max(0, min(score, 100)), reason=str(data["reason"]))
        except (ValueError, TypeError, KeyError, ValidationError) as exc:
            raise ExternalServiceError(f"Unexpected grade suggestion: {raw!r}") from exc

    async def _generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if response_schema:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }

        url = f"{self.base_url}/{self.model}:generateContent"
        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        try:
            r = await client.post(url, params={"key": self.api_key}, json=payload)
            r.raise_for_status()
            data = r.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Gemini request failed: {exc}") from exc
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ExternalServiceError("Unexpected Gemini response") from exc
        finally:
            if self._client is None:
                await client.aclose()
