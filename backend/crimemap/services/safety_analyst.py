"""AI safety analysis generated by Gemini, cached per perimeter."""

import json
import logging
from datetime import UTC, datetime

import google.generativeai as genai
from pydantic import ValidationError

from crimemap.config import get_settings
from crimemap.schemas.analysis import AISafetyAnalysis, SafetyAnalysisRequest
from crimemap.services.cache import ResponseCache
from crimemap.services.errors import UpstreamServiceError
from crimemap.services.risk_levels import RISK_LEVEL_DESCRIPTIONS

logger = logging.getLogger(__name__)
settings = get_settings()


def build_safety_prompt(summary: SafetyAnalysisRequest) -> str:
    """Prompt for a Muntinlupa-specific safety advisor."""
    if summary.crime_types:
        breakdown = "\n".join(
            f"- {c.type}: {c.count} incidents ({c.percentage:g}%)"
            for c in summary.crime_types[:5]
        )
    else:
        breakdown = "No specific crime type data available"

    lat, lng = summary.coordinates.lat, summary.coordinates.lng
    description = RISK_LEVEL_DESCRIPTIONS.get(summary.risk_level, "Unknown")

    return f"""You are a safety advisor analyzing crime data for a location in Muntinlupa City, Philippines.
Provide practical, culturally-appropriate safety advice based on the following data:

LOCATION: Coordinates ({lat:.4f}, {lng:.4f}) in Muntinlupa City
RISK LEVEL: {summary.risk_level.value} - {description}
TOTAL CRIMES (300m radius): {summary.crime_count} incidents

CRIME TYPE BREAKDOWN:
{breakdown}

INSTRUCTIONS:
1. Generate exactly 3 Risk Explanations analyzing why this area has its current risk level based on the crime types present
2. Generate exactly 3 Safety Tips with actionable advice specific to the crime types in this area
3. Consider local context (barangay patrols, tanod, local emergency numbers like 911 or local police)
4. Keep all responses concise and practical for everyday citizens
5. Focus on prevention and awareness, not fear-inducing language
6. If the area is low risk, still provide helpful general safety tips

RESPONSE FORMAT (JSON):
{{
  "riskExplanations": [
    {{ "title": "short title", "description": "1-2 sentence explanation", "severity": "low|medium|high" }}
  ],
  "safetyTips": [
    {{ "tip": "actionable advice", "context": "why this is relevant", "priority": "essential|recommended|optional" }}
  ],
  "timePatterns": [],
  "overallSummary": "1-2 sentence summary of overall safety situation"
}}

Return ONLY valid JSON, no additional text."""


def strip_code_fences(text: str) -> str:
    json_text = text.strip()
    if json_text.startswith("```json"):
        json_text = json_text[7:]
    elif json_text.startswith("```"):
        json_text = json_text[3:]
    if json_text.endswith("```"):
        json_text = json_text[:-3]
    return json_text.strip()


def parse_analysis(text: str) -> AISafetyAnalysis:
    """Parse and schema-check the model output."""
    json_text = strip_code_fences(text)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response: {json_text[:500]}")
        raise UpstreamServiceError(
            "Failed to parse AI response. The model returned invalid JSON."
        ) from e

    try:
        analysis = AISafetyAnalysis.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid AI response structure: {e}")
        raise UpstreamServiceError("AI response is missing required fields") from e

    return analysis.model_copy(update={"generated_at": datetime.now(UTC)})


def analysis_cache_key(summary: SafetyAnalysisRequest, filter_signature: str = "") -> str:
    """Rounded (~110m) coordinates + risk summary + top-3 crime type fingerprint."""
    crime_hash = "|".join(f"{c.type}:{c.count}" for c in summary.crime_types[:3])
    return (
        f"{summary.coordinates.lat:.3f},{summary.coordinates.lng:.3f}"
        f"|{summary.risk_level.value}|{summary.crime_count}|{crime_hash}|{filter_signature}"
    )


class SafetyAnalyst:
    """
    Generates structured safety advice for a risk summary.

    Results are cached so repeated lookups of the same perimeter do not hit
    the paid API. Every failure surfaces as UpstreamServiceError.
    """

    def __init__(
        self,
        cache: ResponseCache,
        api_key: str | None = settings.gemini_api_key,
        model_name: str = settings.gemini_model,
        cache_ttl: float = settings.analysis_cache_ttl_seconds,
    ):
        self.cache = cache
        self.api_key = api_key
        self.model_name = model_name
        self.cache_ttl = cache_ttl

    async def _generate(self, prompt: str) -> str:
        if not self.api_key:
            raise UpstreamServiceError("Gemini API key is not configured")

        try:
            genai.configure(api_key=self.api_key)
            model = genai.GenerativeModel(
                self.model_name,
                generation_config=genai.types.GenerationConfig(
                    temperature=0.3,
                    top_p=0.8,
                    top_k=40,
                    max_output_tokens=8192,
                    response_mime_type="application/json",
                ),
            )
            result = await model.generate_content_async(prompt)
            return result.text
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamServiceError(f"Gemini request failed: {e}") from e

    async def analyze(
        self,
        summary: SafetyAnalysisRequest,
        filter_signature: str = "",
    ) -> tuple[AISafetyAnalysis, bool]:
        """Return (analysis, served_from_cache)."""
        key = analysis_cache_key(summary, filter_signature)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Returning cached AI analysis")
            return cached, True

        logger.info(f"Generating AI safety analysis for risk level: {summary.risk_level.value}")
        text = await self._generate(build_safety_prompt(summary))
        analysis = parse_analysis(text)

        self.cache.set(key, analysis, self.cache_ttl)
        return analysis, False
