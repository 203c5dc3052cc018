"""Groq chat-completion integration for transcript credibility analysis."""

import json
import math
import re
from typing import Optional
from openai import OpenAI
from openai import APIError

from deepproof.config import Config
from deepproof.errors import MalformedResponseError, ValidationError
from deepproof.groq_client import create_client, to_transport_error
from deepproof.models import AnalysisRequest, AnalysisResult, Claim, ClaimStatus


SYSTEM_PROMPT = (
    "You are an impartial forensic content analyst. You evaluate video transcripts "
    "for factual accuracy. You do NOT assume content is fake or manipulated by default "
    "— most videos are authentic. Always respond with valid JSON only."
)

# Credibility analysis prompt. The scoring rules are the decision policy:
# start low, only move up on concrete evidence of falsehood.
ANALYSIS_PROMPT = """Analyze the following video transcript for factual accuracy.

**Video metadata:**
- File: {file_name}
- Duration: {duration}
- Resolution: {resolution}
- Detected language: {language}

**Transcript:**
{transcript}

Respond with ONLY valid JSON in this exact format:
{{
  "overallScore": <number 0-100>,
  "explanation": "<2-4 sentence analysis summary. Reference specific claims. Explain your reasoning.>",
  "claims": [
    {{
      "text": "<exact or paraphrased claim from the transcript>",
      "status": "<confirmed | contradicted | unconfirmed>",
      "source": "<knowledge base or source used to evaluate>",
      "detail": "<1-2 sentence explanation>"
    }}
  ]
}}

**Scoring guidelines (follow these strictly):**
- 0-20: Content is clearly authentic — claims are verifiable and confirmed, language is natural
- 20-40: Mostly credible — most claims check out, minor uncertainties
- 40-60: Mixed signals — some claims are contradicted or unverifiable, but not conclusive
- 60-80: Suspicious — multiple contradicted claims, clear factual errors, or misleading framing
- 80-100: Highly likely manipulated — major claims are demonstrably false or fabricated

**Important rules:**
- Start from the assumption that the video is authentic (score ~15-25) and only increase the score if you find specific evidence of falsehood or manipulation
- "Unconfirmed" claims should NOT increase the score significantly — being unable to verify something does not mean it is fake
- Casual speech, opinions, and subjective statements are NOT evidence of manipulation
- Non-English content is NOT suspicious — evaluate the actual claims regardless of language
- Low resolution or short duration are NOT indicators of manipulation
- Extract 3-7 factual claims from the transcript
- Always return valid JSON"""

PARSE_ERROR = "Failed to parse AI response"
MISSING_FIELDS_ERROR = "AI response missing required fields (overallScore, explanation, claims)"


def build_analysis_prompt(request: AnalysisRequest) -> str:
    return ANALYSIS_PROMPT.format(
        file_name=request.file_name or "unknown",
        duration=request.duration or "unknown",
        resolution=request.resolution or "unknown",
        language=request.language or "unknown",
        transcript=request.transcript,
    )


def strip_code_fences(text: str) -> str:
    """Remove ```json fences some models wrap around JSON output."""
    return re.sub(r"```json\s*|```\s*", "", text or "").strip()


def _parse_claim(raw: object) -> Optional[Claim]:
    if not isinstance(raw, dict):
        return None
    text = str(raw.get("text") or "").strip()
    if not text:
        return None

    try:
        status = ClaimStatus(str(raw.get("status", "")).strip().lower())
    except ValueError:
        status = ClaimStatus.UNCONFIRMED

    source = raw.get("source")
    return Claim(
        text=text,
        status=status,
        detail=str(raw.get("detail") or "").strip(),
        source=str(source).strip() if source else None,
    )


def parse_analysis(response_text: str) -> AnalysisResult:
    """
    Validate the model's JSON and build an AnalysisResult.

    Raises:
        MalformedResponseError: if the text is not JSON or lacks
            overallScore (number), explanation (non-empty) or claims (list)
    """
    try:
        analysis = json.loads(strip_code_fences(response_text))
    except json.JSONDecodeError as e:
        raise MalformedResponseError(PARSE_ERROR) from e

    return analysis_from_dict(analysis)


def analysis_from_dict(analysis: object) -> AnalysisResult:
    """
    Build an AnalysisResult from decoded JSON.

    Scores outside 0-100 are clamped, unknown claim statuses become
    'unconfirmed' and claims without text are dropped.
    """
    if not isinstance(analysis, dict):
        raise MalformedResponseError(MISSING_FIELDS_ERROR)

    score = analysis.get("overallScore")
    explanation = analysis.get("explanation")
    claims = analysis.get("claims")

    # bool is an int subclass, but true/false is not a score
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        raise MalformedResponseError(MISSING_FIELDS_ERROR)
    if not isinstance(explanation, str) or not explanation.strip():
        raise MalformedResponseError(MISSING_FIELDS_ERROR)
    if not isinstance(claims, list):
        raise MalformedResponseError(MISSING_FIELDS_ERROR)

    parsed_claims = tuple(claim for claim in map(_parse_claim, claims) if claim is not None)

    return AnalysisResult(
        overall_score=int(round(min(max(float(score), 0.0), 100.0))),
        explanation=explanation.strip(),
        claims=parsed_claims,
    )


def analyze_transcript(
    request: AnalysisRequest,
    client: Optional[OpenAI] = None,
) -> AnalysisResult:
    """
    Ask the language model for a credibility verdict on a transcript.

    Output is not deterministic: the same transcript can score differently
    on each call.

    Args:
        request: Transcript plus file name, duration, resolution and language
        client: Optional preconfigured client

    Returns:
        AnalysisResult

    Raises:
        ValidationError: if the transcript is blank (no API call is made)
        TransportError: if the API call fails
        MalformedResponseError: if the reply is not the expected JSON
    """
    if not request.transcript or not request.transcript.strip():
        raise ValidationError("No transcript provided")

    client = client or create_client()

    print(f"Analyzing transcript with {Config.ANALYSIS_MODEL}...")
    try:
        completion = client.chat.completions.create(
            model=Config.ANALYSIS_MODEL,
            max_tokens=Config.ANALYSIS_MAX_TOKENS,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_analysis_prompt(request)},
            ],
        )
    except APIError as e:
        raise to_transport_error(e) from e

    response_text = completion.choices[0].message.content if completion.choices else ""
    result = parse_analysis(response_text or "")

    print(f"✓ Analysis complete: score {result.overall_score}, {len(result.claims)} claims")
    return result
