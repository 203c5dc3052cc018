import json
import pytest

from deepproof import analyzer
from deepproof.analyzer import (
    MISSING_FIELDS_ERROR,
    PARSE_ERROR,
    analyze_transcript,
    build_analysis_prompt,
    parse_analysis,
    strip_code_fences,
)
from deepproof.config import Config
from deepproof.errors import MalformedResponseError, TransportError, ValidationError
from deepproof.models import AnalysisRequest, ClaimStatus

from conftest import VALID_ANALYSIS, connection_error, make_client


@pytest.fixture
def analysis_request():
    return AnalysisRequest(
        transcript="Hola a todos. Hoy llueve en Lisboa.",
        file_name="lisbon.mp4",
        duration="0:12",
        resolution="1280x720",
        language="es",
    )


class TestAnalyzeTranscript:

    def test_valid_reply_becomes_result(self, analysis_request):
        """A well-formed model reply is returned as an AnalysisResult."""
        # 1. Arrange
        client = make_client(chat_content=VALID_ANALYSIS)

        # 2. Act
        result = analyze_transcript(analysis_request, client=client)

        # 3. Assert
        assert result.overall_score == 18
        assert result.explanation.startswith("The speaker describes")
        assert [c.status for c in result.claims] == [ClaimStatus.CONFIRMED, ClaimStatus.UNCONFIRMED]
        assert result.claims[0].source == "Weather archives"
        assert result.claims[1].source is None

    def test_request_parameters(self, analysis_request):
        client = make_client(chat_content=VALID_ANALYSIS)

        analyze_transcript(analysis_request, client=client)

        call = client.chat.completions.calls[0]
        assert call["model"] == Config.ANALYSIS_MODEL
        assert call["max_tokens"] == Config.ANALYSIS_MAX_TOKENS
        assert call["response_format"] == {"type": "json_object"}
        assert call["messages"][0]["role"] == "system"
        assert "lisbon.mp4" in call["messages"][1]["content"]
        assert "Hoy llueve en Lisboa." in call["messages"][1]["content"]

    @pytest.mark.parametrize("transcript", ["", "   ", "\n\t"])
    def test_blank_transcript_makes_no_call(self, transcript):
        """Blank input fails before anything is sent upstream."""
        client = make_client(chat_content=VALID_ANALYSIS)

        with pytest.raises(ValidationError, match="No transcript provided"):
            analyze_transcript(AnalysisRequest(transcript=transcript), client=client)

        assert client.chat.completions.calls == []

    def test_non_json_reply(self, analysis_request):
        client = make_client(chat_content="Sure! Here's my analysis: it looks real.")

        with pytest.raises(MalformedResponseError) as exc_info:
            analyze_transcript(analysis_request, client=client)

        assert str(exc_info.value) == PARSE_ERROR
        assert exc_info.value.status_code == 502

    def test_transport_failure(self, analysis_request):
        client = make_client(error=connection_error())

        with pytest.raises(TransportError):
            analyze_transcript(analysis_request, client=client)

        assert len(client.chat.completions.calls) == 1

    def test_uses_default_client(self, analysis_request, monkeypatch):
        client = make_client(chat_content=VALID_ANALYSIS)
        monkeypatch.setattr(analyzer, "create_client", lambda: client)

        assert analyze_transcript(analysis_request).overall_score == 18


class TestParseAnalysis:

    def test_code_fences_are_stripped(self):
        text = '```json\n{"overallScore": 40, "explanation": "Mixed.", "claims": []}\n```'

        result = parse_analysis(text)

        assert result.overall_score == 40
        assert result.claims == ()

    def test_strip_code_fences_leaves_plain_json(self):
        assert strip_code_fences('{"a": 1}') == '{"a": 1}'
        assert strip_code_fences("```\n[1]\n```") == "[1]"

    @pytest.mark.parametrize("payload", [
        {"explanation": "x", "claims": []},
        {"overallScore": 10, "claims": []},
        {"overallScore": 10, "explanation": "", "claims": []},
        {"overallScore": 10, "explanation": "x"},
        {"overallScore": 10, "explanation": "x", "claims": "none"},
        {"overallScore": "10", "explanation": "x", "claims": []},
        {"overallScore": True, "explanation": "x", "claims": []},
        {"overallScore": float("nan"), "explanation": "x", "claims": []},
        {"overallScore": float("inf"), "explanation": "x", "claims": []},
    ])
    def test_missing_or_wrong_fields(self, payload):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_analysis(json.dumps(payload))

        assert str(exc_info.value) == MISSING_FIELDS_ERROR

    def test_json_array_is_rejected(self):
        with pytest.raises(MalformedResponseError, match="missing required fields"):
            parse_analysis("[1, 2, 3]")

    @pytest.mark.parametrize("raw, expected", [(-5, 0), (150, 100), (42.6, 43), (0, 0), (100, 100)])
    def test_score_is_clamped(self, raw, expected):
        result = parse_analysis(f'{{"overallScore": {raw}, "explanation": "x", "claims": []}}')
        assert result.overall_score == expected

    def test_claims_are_normalized(self):
        text = """{
            "overallScore": 70,
            "explanation": "Several claims are false.",
            "claims": [
                {"text": "The moon is cheese.", "status": "Contradicted", "detail": "It is rock."},
                {"text": "Odd status.", "status": "probably", "detail": ""},
                {"text": "", "status": "confirmed"},
                "not a claim"
            ]
        }"""

        result = parse_analysis(text)

        assert len(result.claims) == 2
        assert result.claims[0].status is ClaimStatus.CONTRADICTED
        assert result.claims[1].status is ClaimStatus.UNCONFIRMED


def test_prompt_includes_metadata_and_defaults():
    prompt = build_analysis_prompt(AnalysisRequest(transcript="Words."))

    assert "- File: unknown" in prompt
    assert "- Detected language: unknown" in prompt
    assert prompt.rstrip().endswith("Always return valid JSON")
    assert '"overallScore": <number 0-100>' in prompt
