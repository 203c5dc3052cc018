import pytest

from deepproof.config import Config
from deepproof.errors import MalformedResponseError, TransportError, ValidationError
from deepproof.models import TranscriptSegment
from deepproof.translator import apply_translations, number_segments, translate_segments

from conftest import auth_error, make_client


def test_translates_every_segment_in_order(sample_segments):
    client = make_client(chat_content={
        "translations": ["Hello everyone.", "Today it rains in Lisbon.", "It was a huge storm."]
    })

    result = translate_segments(sample_segments, "es", client=client)

    assert [s.text for s in result] == ["Hello everyone.", "Today it rains in Lisbon.", "It was a huge storm."]
    assert [s.timestamp for s in result] == [s.timestamp for s in sample_segments]
    assert [s.speaker for s in result] == [s.speaker for s in sample_segments]


def test_request_is_one_batched_call(sample_segments):
    client = make_client(chat_content={"translations": ["a", "b", "c"]})

    translate_segments(sample_segments, "Spanish", client=client)

    calls = client.chat.completions.calls
    assert len(calls) == 1
    assert calls[0]["max_tokens"] == Config.TRANSLATION_MAX_TOKENS
    prompt = calls[0]["messages"][1]["content"]
    assert "from Spanish to English" in prompt
    assert "[0] Hola a todos.\n[1] Hoy llueve en Lisboa.\n[2] Fue una tormenta enorme." in prompt


def test_missing_indices_keep_original_text(sample_segments):
    """Output length always equals input length."""
    client = make_client(chat_content={"translations": ["Hello everyone."]})

    result = translate_segments(sample_segments, "es", client=client)

    assert len(result) == 3
    assert result[0].text == "Hello everyone."
    assert result[1].text == "Hoy llueve en Lisboa."
    assert result[2].text == "Fue una tormenta enorme."


def test_empty_segments_make_no_call():
    client = make_client(chat_content={"translations": []})

    with pytest.raises(ValidationError, match="No segments provided"):
        translate_segments([], "es", client=client)

    assert client.chat.completions.calls == []


def test_unparseable_reply(sample_segments):
    client = make_client(chat_content="I cannot translate that.")

    with pytest.raises(MalformedResponseError, match="Failed to parse AI translation response"):
        translate_segments(sample_segments, "es", client=client)


@pytest.mark.parametrize("payload", [{"result": ["x"]}, {"translations": "x"}, ["x", "y"]])
def test_missing_translations_array(sample_segments, payload):
    client = make_client(chat_content=payload)

    with pytest.raises(MalformedResponseError, match="AI response missing translations array"):
        translate_segments(sample_segments, "es", client=client)


def test_api_error_becomes_transport_error(sample_segments):
    client = make_client(error=auth_error())

    with pytest.raises(TransportError) as exc_info:
        translate_segments(sample_segments, "es", client=client)

    assert exc_info.value.status_code == 401


def test_apply_translations_ignores_non_text_and_extra_entries(sample_segments):
    result = apply_translations(sample_segments, [None, "  Rain today.  ", 7, "extra"])

    assert [s.text for s in result] == ["Hola a todos.", "Rain today.", "Fue una tormenta enorme."]


def test_fallback_keeps_original_text_unchanged():
    """Untranslated segments come back byte-for-byte, whitespace included."""
    padded = [TranscriptSegment(timestamp="00:00", speaker="Speaker A", text="  Bonjour  ")]

    assert apply_translations(padded, [])[0].text == "  Bonjour  "
    assert apply_translations(padded, ["   "])[0].text == "  Bonjour  "
    assert apply_translations(padded, [" Hello "])[0].text == "Hello"


def test_number_segments(sample_segments):
    assert number_segments(sample_segments[:2]) == "[0] Hola a todos.\n[1] Hoy llueve en Lisboa."
