import pytest

from pixel_genie.llm import service
from pixel_genie.llm.provider_config import SYSTEM_MESSAGE, load_key
from pixel_genie.prompting.prompt_builder import (
    PIXEL_ART_STYLE_RULES,
    build_refinement_prompt,
    clean_refined_prompt,
)


def test_refinement_prompt_embeds_stripped_idea_and_rules():
    prompt = build_refinement_prompt("  a cat  ")

    assert '"""\na cat\n"""' in prompt
    for rule in PIXEL_ART_STYLE_RULES:
        assert rule in prompt
    assert prompt.endswith("Refined prompt:")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  8-bit cat  ", "8-bit cat"),
        ('"8-bit cat"', "8-bit cat"),
        ("Refined prompt: 8-bit cat", "8-bit cat"),
        ("8-bit cat,\nlimited palette", "8-bit cat, limited palette"),
        ('""', ""),
        ("", ""),
    ],
)
def test_clean_refined_prompt(raw, expected):
    assert clean_refined_prompt(raw) == expected


def test_build_payload_carries_system_message_and_idea():
    payload = service.build_payload("a cat")

    assert payload["messages"][0] == {"role": "system", "content": SYSTEM_MESSAGE}
    assert payload["messages"][1]["role"] == "user"
    assert "a cat" in payload["messages"][1]["content"]


def test_refine_prompt_returns_cleaned_model_output(monkeypatch):
    sent = []

    def fake_send(payload):
        sent.append(payload)
        return '"8-bit pixel art of a cat, limited palette"'

    monkeypatch.setattr(service, "send_request", fake_send)

    assert service.refine_prompt("a cat") == "8-bit pixel art of a cat, limited palette"
    assert len(sent) == 1


def test_refine_prompt_rejects_empty_output(monkeypatch):
    monkeypatch.setattr(service, "send_request", lambda payload: "   ")

    with pytest.raises(RuntimeError, match="empty refined prompt"):
        service.refine_prompt("a cat")


def test_load_key_prefers_environment(monkeypatch, tmp_path):
    key_file = tmp_path / "gemini.key"
    key_file.write_text("from-file\n")
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")

    assert load_key(str(key_file)) == "from-env"


def test_load_key_reads_file_and_handles_missing(monkeypatch, tmp_path):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    key_file = tmp_path / "gemini.key"
    key_file.write_text("from-file\n")

    assert load_key(str(key_file)) == "from-file"
    assert load_key(str(tmp_path / "missing.key")) is None
    assert load_key(None) is None
