from __future__ import annotations

from shoptranslator.services import prompt_codec
from shoptranslator.services.batching import partition
from shoptranslator.services.fragments import TranslationRequest


def _batch(*texts: str):
    requests = [
        TranslationRequest(source_id="7", field=f"text_{i}", original_text=text)
        for i, text in enumerate(texts)
    ]
    return partition(requests, 10)[0]


def test_encode_numbers_texts_and_demands_exact_count() -> None:
    prompt = prompt_codec.encode(_batch("Blue Shirt", "Soft cotton"), "es", "product")

    assert "1. Blue Shirt\n2. Soft cotton" in prompt
    assert "Spanish" in prompt
    assert "exactly 2 translations" in prompt
    assert '"|||"' in prompt


def test_encode_passes_unknown_language_codes_through() -> None:
    prompt = prompt_codec.encode(_batch("Hello"), "nl", "general")

    assert "to nl." in prompt


def test_system_prompt_selects_context_guidance() -> None:
    assert "marketing tone" in prompt_codec.system_prompt("product")
    assert "concise and appealing" in prompt_codec.system_prompt("collection")
    assert "structure" in prompt_codec.system_prompt("page")
    assert "user-friendly" in prompt_codec.system_prompt("widget")
    assert prompt_codec.system_prompt("unknown") == prompt_codec.system_prompt("general")


def test_decode_zips_pieces_back_by_position() -> None:
    batch = _batch("Blue Shirt", "Soft cotton")

    results = prompt_codec.decode(" Camisa Azul ||| Algodón suave \n", batch)

    assert [(r.original_text, r.translated_text) for r in results] == [
        ("Blue Shirt", "Camisa Azul"),
        ("Soft cotton", "Algodón suave"),
    ]
    assert not any(r.fallback for r in results)


def test_decode_falls_back_to_source_for_missing_tail() -> None:
    batch = _batch("One", "Two", "Three")

    results = prompt_codec.decode("Uno|||Dos", batch)

    assert [r.translated_text for r in results] == ["Uno", "Dos", "Three"]
    assert [r.fallback for r in results] == [False, False, True]


def test_decode_discards_surplus_pieces() -> None:
    batch = _batch("One", "Two")

    results = prompt_codec.decode("Uno|||Dos|||Tres|||Cuatro", batch)

    assert [r.translated_text for r in results] == ["Uno", "Dos"]


def test_decode_never_returns_blank_translations() -> None:
    batch = _batch("One", "Two")

    assert [r.translated_text for r in prompt_codec.decode("", batch)] == ["One", "Two"]
    assert [r.translated_text for r in prompt_codec.decode(None, batch)] == ["One", "Two"]
    assert [r.translated_text for r in prompt_codec.decode("Uno|||   ", batch)] == ["Uno", "Two"]
