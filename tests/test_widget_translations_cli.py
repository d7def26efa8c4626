from __future__ import annotations

import re

import pytest

from scripts.widget_translations import main
from shoptranslator.integrations.llm import Completion
from shoptranslator.integrations.rate_limit import RateGovernor
from shoptranslator.integrations.widgets import CatalogWidgetSource, Widget, WidgetType
from shoptranslator.services.translation import TranslationOrchestrator
from shoptranslator.services.widgets import WidgetTranslationService

_NUMBERED_LINE = re.compile(r"^\d+\. (.*)$", re.MULTILINE)


class EchoUpperClient:
    def __init__(self, *, configured: bool = True) -> None:
        self.configured = configured

    async def complete(self, *, system_prompt: str, user_prompt: str) -> Completion:
        return Completion(text="|||".join(t.upper() for t in _NUMBERED_LINE.findall(user_prompt)))


async def _no_sleep(_: float) -> None:
    return None


def _service(configured: bool = True) -> WidgetTranslationService:
    orchestrator = TranslationOrchestrator(
        EchoUpperClient(configured=configured),
        governor=RateGovernor("translation", sleep=_no_sleep),
        sleep=_no_sleep,
    )
    return WidgetTranslationService(
        orchestrator,
        source=CatalogWidgetSource(
            [
                Widget.from_texts(
                    id="size-1",
                    name="Size Guide",
                    type=WidgetType.SIZE_GUIDE,
                    texts=["Find your size", "Small"],
                )
            ]
        ),
    )


def test_main_prints_script_for_all_detected_widgets(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("scripts.widget_translations.build_service", lambda: _service())

    with pytest.raises(SystemExit) as exc:
        main(["--target-language", "fr"])

    assert exc.value.code == 0
    output = capsys.readouterr().out
    assert '"Find your size": "FIND YOUR SIZE",' in output
    assert "applyWidgetTranslations" in output


def test_main_writes_json_to_file(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setattr("scripts.widget_translations.build_service", lambda: _service())
    target = tmp_path / "widgets.json"

    with pytest.raises(SystemExit) as exc:
        main(["--target-language", "fr", "--widget", "size-1", "--format", "json", "--output", str(target)])

    assert exc.value.code == 0
    content = target.read_text(encoding="utf-8")
    assert '"translated_text": "SMALL"' in content


def test_main_reports_missing_credentials(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        "scripts.widget_translations.build_service", lambda: _service(configured=False)
    )

    with pytest.raises(SystemExit) as exc:
        main(["--target-language", "fr", "--widget", "size-1"])

    assert exc.value.code == 2
    assert "OpenAI API key not set" in capsys.readouterr().err
