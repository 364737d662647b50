from __future__ import annotations

import pytest

from scopeline.runtime import telemetry


@pytest.fixture(autouse=True)
def restore_default_config():
    yield
    telemetry.configure()


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")


def test_get_logger_is_cached_per_name() -> None:
    telemetry.configure(preset="quiet")

    assert telemetry.get_logger("scopeline.tests") is telemetry.get_logger(
        "scopeline.tests"
    )


def test_span_reraises_and_records_metadata() -> None:
    telemetry.configure(preset="quiet")

    with pytest.raises(RuntimeError):
        with telemetry.span(
            "tests::span", component=True, metadata={"line": 3}
        ) as handle:
            handle.add_metadata("scope_count", 2)
            assert handle.metadata == {"line": "3", "scope_count": "2"}
            assert handle.component_name == "tests::span"
            raise RuntimeError("boom")


def test_record_event_rejects_unknown_level() -> None:
    telemetry.configure(preset="quiet")

    telemetry.record_event("tests.event", level="debug", data={"line": 1})
    with pytest.raises(ValueError):
        telemetry.record_event("tests.event", level="shout")


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCOPELINE_INJECTION_DEPTH", "7")
    monkeypatch.setenv("SCOPELINE_FIRST_LINE", "not-a-number")

    assert telemetry.env_int("INJECTION_DEPTH", 4) == 7
    assert telemetry.env_int("FIRST_LINE", 0) == 0
    assert telemetry.env_int("MISSING_SETTING", 9) == 9
    assert telemetry.env_setting("INJECTION_DEPTH") == "7"
