import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from gitgraph.main import app
from gitgraph.main import create_app
from gitgraph.services.preview_service import InvalidMessageError
from gitgraph.services.preview_service import build_graphic
from gitgraph.settings import Settings


client = TestClient(app)


def test_health_live_returns_ok() -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_reads_limits_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("MESSAGE_MIN_LENGTH", "3")
    monkeypatch.setenv("GRID_MAX_WIDTH", "53")

    settings = Settings()

    assert settings.message_min_length == 3
    assert settings.grid_max_width == 53


def test_app_routes_use_settings_it_was_created_with(monkeypatch) -> None:
    monkeypatch.setenv("MESSAGE_MIN_LENGTH", "3")
    monkeypatch.setenv("MESSAGE_MAX_LENGTH", "5")
    env_client = TestClient(create_app())

    too_short = env_client.post("/preview", json={"message": "HI"})
    too_long = env_client.post("/validate", json={"message": "HELLO WORLD"})

    assert too_short.status_code == 400
    assert too_short.json() == {"detail": "Message too short (min 3)"}
    assert too_long.json()["valid"] is False
    assert too_long.json()["reason"] == "length"

    explicit = TestClient(create_app(Settings(message_min_length=1)))
    assert explicit.post("/preview", json={"message": "HI"}).status_code == 200


def test_validate_accepts_supported_message() -> None:
    response = client.post("/validate", json={"message": "hello world"})

    assert response.status_code == 200
    assert response.json() == {"valid": True, "reason": None, "detail": None}


def test_validate_reports_charset_failure() -> None:
    response = client.post("/validate", json={"message": "SPECIAL @#$%"})

    assert response.status_code == 200
    assert response.json() == {
        "valid": False,
        "reason": "charset",
        "detail": "Message contains unsupported characters",
    }


def test_non_ascii_message_is_rejected_before_upper_casing() -> None:
    checked = client.post("/validate", json={"message": "straße"})
    rendered = client.post("/preview", json={"message": "straße"})

    assert checked.json()["reason"] == "charset"
    assert rendered.status_code == 400
    assert rendered.json() == {"detail": "Message contains unsupported characters"}


def test_preview_returns_grid_and_schedule() -> None:
    response = client.post("/preview", json={"message": " a "})

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "A"
    assert payload["width"] == 3
    assert payload["fully_rendered"] is True
    assert len(payload["grid"]) == 52
    assert payload["grid"][0] == [0, 4, 4, 4, 4, 0, 0]
    assert len(payload["events"]) == 10
    assert payload["total_intensity"] == 40
    assert all(event["intensity"] == 4 for event in payload["events"])


def test_preview_rejects_invalid_message() -> None:
    response = client.post("/preview", json={"message": "   "})

    assert response.status_code == 400
    assert response.json() == {"detail": "Message too short (min 1)"}


def test_graphic_served_as_svg() -> None:
    response = client.get(
        "/graphic.svg", params={"message": "HELLO", "theme": "light"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    root = ET.fromstring(response.content)
    assert root.tag == "{http://www.w3.org/2000/svg}svg"
    assert "#216e39" in response.text


def test_graphic_rejects_unsupported_characters() -> None:
    response = client.get("/graphic.svg", params={"message": "<script>"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Message contains unsupported characters"}


def test_graphic_rejects_unknown_theme() -> None:
    response = client.get("/graphic.svg", params={"message": "HI", "theme": "sepia"})

    assert response.status_code == 422


def test_build_graphic_scrolls_messages_wider_than_calendar() -> None:
    svg = build_graphic("HELLO WORLD HELLO WORLD", Settings(), animation_type="fade")

    assert "animateTransform" in svg


def test_build_graphic_is_reproducible_with_seed() -> None:
    settings = Settings()

    first = build_graphic("HI", settings, animation_type="random", seed=5)
    second = build_graphic("HI", settings, animation_type="random", seed=5)

    assert first == second


def test_build_graphic_applies_configured_length_limit() -> None:
    settings = Settings(message_max_length=5)

    with pytest.raises(InvalidMessageError) as exc_info:
        build_graphic("TOO LONG", settings)

    assert exc_info.value.result.detail == "Message too long (max 5)"
