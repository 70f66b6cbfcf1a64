from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from symdelete.api import main
from symdelete.batch.dictionary_source import DictionarySourceError
from symdelete.common.config import Settings
from symdelete.spellcheck.builder import BuildAbortedError, ReadinessGate, build_index


def _configure(monkeypatch, dictionary: Path, *, max_distance: int = 2) -> None:
    monkeypatch.setattr(
        main,
        "settings",
        Settings(
            dictionary_path=str(dictionary),
            max_distance=max_distance,
            build_workers=2,
            build_chunk_size=2,
        ),
    )
    monkeypatch.setattr(main, "suggestion_service", main.SuggestionService())


def _dictionary(tmp_path: Path) -> Path:
    path = tmp_path / "words.txt"
    path.write_text("tub\ntube\ntubes\ntuber\n", encoding="utf-8")
    return path


def test_suggest_returns_ranked_suggestions(monkeypatch, tmp_path: Path) -> None:
    _configure(monkeypatch, _dictionary(tmp_path))

    with TestClient(main.app) as client:
        response = client.get("/suggest", params={"q": "Tubr"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["query"] == "tubr"
    assert payload["max_distance"] == 2
    assert [(s["word"], s["distance"]) for s in payload["suggestions"]] == [
        ("tub", 1),
        ("tube", 1),
        ("tuber", 1),
        ("tubes", 2),
    ]


def test_suggest_limit_and_closest(monkeypatch, tmp_path: Path) -> None:
    _configure(monkeypatch, _dictionary(tmp_path))

    with TestClient(main.app) as client:
        limited = client.get("/suggest", params={"q": "tubr", "limit": 1}).json()
        closest = client.get("/suggest", params={"q": "tubr", "closest": "true"}).json()

    assert [s["word"] for s in limited["suggestions"]] == ["tub"]
    assert [s["word"] for s in closest["suggestions"]] == ["tub", "tube", "tuber"]


def test_suggest_without_matches_returns_empty_list(monkeypatch, tmp_path: Path) -> None:
    _configure(monkeypatch, _dictionary(tmp_path), max_distance=1)

    with TestClient(main.app) as client:
        response = client.get("/suggest", params={"q": "dog"})
        health = client.get("/health").json()

    assert response.status_code == 200
    assert response.json()["suggestions"] == []
    assert health == {"status": "ready", "words": 4}


def test_suggest_requires_query(monkeypatch, tmp_path: Path) -> None:
    _configure(monkeypatch, _dictionary(tmp_path))

    with TestClient(main.app) as client:
        response = client.get("/suggest", params={"q": ""})

    assert response.status_code == 422


def test_missing_dictionary_aborts_startup(monkeypatch, tmp_path: Path) -> None:
    _configure(monkeypatch, tmp_path / "missing.txt")

    with pytest.raises(DictionarySourceError):
        with TestClient(main.app):
            pass


def test_service_observes_gate_once() -> None:
    gate = ReadinessGate()
    service = main.SuggestionService()
    service.attach(gate)
    assert service.status == "building"

    gate.open(build_index(["cat", "act"], max_distance=1))
    first = service.suggest("cat")

    assert service.status == "ready"
    assert [(s.word, s.distance) for s in first.suggestions] == [("cat", 0), ("act", 1)]
    assert service.suggest("cat") == first


def test_service_without_index_is_unavailable() -> None:
    service = main.SuggestionService()
    assert service.status == "idle"
    with pytest.raises(main.IndexUnavailableError):
        service.suggest("cat")

    gate = ReadinessGate()
    gate.fail(BuildAbortedError("aborted"))
    service.attach(gate)

    assert service.status == "failed"
    with pytest.raises(main.IndexUnavailableError):
        service.suggest("cat")


class _AbortedBuilder:
    def __init__(self, *_args, **_kwargs) -> None:
        self.gate = ReadinessGate()

    def start(self, _words) -> ReadinessGate:
        self.gate.fail(BuildAbortedError("index build was aborted"))
        return self.gate

    def abort(self) -> None:
        pass


def test_lifespan_builds_in_background_and_suggest_reports_failed_build(monkeypatch, tmp_path: Path) -> None:
    _configure(monkeypatch, _dictionary(tmp_path))
    monkeypatch.setattr(main, "IndexBuilder", _AbortedBuilder)

    with TestClient(main.app) as client:
        response = client.get("/suggest", params={"q": "tubr"})
        health = client.get("/health").json()

    assert response.status_code == 503
    assert "aborted" in response.json()["detail"]
    assert health == {"status": "failed", "words": 0}
