"""Tests for CLI interface."""

import json
from pathlib import Path

import pytest

from src.rag.cli import SAMPLE_TEXTS, main, parse_filters, run_demo


@pytest.fixture
def corpus(tmp_path: Path) -> list[Path]:
    """Write two small text files to ingest."""
    cats = tmp_path / "cats.txt"
    cats.write_text("Cats purr when they are content. Cats sleep most of the day.")
    rust = tmp_path / "rust.txt"
    rust.write_text("Rust prevents memory errors. The borrow checker enforces ownership.")
    return [cats, rust]


class TestDemo:
    async def test_demo_runs_successfully(self, capsys: pytest.CaptureFixture[str]) -> None:
        await run_demo("What is semantic search?")
        captured = capsys.readouterr()
        assert "Semantic Retrieval - Demo Mode" in captured.out
        assert "Ingesting" in captured.out
        assert "Results:" in captured.out
        assert "JSON output:" in captured.out

    def test_sample_texts_valid(self) -> None:
        assert len(SAMPLE_TEXTS) >= 3
        for source, text in SAMPLE_TEXTS.items():
            assert source
            assert text.strip()

    def test_main_demo(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["demo", "--query", "How are chunks split?"])
        captured = capsys.readouterr()
        payload = json.loads(captured.out.split("JSON output:", 1)[1])
        assert payload["query"] == "How are chunks split?"
        assert len(payload["results"]) == 3


class TestIngestAndQuery:
    def test_ingest_writes_snapshot(
        self, tmp_path: Path, corpus: list[Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", *map(str, corpus), "--snapshot", str(snapshot)])

        captured = capsys.readouterr()
        assert "from 2 files" in captured.out
        records = json.loads(snapshot.read_text())
        assert {r["id"].split("::")[0] for r in records} == {"cats.txt", "rust.txt"}
        assert all(len(r["embedding"]) == 384 for r in records)

    def test_ingest_appends_to_existing_snapshot(
        self, tmp_path: Path, corpus: list[Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", str(corpus[0]), "--snapshot", str(snapshot)])
        first = len(json.loads(snapshot.read_text()))
        main(["ingest", str(corpus[1]), "--snapshot", str(snapshot)])

        assert len(json.loads(snapshot.read_text())) > first

    def test_ingest_skips_missing_files(
        self, tmp_path: Path, corpus: list[Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", str(corpus[0]), str(tmp_path / "nope.txt"), "--snapshot", str(snapshot)])
        captured = capsys.readouterr()
        assert "WARNING: File not found" in captured.out
        assert "from 1 files" in captured.out

    def test_ingest_without_valid_files_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["ingest", str(tmp_path / "nope.txt"), "--snapshot", str(tmp_path / "i.json")])
        assert not (tmp_path / "i.json").exists()

    def test_query_returns_json(
        self, tmp_path: Path, corpus: list[Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", *map(str, corpus), "--snapshot", str(snapshot)])
        capsys.readouterr()

        main(["query", "Cats purr", "--snapshot", str(snapshot), "--top-k", "1"])
        data = json.loads(capsys.readouterr().out)
        assert data["query"] == "Cats purr"
        assert data["result_count"] == 1
        assert set(data["results"][0]) == {"id", "score", "content", "metadata"}

    def test_query_with_filter(
        self, tmp_path: Path, corpus: list[Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", *map(str, corpus), "--snapshot", str(snapshot)])
        capsys.readouterr()

        main([
            "query", "memory safety",
            "--snapshot", str(snapshot),
            "--filter", f"source={corpus[0]}",
        ])
        data = json.loads(capsys.readouterr().out)
        assert data["result_count"] >= 1
        assert all(r["metadata"]["source"] == str(corpus[0]) for r in data["results"])

    def test_query_unknown_metric_returns_nothing(
        self, tmp_path: Path, corpus: list[Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", *map(str, corpus), "--snapshot", str(snapshot)])
        capsys.readouterr()

        main(["query", "cats", "--snapshot", str(snapshot), "--metric", "manhattan"])
        assert json.loads(capsys.readouterr().out)["result_count"] == 0

    def test_query_uses_configured_metric_by_default(
        self,
        tmp_path: Path,
        corpus: list[Path],
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        snapshot = tmp_path / "index.json"
        main(["ingest", *map(str, corpus), "--snapshot", str(snapshot)])
        capsys.readouterr()

        monkeypatch.setenv("RAG_METRIC", "manhattan")
        main(["query", "cats", "--snapshot", str(snapshot)])
        assert json.loads(capsys.readouterr().out)["result_count"] == 0

    def test_snapshot_commands_stay_in_memory(
        self,
        tmp_path: Path,
        corpus: list[Path],
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("RAG_STORE_BACKEND", "postgres")
        monkeypatch.delenv("RAG_DATABASE_URL", raising=False)
        snapshot = tmp_path / "index.json"
        main(["ingest", *map(str, corpus), "--snapshot", str(snapshot)])
        capsys.readouterr()

        main(["query", "cats", "--snapshot", str(snapshot)])
        assert json.loads(capsys.readouterr().out)["result_count"] >= 1

    def test_query_missing_snapshot_exits(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit):
            main(["query", "anything", "--snapshot", str(tmp_path / "missing.json")])
        assert "Snapshot not found" in capsys.readouterr().out


class TestParseFilters:
    def test_values_read_as_json(self) -> None:
        assert parse_filters(["lang=en", "n=3", "flag=true", 'tags=["a"]']) == {
            "lang": "en",
            "n": 3,
            "flag": True,
            "tags": ["a"],
        }

    def test_value_may_contain_equals(self) -> None:
        assert parse_filters(["expr=a=b"]) == {"expr": "a=b"}

    def test_invalid_pair_exits(self) -> None:
        with pytest.raises(SystemExit):
            parse_filters(["novalue"])
        with pytest.raises(SystemExit):
            parse_filters(["=x"])


def test_main_no_args() -> None:
    with pytest.raises(SystemExit):
        main([])
