"""CLI integration smoke tests."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from sieve import __version__
from sieve.cli import app, parse_query

runner = CliRunner()


def _write_vectors(path: Path) -> Path:
    lines = [
        {"id": 10, "vector": [1.0, 2.0]},
        {"id": 11, "vector": [3.0, 4.0]},
        {"id": 12, "vector": [1.0, 2.0]},
        {"id": 13, "vector": [10.0, 10.0]},
    ]
    path.write_text("".join(json.dumps(line) + "\n" for line in lines))
    return path


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_parse_query() -> None:
    assert parse_query("1, 2.5,-3") == [1.0, 2.5, -3.0]


def test_search_prints_ranked_results(tmp_path: Path, override_settings) -> None:
    vectors = _write_vectors(tmp_path / "vectors.jsonl")

    result = runner.invoke(app, ["search", str(vectors), "--query", "1,2", "--top-k", "2"])

    assert result.exit_code == 0, result.stdout
    lines = result.stdout.strip().splitlines()
    assert len(lines) == 2
    assert "id=10" in lines[0]
    assert "distance=0" in lines[0]
    assert "id=11" in lines[1]


def test_search_json_uses_default_top_k(tmp_path: Path, override_settings) -> None:
    vectors = _write_vectors(tmp_path / "vectors.jsonl")

    result = runner.invoke(app, ["search", str(vectors), "-q", "10,10", "--json"])

    assert result.exit_code == 0, result.stdout
    hits = [json.loads(line) for line in result.stdout.strip().splitlines()]
    assert len(hits) == override_settings.default_top_k
    assert hits[0] == {"id": 13, "distance": 0.0, "vector": [10.0, 10.0]}
    assert [hit["distance"] for hit in hits] == sorted(hit["distance"] for hit in hits)


def test_search_rejects_wrong_dimension(tmp_path: Path, override_settings) -> None:
    vectors = _write_vectors(tmp_path / "vectors.jsonl")

    result = runner.invoke(app, ["search", str(vectors), "--query", "1,2,3"])

    assert result.exit_code == 2
    assert "dimension" in result.output


def test_search_rejects_bad_leaf_size(tmp_path: Path, override_settings) -> None:
    vectors = _write_vectors(tmp_path / "vectors.jsonl")

    result = runner.invoke(
        app, ["search", str(vectors), "--query", "1,2", "--max-leaf-size", "1"]
    )

    assert result.exit_code == 2
    assert "max_leaf_size" in result.output


def test_search_reports_malformed_file(tmp_path: Path, override_settings) -> None:
    bad = tmp_path / "bad.jsonl"
    bad.write_text("{oops\n")

    result = runner.invoke(app, ["search", str(bad), "--query", "1"])

    assert result.exit_code == 2
    assert "invalid JSON" in result.output


def test_stats(tmp_path: Path, override_settings) -> None:
    vectors = _write_vectors(tmp_path / "vectors.jsonl")

    result = runner.invoke(app, ["stats", str(vectors), "--num-trees", "2"])

    assert result.exit_code == 0, result.stdout
    assert "Vectors supplied: 4" in result.stdout
    assert "Unique vectors: 3" in result.stdout
    assert "Dimension: 2" in result.stdout
    assert "tree 0:" in result.stdout
    assert "tree 1:" in result.stdout


def test_generate_then_search(tmp_path: Path, override_settings) -> None:
    output = tmp_path / "generated.jsonl"

    result = runner.invoke(
        app, ["generate", str(output), "--count", "50", "--dimension", "3", "--seed", "4"]
    )
    assert result.exit_code == 0, result.stdout
    assert "Wrote 50 vectors" in result.stdout
    first = json.loads(output.read_text().splitlines()[0])
    assert first["id"] == 0

    query = ",".join(str(value) for value in first["vector"])
    result = runner.invoke(app, ["search", str(output), "--query", query, "--json", "-k", "8"])
    assert result.exit_code == 0, result.stdout
    assert json.loads(result.stdout.splitlines()[0])["id"] == 0


def test_bench(override_settings) -> None:
    result = runner.invoke(
        app,
        ["bench", "--count", "200", "--dimension", "4", "--queries", "3", "--top-k", "5"],
    )

    assert result.exit_code == 0, result.stdout
    assert "Indexed 200 vectors" in result.stdout
    assert "Recall@5:" in result.stdout


def test_log_level_validation(tmp_path: Path, override_settings) -> None:
    vectors = _write_vectors(tmp_path / "vectors.jsonl")
    result = runner.invoke(app, ["--log-level", "chatty", "stats", str(vectors)])
    assert result.exit_code != 0
