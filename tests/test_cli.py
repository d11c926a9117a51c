"""Tests for the formlens CLI."""

import json
from pathlib import Path

import pytest

from conftest import make_raw_submission
from formlens.cli.main import build_parser, main


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """JSON data for the in-memory backends."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps({
        "submissions": [
            make_raw_submission("s1", first_name="Ann", email="ann@example.com"),
            make_raw_submission("s2", namespace="wix.bookings.form", created="2025-06-02T00:00:00Z", notes="x"),
            make_raw_submission("s3", first_name="Bo", created="2025-06-03T00:00:00Z"),
        ],
        "collections": {"posts": [{"_id": "p1", "title": "Hello"}]},
    }))
    return path


@pytest.fixture(autouse=True)
def no_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("FORMLENS_BACKEND", "FORMLENS_BASE_URL", "FORMLENS_NAMESPACES", "FORMLENS_COLLECTIONS"):
        monkeypatch.delenv(key, raising=False)


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> dict:
    main(list(argv))
    return json.loads(capsys.readouterr().out)


class TestParser:
    """Tests for argument parsing."""

    def test_requires_command(self) -> None:
        """A subcommand is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_submissions_options(self) -> None:
        """submissions accepts paging, filters and sort."""
        args = build_parser().parse_args(
            ["submissions", "--namespace", "ns", "--limit", "5", "--sort-order", "asc", "--status", "PENDING"]
        )
        assert (args.namespace, args.limit, args.sort_order, args.status) == ("ns", 5, "asc", "PENDING")


class TestCommands:
    """End-to-end runs over the in-memory backends."""

    def test_submissions(self, capsys: pytest.CaptureFixture[str], data_file: Path) -> None:
        """Prints a QueryResult of normalized submissions."""
        body = _run(capsys, "submissions", "--namespace", "wix.form_app.form", "--data", str(data_file), "-q")
        assert [i["id"] for i in body["items"]] == ["s3", "s1"]
        assert body["totalCount"] == 2

    def test_forms(self, capsys: pytest.CaptureFixture[str], data_file: Path) -> None:
        """Prints the forms envelope."""
        body = _run(capsys, "forms", "--namespace", "wix.form_app.form", "--data", str(data_file), "-q")
        assert body["totalCount"] == 1
        assert body["items"][0]["submissionCount"] == 2

    def test_fields(self, capsys: pytest.CaptureFixture[str], data_file: Path) -> None:
        """Prints descriptors with statistics."""
        body = _run(capsys, "fields", "--namespace", "wix.form_app.form", "--data", str(data_file), "-q")
        assert body["recordCount"] == 2
        names = [f["name"] for f in body["fields"]]
        assert names == ["first_name", "email"]
        assert body["fields"][1]["type"] == "email"
        assert body["fields"][0]["statistics"]["totalResponses"] == 2

    def test_discover(self, capsys: pytest.CaptureFixture[str], data_file: Path, tmp_path: Path) -> None:
        """Discovers the namespaces with data in scan order."""
        config = tmp_path / "settings.yaml"
        config.write_text("discovery:\n  probe_interval: 0\n")
        body = _run(
            capsys, "discover", "--namespaces", "wix.bookings.form,empty.ns,wix.form_app.form",
            "--data", str(data_file), "--config", str(config), "-q",
        )
        assert [s["sourceId"] for s in body["found"]] == ["wix.bookings.form", "wix.form_app.form"]
        assert body["report"][1] == "empty.ns: no records"

    def test_discover_collections(self, capsys: pytest.CaptureFixture[str], data_file: Path, tmp_path: Path) -> None:
        """Without configured collections, every listed collection is probed."""
        config = tmp_path / "settings.yaml"
        config.write_text("discovery:\n  probe_interval: 0\n")
        body = _run(capsys, "discover", "--collections", "--data", str(data_file), "--config", str(config), "-q")
        assert [(s["sourceId"], s["recordCount"]) for s in body["found"]] == [("posts", 1)]

    def test_output_file(self, capsys: pytest.CaptureFixture[str], data_file: Path, tmp_path: Path) -> None:
        """--output writes JSON to a file."""
        out = tmp_path / "out.json"
        main(["forms", "--namespace", "wix.form_app.form", "--data", str(data_file), "--output", str(out), "-q"])
        assert json.loads(out.read_text())["totalCount"] == 1

    def test_http_without_base_url(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The http backend needs a base URL."""
        with pytest.raises(SystemExit):
            main(["forms", "--namespace", "ns", "-q"])
