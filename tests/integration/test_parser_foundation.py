"""Integration tests for parser/srp.py over saved result-page fixtures."""

from __future__ import annotations

import io
import json

import pytest

import parser
from parser import fields


def _json_lines(stdout: str) -> list[dict]:
    """Parse JSON log lines emitted by the parser."""
    lines = [line.strip() for line in stdout.splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


@pytest.mark.integration
def test_sample_fixture_matches_expected_output(stage, sample_html, expected_sample):
    """Four cards in document order; only the two artwork tiles carry years."""
    result = stage.parse(sample_html, run_id="run-1")

    assert result == expected_sample
    records = result["sample title"]
    assert len(records) == 4
    assert ["extensions" in record for record in records] == [True, False, True, False]


@pytest.mark.integration
def test_parse_file_reads_bytes_from_disk(stage, html_fixtures_dir, expected_sample):
    """parse_file yields the same result as parsing the text."""
    assert stage.parse_file(html_fixtures_dir / "sample.html") == expected_sample


@pytest.mark.integration
def test_parse_accepts_open_handles(sample_html, expected_sample):
    """Text and binary handles are both accepted by the module-level entry point."""
    assert parser.parse(io.StringIO(sample_html)) == expected_sample
    assert parser.parse(io.BytesIO(sample_html.encode("utf-8"))) == expected_sample


@pytest.mark.integration
def test_zero_cards_keeps_title_with_empty_list(stage, html_fixtures_dir):
    """A page without cards maps its title to an empty list."""
    result = stage.parse_file(html_fixtures_dir / "no_cards.html")

    assert result == {"people also search for": []}


@pytest.mark.integration
def test_missing_title_uses_empty_key(stage):
    """Without a heading the section key is the empty string."""
    html = (
        '<div style="w:1"><a href="/only"><img id="x" alt="Only" data-src="https://t/x"></a></div>'
    )

    assert stage.parse(html) == {
        "": [
            {
                "name": "Only",
                "link": "https://www.google.com/only",
                "image": "https://t/x",
            }
        ]
    }


@pytest.mark.integration
def test_card_without_href_links_to_origin(stage):
    """An anchor missing href still gets a link: the bare origin."""
    html = '<div style="x"><a><img alt="N" data-src="d"></a></div>'

    assert stage.parse(html) == {
        "": [{"name": "N", "link": "https://www.google.com", "image": "d"}]
    }


@pytest.mark.integration
def test_empty_document_yields_empty_section(stage):
    """Empty input is still a document: no title, no cards."""
    assert stage.parse("") == {"": []}


@pytest.mark.integration
def test_missing_file_yields_empty_mapping(stage, tmp_path, capsys):
    """An unreadable path degrades to {} and logs a document error."""
    missing = tmp_path / "does-not-exist.html"

    result = stage.parse_file(missing, run_id="run-missing")

    assert result == {}
    events = _json_lines(capsys.readouterr().out)
    assert events[-1]["event_type"] == "srp_document_error"
    assert events[-1]["stage"] == "document"
    assert events[-1]["error_type"] == "FileNotFoundError"
    assert events[-1]["source"] == str(missing)


@pytest.mark.integration
def test_unsupported_source_type_yields_empty_mapping(stage, capsys):
    """Inputs that are not text, bytes or handles are document-level failures."""
    assert stage.parse(12345) == {}

    events = _json_lines(capsys.readouterr().out)
    assert events[-1]["error_type"] == "TypeError"


@pytest.mark.integration
def test_latin1_bytes_are_decoded(stage):
    """Bytes that are not UTF-8 still parse through the fallback encodings."""
    html = '<div aria-level="2" role="heading"><span>Caf\xe9 Results</span></div>'

    assert stage.parse(html.encode("latin-1")) == {"café results": []}


@pytest.mark.integration
def test_field_failure_is_isolated_to_one_card(stage, sample_html, expected_sample, monkeypatch):
    """A name extractor failing on one card leaves other cards and fields intact."""
    original = fields.extract_name

    def flaky_name(card):
        if card.get("href") == "/search?q=Sample+Item+3":
            raise AttributeError("no alt")
        return original(card)

    monkeypatch.setattr(fields, "extract_name", flaky_name)

    records = stage.parse(sample_html)["sample title"]

    expected_records = expected_sample["sample title"]
    assert records[2] == {**expected_records[2], "name": None}
    assert records[:2] == expected_records[:2]
    assert records[3] == expected_records[3]


@pytest.mark.integration
def test_card_locator_failure_degrades_to_empty_list(stage, sample_html, monkeypatch, capsys):
    """A raising stage is logged and its result degrades; later stages still run."""
    monkeypatch.setattr("parser.selectors.CARD_ANCHORS", _RaisingQuery())

    result = stage.parse(sample_html, run_id="run-locator")

    assert result == {"sample title": []}
    events = _json_lines(capsys.readouterr().out)
    stage_events = [event for event in events if event["event_type"] == "srp_stage_error"]
    assert stage_events[-1]["stage"] == "card_locator"
    assert stage_events[-1]["run_id"] == "run-locator"


@pytest.mark.integration
def test_image_index_failure_falls_back_to_data_src(stage, sample_html, monkeypatch, capsys):
    """If the image index cannot be built, every image falls back to data-src."""

    def broken_index(soup, run_id=None):
        raise ValueError("index boom")

    monkeypatch.setattr("parser.srp.build_image_index", broken_index)

    records = stage.parse(sample_html)["sample title"]

    assert [record["image"] for record in records] == [
        "https://encrypted-tbn0.gstatic.com/images?q=tbn:one",
        "https://encrypted-tbn0.gstatic.com/images?q=tbn:two",
        "https://encrypted-tbn0.gstatic.com/images?q=tbn:three",
        "https://encrypted-tbn0.gstatic.com/images?q=tbn:four",
    ]
    events = _json_lines(capsys.readouterr().out)
    assert any(event.get("stage") == "image_index" for event in events)


@pytest.mark.integration
def test_undecodable_image_literal_nulls_only_that_image(stage, sample_html):
    """An unsupported escape in one script nulls that card's image only."""
    broken = sample_html.replace(r"\x2F9j\x2FSampleOne", r"\q9j/SampleOne")

    records = stage.parse(broken)["sample title"]

    assert records[0]["image"] is None
    assert records[0]["name"] == "Sample Item 1"
    assert records[1]["image"] == "data:image/jpeg;base64,/9j/SampleTwo"


@pytest.mark.integration
def test_parse_is_deterministic_and_does_not_share_state(stage, sample_html, html_fixtures_dir):
    """Parsing one document never leaks images or titles into the next."""
    first = stage.parse(sample_html)
    empty = stage.parse_file(html_fixtures_dir / "no_cards.html")
    second = stage.parse(sample_html)

    assert first == second
    assert empty == {"people also search for": []}


class _RaisingQuery:
    """Query stand-in whose selection always fails."""

    def select(self, root):
        raise RuntimeError("locator boom")
