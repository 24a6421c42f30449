"""SRP parse stage: saved search-results HTML → {section title: [records]}."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Union

from bs4 import BeautifulSoup, Tag

from core.config import ExtractorConfig
from core.models import ImageIndex
from core.pipeline import ParseResult, ParseStage
from core.structured_logging import emit_error_event
from parser import selectors
from parser.fields import attempt, extract_record
from parser.images import build_image_index


HtmlSource = Union[str, bytes, IO[str], IO[bytes]]


def _decode_html_bytes(raw: bytes) -> str:
    """Decode HTML bytes using the configured encodings in order."""
    for encoding in ExtractorConfig.SOURCE_ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def _read_source(source: HtmlSource) -> str:
    """Return HTML text from a string, bytes, or readable handle."""
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, bytes):
        return _decode_html_bytes(source)
    if isinstance(source, str):
        return source
    raise TypeError(f"Unsupported HTML source type: {type(source).__name__}")


class SrpParseStage(ParseStage):
    """Extract result cards from saved search-results pages."""

    def __init__(self, features: str = ExtractorConfig.HTML_PARSER_FEATURES) -> None:
        """Initialize the BeautifulSoup tree builder used for every document."""
        self.features = features

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def parse_file(self, path: Path | str, run_id: str | None = None) -> ParseResult:
        """Parse one HTML file; unreadable files yield {}."""
        try:
            with open(path, "rb") as handle:
                raw = handle.read()
        except OSError as exc:
            self._emit_stage_error("document", exc, run_id=run_id, source=str(path))
            return {}
        return self.parse(raw, run_id=run_id, source_name=str(path))

    def parse(
        self,
        source: HtmlSource,
        run_id: str | None = None,
        source_name: str | None = None,
    ) -> ParseResult:
        """
        Parse HTML text, bytes, or a readable handle.

        Runs image index → section title → card locator → per-card fields.
        Never raises; a document-level failure yields {}.
        """
        try:
            soup = BeautifulSoup(_read_source(source), self.features)
            images = self._build_images(soup, run_id, source_name)
            title = self._find_title(soup, run_id, source_name)
            cards = self._find_cards(soup, run_id, source_name)
            records = self._parse_cards(cards, images, run_id, source_name)
            return {title or "": records}
        except Exception as exc:
            self._emit_stage_error("document", exc, run_id=run_id, source=source_name)
            return {}

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _build_images(
        self, soup: BeautifulSoup, run_id: str | None, source_name: str | None
    ) -> ImageIndex:
        try:
            return build_image_index(soup, run_id=run_id)
        except Exception as exc:
            self._emit_stage_error("image_index", exc, run_id=run_id, source=source_name)
            return ImageIndex()

    def _find_title(
        self, soup: BeautifulSoup, run_id: str | None, source_name: str | None
    ) -> str | None:
        try:
            span = selectors.SECTION_TITLE.select_one(soup)
            if span is None:
                return None
            return span.get_text().strip().lower()
        except Exception as exc:
            self._emit_stage_error("section_title", exc, run_id=run_id, source=source_name)
            return None

    def _find_cards(
        self, soup: BeautifulSoup, run_id: str | None, source_name: str | None
    ) -> list[Tag]:
        try:
            return selectors.CARD_ANCHORS.select(soup)
        except Exception as exc:
            self._emit_stage_error("card_locator", exc, run_id=run_id, source=source_name)
            return []

    def _parse_cards(
        self,
        cards: list[Tag],
        images: ImageIndex,
        run_id: str | None,
        source_name: str | None,
    ) -> list[dict[str, Any]]:
        try:
            records = [
                attempt(
                    lambda: extract_record(card, images, run_id=run_id, card_index=index),
                    field="card",
                    run_id=run_id,
                    card_index=index,
                )
                for index, card in enumerate(cards)
            ]
            return [record.to_dict() for record in records if record is not None]
        except Exception as exc:
            self._emit_stage_error("cards", exc, run_id=run_id, source=source_name)
            return []

    @staticmethod
    def _emit_stage_error(
        stage: str,
        error: BaseException,
        *,
        run_id: str | None,
        source: str | None,
    ) -> None:
        emit_error_event(
            "srp_stage_error" if stage != "document" else "srp_document_error",
            error,
            run_id=run_id,
            component="parser",
            stage=stage,
            source=source,
        )


_DEFAULT_STAGE = SrpParseStage()


def parse(source: HtmlSource, run_id: str | None = None) -> ParseResult:
    """Parse HTML text, bytes, or a readable handle with the default stage."""
    return _DEFAULT_STAGE.parse(source, run_id=run_id)


def parse_file(path: Path | str, run_id: str | None = None) -> ParseResult:
    """Parse one HTML file with the default stage."""
    return _DEFAULT_STAGE.parse_file(path, run_id=run_id)
