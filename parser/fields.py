"""Field extractors for one result card.

Every extractor takes the card anchor and returns a value or None; None means
the field is absent from the card. Exceptions are failures, and `attempt`
turns them into the field default so one field never takes down the record.
"""

from __future__ import annotations

import re
from typing import Callable, TypeVar

from bs4 import Tag

from core.config import ExtractorConfig
from core.models import CardRecord, ImageIndex
from core.structured_logging import emit_error_event
from parser import selectors
from quality.urlnorm import card_link


T = TypeVar("T")

_YEAR_RE = re.compile(rf"[0-9]{{{ExtractorConfig.YEAR_DIGITS}}}")


def attempt(
    extractor: Callable[[], T],
    *,
    field: str,
    default: T | None = None,
    run_id: str | None = None,
    **context: object,
) -> T | None:
    """Run one extractor; log and substitute `default` if it raises."""
    try:
        return extractor()
    except Exception as exc:
        emit_error_event(
            "srp_field_error",
            exc,
            run_id=run_id,
            component="parser",
            field=field,
            **context,
        )
        return default


def _text(element: Tag | None) -> str | None:
    if element is None:
        return None
    return element.get_text().strip()


def alt_image(card: Tag) -> Tag | None:
    """The card's first image with a non-empty alt, if any."""
    return selectors.ALT_IMAGE.select_one(card)


def extract_name(card: Tag) -> str | None:
    image = alt_image(card)
    if image is not None:
        return image["alt"].strip()
    return _text(selectors.DETAIL_NAME.select_one(card))


def extract_year(card: Tag) -> str | None:
    if alt_image(card) is not None:
        for div in selectors.NESTED_DIV.iter_select(card):
            text = div.get_text().strip()
            if _YEAR_RE.fullmatch(text):
                return text
        return None
    year = _text(selectors.DETAIL_YEAR.select_one(card))
    return year or None


def extract_link(card: Tag) -> str | None:
    href = card.get("href")
    if isinstance(href, list):
        href = " ".join(href)
    return card_link(href)


def card_image(card: Tag) -> Tag | None:
    """The card's thumbnail: inside the grid tile when present, else any image."""
    if selectors.GRID_TILE.select_one(card) is not None:
        return selectors.GRID_TILE_IMAGE.select_one(card)
    return selectors.ANY_IMAGE.select_one(card)


def extract_image(card: Tag, images: ImageIndex) -> str | None:
    image = card_image(card)
    if image is None:
        return None
    return images.resolve(image.get("id"), image.get("data-src"))


def extract_record(
    card: Tag,
    images: ImageIndex,
    *,
    run_id: str | None = None,
    card_index: int | None = None,
) -> CardRecord:
    """Build one record; each field fails independently."""
    context = {"run_id": run_id, "card_index": card_index}
    name = attempt(lambda: extract_name(card), field="name", **context)
    year = attempt(lambda: extract_year(card), field="year", **context)
    return CardRecord(
        name=name,
        extensions=[year] if year is not None else None,
        link=attempt(lambda: extract_link(card), field="link", **context),
        image=attempt(lambda: extract_image(card, images), field="image", **context),
    )
