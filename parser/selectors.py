"""Structural queries for the result-card layouts of a search results page."""

from __future__ import annotations

from parser.query import AnyOf, AttrTest, Combinator, Path, Position, Relative, step


# Heading that labels the card collection: the span inside a level-2 heading.
SECTION_TITLE = Path.children(
    step("div", AttrTest("aria-level", "2"), AttrTest("role", "heading")),
    step("span"),
)

# Layout A (artwork tiles): the first anchor of a styled div that holds
# `a > img` directly.
ARTWORK_CARD_ANCHOR = Path.children(
    step(
        "div",
        AttrTest("style"),
        has=Relative(Path.children(step("a"), step("img")), lead=Combinator.CHILD),
    ),
    step("a", position=Position.FIRST_OF_TYPE),
)

# Layout B (list cards): first anchor of the first div of a presentation div.
LIST_CARD_ANCHOR = Path.children(
    step("div", AttrTest("role", "presentation")),
    step("div", position=Position.FIRST_CHILD),
    step("a", position=Position.FIRST_OF_TYPE),
)

CARD_ANCHORS = AnyOf((ARTWORK_CARD_ANCHOR, LIST_CARD_ANCHOR))

# The tile's div without an image holds the name and year of list cards.
_DETAIL_CONTAINER = (
    step("wp-grid-tile"),
    step("div", has_not=Relative(Path((step("img"),)))),
)

DETAIL_NAME = Path.children(*_DETAIL_CONTAINER, step("div", position=Position.FIRST_CHILD))
DETAIL_YEAR = Path.children(*_DETAIL_CONTAINER, step("div", position=Position.LAST_OF_TYPE))

ALT_IMAGE = Path((step("img", AttrTest("alt", non_empty=True)),))
ANY_IMAGE = Path((step("img"),))

GRID_TILE = Path((step("wp-grid-tile"),))
GRID_TILE_IMAGE = Path.children(step("wp-grid-tile"), step("div"), step("img"))

NESTED_DIV = Path.children(step("div"), step("div"))
