"""Parser package for search-results card extraction."""

from parser.images import build_image_index, unescape_js_literal
from parser.srp import SrpParseStage, parse, parse_file

__all__ = [
    "SrpParseStage",
    "build_image_index",
    "parse",
    "parse_file",
    "unescape_js_literal",
]
