"""
Default extraction configuration for serp-extractor.

These settings are IMMUTABLE and describe the page shapes and file layout the
extractor understands. The CLI can override directories and the input pattern
per run; everything else is fixed.
"""

from typing import Tuple


class ExtractorConfig:
    """
    Immutable extraction settings.
    """

    # ========================================================================
    # Link Rewriting
    # ========================================================================

    # Card hrefs are site-relative; this origin is prepended verbatim.
    GOOGLE_ORIGIN: str = "https://www.google.com"
    """Origin prefixed to every card href."""

    # Tracking parameter removed from card links.
    CLIENT_PARAM_MARKER: str = "client="
    """Links containing this marker get the client parameter stripped."""

    # ========================================================================
    # HTML Parsing
    # ========================================================================

    HTML_PARSER_FEATURES: str = "html.parser"
    """BeautifulSoup tree builder used for every document."""

    SOURCE_ENCODINGS: Tuple[str, ...] = ("utf-8", "cp1252", "latin-1")
    """Decoding order for raw HTML bytes (latin-1 never fails)."""

    # Inline scripts carrying obfuscated thumbnails contain one of these.
    IMAGE_SCRIPT_MARKERS: Tuple[str, ...] = ("s=", "s =", "ii=", "ii =")
    """Substrings that qualify a <script> for image-index scanning."""

    YEAR_DIGITS: int = 4
    """A year is a trimmed text node of exactly this many ASCII digits."""

    # ========================================================================
    # Batch I/O
    # ========================================================================

    DEFAULT_INPUT_DIR: str = "files"
    """Directory scanned by `convert` when --input-dir is not given."""

    DEFAULT_OUTPUT_DIR: str = "output"
    """Directory receiving JSON artifacts; created on demand."""

    INPUT_GLOB: str = "*.html"
    """Glob pattern for saved SRP snapshots."""

    OUTPUT_SUFFIX: str = ".json"
    """Suffix of each artifact; the stem is the input file's stem."""

    JSON_INDENT: int = 2
    """Indentation of pretty-printed artifacts."""

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration at startup.

        Raises:
            AssertionError: If any constraint is violated.
        """
        assert cls.GOOGLE_ORIGIN.startswith("https://"), "GOOGLE_ORIGIN must be https"

        assert not cls.GOOGLE_ORIGIN.endswith("/"), "GOOGLE_ORIGIN must not end with '/'"

        assert cls.CLIENT_PARAM_MARKER.endswith("="), "CLIENT_PARAM_MARKER must end with '='"

        assert cls.SOURCE_ENCODINGS, "SOURCE_ENCODINGS must not be empty"

        assert (
            cls.SOURCE_ENCODINGS[-1] == "latin-1"
        ), "SOURCE_ENCODINGS must end with latin-1 so decoding cannot fail"

        assert cls.IMAGE_SCRIPT_MARKERS, "IMAGE_SCRIPT_MARKERS must not be empty"

        assert cls.YEAR_DIGITS > 0, "YEAR_DIGITS must be > 0"

        assert cls.OUTPUT_SUFFIX.startswith("."), "OUTPUT_SUFFIX must start with '.'"

        assert cls.JSON_INDENT >= 0, "JSON_INDENT must be >= 0"


# Validate at module import time
ExtractorConfig.validate()
