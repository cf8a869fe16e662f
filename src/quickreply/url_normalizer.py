"""Validate the ticket page URL and suggest a one-shot repair."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final, Optional, Tuple

LOGGER = logging.getLogger(__name__)

EXPECTED_PAGE: Final[str] = "supporttickets.php"
DEFAULT_DIRECTORY: Final[str] = "admin"
EMPTY_URL_MESSAGE: Final[str] = "Please enter a url"
_MIN_PART_LENGTH = 3

# Directory segments are slash-terminated; the page is whatever trails them.
_URL_PARTS: Final[re.Pattern[str]] = re.compile(
    r"^(?P<protocol>[A-Za-z][A-Za-z0-9+.-]*)://"
    r"(?P<domain>[^/?#\s]+)"
    r"(?:/(?P<directories>(?:[^/?#]+/)*)(?P<page>[^/?#]*))?"
)


@dataclass(frozen=True)
class UrlWarning:
    """Diagnostic for a URL that does not point at the ticket page."""

    message: str
    fix: Optional[str] = None


@dataclass(frozen=True)
class UrlNormalizer:
    """Check URLs against ``protocol://domain/<directory>/<expected_page>``."""

    expected_page: str = EXPECTED_PAGE
    default_directory: str = DEFAULT_DIRECTORY

    @property
    def shape_message(self) -> str:
        return (
            "Url should look like "
            f"protocol://domain/<admin directory>/{self.expected_page}"
        )

    def strip_query(self, url: str) -> str:
        """Drop any query or fragment that follows the expected page."""

        match = re.match(rf"(.*?/{re.escape(self.expected_page)})[?#]", url, re.DOTALL)
        return match.group(1) if match else url

    def names_expected_page(self, url: str) -> bool:
        return url.endswith(f"/{self.expected_page}")

    def validate(self, url: str, is_retry: bool = False) -> UrlWarning | None:
        """Return ``None`` for a usable URL, otherwise a warning.

        The warning carries a repaired URL unless ``is_retry`` is set, so
        validating a previously suggested fix can never suggest another.
        """

        candidate = url.strip()
        if not candidate:
            return UrlWarning(EMPTY_URL_MESSAGE)

        candidate = self.strip_query(candidate)
        if self.names_expected_page(candidate):
            return None

        fix = None if is_retry else self.repair(candidate)
        return UrlWarning(self.shape_message, fix)

    def repair(self, url: str) -> str | None:
        """Rebuild ``url`` in the expected shape, or ``None`` if it cannot be split."""

        match = _URL_PARTS.match(url)
        if match is None:
            LOGGER.debug("cannot decompose url %r", url)
            return None

        protocol = match.group("protocol")
        domain = match.group("domain")
        directories = match.group("directories") or ""
        page = match.group("page") or ""

        # A trailing segment without an extension names a directory, not a page.
        if page and "." not in page:
            directories = f"{directories}{page}/"
            page = ""

        # A slash after the expected page itself leaves it in the directories.
        page_segment = f"{self.expected_page}/"
        if directories == page_segment or directories.endswith(f"/{page_segment}"):
            directories = directories[: -len(page_segment)]

        if len(directories) < _MIN_PART_LENGTH:
            directories = self.default_directory
        if len(page) < _MIN_PART_LENGTH or page != self.expected_page:
            page = self.expected_page
        if directories.endswith("/"):
            directories = directories[:-1]

        fix = f"{protocol}://{domain}/{directories}/{page}"
        LOGGER.debug("suggesting %s for %s", fix, url)
        return fix

    def resolve(self, url: str) -> Tuple[str, UrlWarning | None]:
        """Return the URL to embed together with the warning shown for ``url``.

        A suggested fix is used only when it validates on its own.
        """

        warning = self.validate(url)
        if warning is None:
            return self.strip_query(url.strip()), None
        if warning.fix is not None and self.validate(warning.fix, is_retry=True) is None:
            return warning.fix, warning
        return url.strip(), warning


DEFAULT_NORMALIZER: Final[UrlNormalizer] = UrlNormalizer()


def validate_url(url: str, is_retry: bool = False) -> UrlWarning | None:
    """Validate ``url`` against the default ticket page shape."""

    return DEFAULT_NORMALIZER.validate(url, is_retry)


__all__ = [
    "DEFAULT_DIRECTORY",
    "DEFAULT_NORMALIZER",
    "EMPTY_URL_MESSAGE",
    "EXPECTED_PAGE",
    "UrlNormalizer",
    "UrlWarning",
    "validate_url",
]
