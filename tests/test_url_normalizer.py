from __future__ import annotations

import pytest

from quickreply.url_normalizer import (
    EMPTY_URL_MESSAGE,
    UrlNormalizer,
    UrlWarning,
    validate_url,
)

SHAPE_MESSAGE = "Url should look like protocol://domain/<admin directory>/supporttickets.php"


@pytest.mark.parametrize("url", ["", "   "])
def test_empty_url_asks_for_input(url: str) -> None:
    assert validate_url(url) == UrlWarning(EMPTY_URL_MESSAGE)
    assert validate_url(url).fix is None


@pytest.mark.parametrize(
    "url",
    [
        "http://example.com/supporttickets.php",
        "https://support.example.com/admin/supporttickets.php",
        "https://support.example.com/admin/supporttickets.php?action=view&id=4",
        "https://support.example.com/a/b/c/supporttickets.php#reply",
    ],
)
def test_urls_ending_with_expected_page_are_valid(url: str) -> None:
    assert validate_url(url) is None


def test_wrong_page_keeps_long_directory() -> None:
    warning = validate_url("http://example.com/panel/ticketsystem.php?foo=1")

    assert warning == UrlWarning(
        SHAPE_MESSAGE, "http://example.com/panel/supporttickets.php"
    )


@pytest.mark.parametrize(
    ("url", "fix"),
    [
        ("http://example.com", "http://example.com/admin/supporttickets.php"),
        ("http://example.com/", "http://example.com/admin/supporttickets.php"),
        ("http://example.com/a/x.php", "http://example.com/admin/supporttickets.php"),
        ("https://example.com/staff", "https://example.com/staff/supporttickets.php"),
        ("https://example.com/staff/", "https://example.com/staff/supporttickets.php"),
        (
            "https://example.com/whmcs/admin/index.php",
            "https://example.com/whmcs/admin/supporttickets.php",
        ),
        (
            "https://example.com/admin/supporttickets.php.bak",
            "https://example.com/admin/supporttickets.php",
        ),
        (
            "http://example.com/admin/supporttickets.php/",
            "http://example.com/admin/supporttickets.php",
        ),
        (
            "http://example.com/supporttickets.php/",
            "http://example.com/admin/supporttickets.php",
        ),
    ],
)
def test_repair_suggestions(url: str, fix: str) -> None:
    warning = validate_url(url)

    assert warning is not None
    assert warning.message == SHAPE_MESSAGE
    assert warning.fix == fix
    assert validate_url(fix, is_retry=True) is None


@pytest.mark.parametrize("url", ["example.com/admin", "supporttickets", "http:///admin"])
def test_unsplittable_urls_get_no_fix(url: str) -> None:
    warning = validate_url(url)

    assert warning == UrlWarning(SHAPE_MESSAGE)


def test_retry_never_suggests_a_second_fix() -> None:
    warning = validate_url("http://example.com/panel/index.php", is_retry=True)

    assert warning == UrlWarning(SHAPE_MESSAGE, None)


def test_strip_query_only_trims_after_expected_page() -> None:
    normalizer = UrlNormalizer()

    assert (
        normalizer.strip_query("http://x.test/admin/supporttickets.php?a=1#b")
        == "http://x.test/admin/supporttickets.php"
    )
    assert normalizer.strip_query("http://x.test/index.php?a=1") == "http://x.test/index.php?a=1"


def test_custom_page_and_directory() -> None:
    normalizer = UrlNormalizer(expected_page="tickets.php", default_directory="staff")

    warning = normalizer.validate("https://example.com/x/")

    assert warning is not None
    assert warning.message.endswith("/<admin directory>/tickets.php")
    assert warning.fix == "https://example.com/staff/tickets.php"
    assert normalizer.validate("https://example.com/staff/tickets.php?id=1") is None


def test_resolve_prefers_validated_fix() -> None:
    normalizer = UrlNormalizer()

    assert normalizer.resolve("https://example.com/admin/supporttickets.php?id=3") == (
        "https://example.com/admin/supporttickets.php",
        None,
    )

    url, warning = normalizer.resolve("https://example.com/admin/")
    assert url == "https://example.com/admin/supporttickets.php"
    assert warning is not None and warning.fix == url

    url, warning = normalizer.resolve(" example.com ")
    assert url == "example.com"
    assert warning == UrlWarning(SHAPE_MESSAGE)
