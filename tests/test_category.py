import pytest

from store_crawler.config import CrawlConfig
from store_crawler.products.category import FALLBACK_CATEGORY, determine_category

CATEGORIES = CrawlConfig().categories


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://store.ui.com/us/collections/cameras/products/g4-bullet", "Cameras"),
        ("https://store.ui.com/us/collections/poe-switches/products/x", "Poe Switches"),
        ("https://store.ui.com/us/collections/unifi-wiFi-access", "Unifi WiFi Access"),
    ],
)
def test_collection_segment_wins(url, expected):
    # Name mentions a known category but the collection still takes precedence.
    assert determine_category("Door Access Hub", url, CATEGORIES) == expected


def test_empty_collection_segment_falls_through():
    url = "https://store.ui.com/us/collections/"
    assert determine_category("Protect Camera", url, CATEGORIES) == "Protect"


def test_name_substring_match_is_case_insensitive_and_ordered():
    url = "https://store.ui.com/us/products/door-hub"
    # "Access" precedes "Door Access" in the list, so it wins.
    assert determine_category("UniFi DOOR ACCESS Hub", url, CATEGORIES) == "Access"
    assert determine_category("Wide-angle cameras kit", url, CATEGORIES) == "Cameras"


def test_no_match_returns_other():
    url = "https://store.ui.com/us/products/widget"
    assert determine_category("Widget", url, CATEGORIES) == FALLBACK_CATEGORY == "Other"


def test_no_fuzzy_matching():
    url = "https://store.ui.com/us/products/camera"
    assert determine_category("Camera", url, CATEGORIES) == "Other"
