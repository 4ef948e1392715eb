import asyncio

import pytest

from store_crawler.utils.files import DigestWriter, ensure_dir, sanitize_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Widget", "Widget"),
        ("Door Access", "Door_Access"),
        ("  UniFi Dream Machine  ", "UniFi_Dream_Machine"),
        ("Switch Pro 24/PoE", "Switch_Pro_24_PoE"),
        ("U6+ (Long Range)", "U6_Long_Range"),
    ],
)
def test_sanitize_name_keeps_case_and_uses_underscores(name, expected):
    assert sanitize_name(name) == expected


def test_sanitize_name_never_returns_empty():
    name = sanitize_name("///")
    assert name and "/" not in name


def test_ensure_dir_is_idempotent(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_dir(target) == target
    ensure_dir(target)
    assert target.is_dir()


def test_digest_appends_are_complete_entries(tmp_path):
    digest = DigestWriter(tmp_path / "all_content.txt")
    digest.reset()

    async def write_many():
        await asyncio.gather(*(digest.append(f"entry-{i}\n" + "x" * 2000) for i in range(20)))

    asyncio.run(write_many())
    lines = (tmp_path / "all_content.txt").read_text(encoding="utf-8").splitlines()
    assert digest.entries == 20
    assert sorted(l for l in lines if l.startswith("entry-")) == sorted(f"entry-{i}" for i in range(20))
    assert all(l == "x" * 2000 for l in lines if not l.startswith("entry-"))
