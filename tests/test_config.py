"""Tests for configuration helpers."""

from diapets.config import parse_pet_ids


def test_parse_pet_ids_handles_missing_and_blank_values() -> None:
    assert parse_pet_ids(None) == frozenset()
    assert parse_pet_ids("") == frozenset()
    assert parse_pet_ids(" 1, 2,,3 ") == frozenset({1, 2, 3})


def test_parse_pet_ids_skips_non_numeric_entries() -> None:
    assert parse_pet_ids("4,abc,-5") == frozenset({4})
