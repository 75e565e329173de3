"""
@file: test_ids.py
@description:
Tests for identifier generation, parsing and formatting.
"""

import threading
import uuid

import pytest
from ulid import ULID

from blobstash.core.ids import (
    IdentifierGenerator,
    InvalidIdentifierError,
    format_identifier,
    parse_identifier,
    to_uuid,
)


def test_generated_identifiers_are_distinct_and_sorted():
    generator = IdentifierGenerator()
    ids = [format_identifier(generator.generate()) for _ in range(1000)]

    assert len(set(ids)) == len(ids)
    assert ids == sorted(ids)
    assert all(len(i) == 26 for i in ids)


def test_same_millisecond_still_increases():
    frozen = ULID.from_str("01ARZ3NDEKTSV4RRFFQ69G5FAV")
    generator = IdentifierGenerator(factory=lambda: frozen)

    first = generator.generate()
    second = generator.generate()
    third = generator.generate()

    assert first == frozen
    assert int(second) == int(frozen) + 1
    assert int(third) == int(frozen) + 2
    assert str(first) < str(second) < str(third)


def test_clock_stepping_back_does_not_reorder():
    later = ULID.from_str("01ARZ3NDEKTSV4RRFFQ69G5FAV")
    earlier = ULID.from_str("01ARZ3NDEJ0000000000000000")
    values = iter([later, earlier])
    generator = IdentifierGenerator(factory=lambda: next(values))

    assert generator.generate() < generator.generate()


def test_concurrent_generation_is_unique():
    generator = IdentifierGenerator()
    results = []
    lock = threading.Lock()

    def worker():
        local = [generator.generate() for _ in range(500)]
        with lock:
            results.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(results)) == 8 * 500


def test_parse_round_trips_canonical_form():
    generated = IdentifierGenerator().generate()
    text = format_identifier(generated)

    assert parse_identifier(text) == generated
    assert text == text.upper()


def test_parse_accepts_lowercase():
    assert parse_identifier("01arz3ndektsv4rrffq69g5fav") == ULID.from_str("01ARZ3NDEKTSV4RRFFQ69G5FAV")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "not-an-id",
        "01ARZ3NDEKTSV4RRFFQ69G5FA",     # 25 chars
        "01ARZ3NDEKTSV4RRFFQ69G5FAVX",   # 27 chars
        "01ARZ3NDEKTSV4RRFFQ69G5FAU",    # U is not in the alphabet
        "81ARZ3NDEKTSV4RRFFQ69G5FAV",    # overflows 128 bits
        "01ARZ3NDEK TSV4RRFFQ69G5FA",
    ],
)
def test_parse_rejects_malformed(text):
    with pytest.raises(InvalidIdentifierError):
        parse_identifier(text)


def test_invalid_identifier_error_is_value_error():
    with pytest.raises(ValueError):
        parse_identifier("nope")


def test_uuid_conversion_keeps_bits():
    generated = IdentifierGenerator().generate()
    as_uuid = to_uuid(generated)

    assert isinstance(as_uuid, uuid.UUID)
    assert as_uuid.int == int(generated)
    assert ULID.from_bytes(as_uuid.bytes) == generated
