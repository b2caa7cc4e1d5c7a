# Overview: Pytest coverage for keg id and QR code generation.

import pytest

from kegtrack.services import identifier_service
from kegtrack.services.identifier_service import (
    IdentifierExhaustedError,
    extract_keg_id_from_qr,
    generate_keg_id,
    generate_qr_code,
    generate_unique_keg_id,
    is_valid_keg_id,
    is_valid_qr_code,
    normalize_scan,
)


class TestKegIds:

    def test_generated_ids_have_eight_digits(self):
        for _ in range(200):
            keg_id = generate_keg_id()
            assert is_valid_keg_id(keg_id)
            assert 10_000_000 <= int(keg_id[2:]) <= 99_999_999

    @pytest.mark.parametrize("value,expected", [
        ("K-12345678", True),
        ("K-1234567", False),
        ("K-123456789", False),
        ("k-12345678", False),
        ("SK12345678", False),
        ("", False),
    ])
    def test_is_valid_keg_id(self, value, expected):
        assert is_valid_keg_id(value) is expected


class TestQrCodes:

    def test_qr_code_derived_from_id(self):
        assert generate_qr_code("K-12345678") == "SK12345678"

    def test_round_trip_for_generated_ids(self):
        for _ in range(50):
            keg_id = generate_keg_id()
            qr_code = generate_qr_code(keg_id)
            assert is_valid_qr_code(qr_code)
            assert extract_keg_id_from_qr(qr_code) == keg_id

    def test_extract_leaves_foreign_codes_unchanged(self):
        assert extract_keg_id_from_qr("ABC-123") == "ABC-123"

    @pytest.mark.parametrize("value,expected", [
        ("SK12345678", True),
        ("SK1234567", False),
        ("sk12345678", False),
        ("SK1234567A", False),
        ("K-12345678", False),
    ])
    def test_is_valid_qr_code(self, value, expected):
        assert is_valid_qr_code(value) is expected

    def test_normalize_scan(self):
        assert normalize_scan("  sk 1234 5678 ") == "SK12345678"


class TestUniqueKegIds:

    def test_retries_past_collisions(self, monkeypatch):
        candidates = iter(["K-11111111", "K-22222222", "K-33333333"])
        monkeypatch.setattr(identifier_service, "generate_keg_id", lambda: next(candidates))
        taken = {"K-11111111", "K-22222222"}

        assert generate_unique_keg_id(lambda keg_id: keg_id in taken) == "K-33333333"

    def test_gives_up_after_attempt_budget(self, monkeypatch):
        monkeypatch.setattr(identifier_service, "generate_keg_id", lambda: "K-11111111")

        with pytest.raises(IdentifierExhaustedError):
            generate_unique_keg_id(lambda keg_id: True, attempts=3)
