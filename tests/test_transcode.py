"""Tests for the snake_case <-> camelCase key transcoder (transcode.py)"""
import copy

import pytest

from govboard.transcode import (
    CAMEL_TO_SNAKE,
    SNAKE_TO_CAMEL,
    key_to_camel,
    key_to_snake,
    to_camel,
    to_snake,
)


class TestKeyRules:
    """Single-key conversion: override tables first, then the regular rule."""

    def test_regular_snake_to_camel(self):
        assert key_to_camel("person_in_charge") == "personInCharge"
        assert key_to_camel("name") == "name"

    def test_regular_camel_to_snake(self):
        assert key_to_snake("personInCharge") == "person_in_charge"
        assert key_to_snake("name") == "name"

    def test_irregular_acronym_keys(self):
        assert key_to_camel("no_pks_po") == "noPKSPO"
        assert key_to_camel("tanggal_bapp") == "tanggalBAPP"
        assert key_to_snake("noPKSPO") == "no_pks_po"
        assert key_to_snake("tanggalPKSPO") == "tanggal_pks_po"

    def test_unknown_acronym_key_falls_through_to_rule(self):
        # Not in the table, so the regular rule applies and does not reverse
        assert key_to_snake("kodePKS") == "kode_p_k_s"
        assert key_to_camel("kode_p_k_s") == "kodePKS"
        assert key_to_snake("tanggalXYZ") == "tanggal_x_y_z"

    def test_digits_and_uppercase_after_underscore_untouched(self):
        assert key_to_camel("termin_1") == "termin_1"
        assert key_to_camel("opex_Cabang") == "opex_Cabang"


class TestOverrideTables:

    @pytest.mark.parametrize("snake", sorted(SNAKE_TO_CAMEL))
    def test_snake_table_round_trips(self, snake):
        assert key_to_snake(key_to_camel(snake)) == snake

    @pytest.mark.parametrize("camel", sorted(CAMEL_TO_SNAKE))
    def test_camel_table_round_trips(self, camel):
        assert key_to_camel(key_to_snake(camel)) == camel

    def test_to_camel_uses_table_value(self):
        for snake, camel in SNAKE_TO_CAMEL.items():
            assert to_camel({snake: 42}) == {camel: 42}

    def test_object_of_table_keys_round_trips(self):
        payload = {k: f"value-{i}" for i, k in enumerate(SNAKE_TO_CAMEL)}
        assert to_snake(to_camel(payload)) == payload


class TestStructure:

    def test_nested_objects_and_arrays(self):
        payload = {
            "project_name": "Core Banking",
            "termin_pembayaran": [
                {"payment_date": "2025-08-01", "budget_type": "opex"},
                {"payment_date": "2025-09-01", "budget_type": "capex"},
            ],
            "vendor": {"vendor_name": "PT Maju", "vendor_id": 7},
        }
        assert to_camel(payload) == {
            "projectName": "Core Banking",
            "terminPembayaran": [
                {"paymentDate": "2025-08-01", "budgetType": "opex"},
                {"paymentDate": "2025-09-01", "budgetType": "capex"},
            ],
            "vendor": {"vendorName": "PT Maju", "vendorId": 7},
        }

    def test_array_length_and_order_preserved(self):
        items = [{"created_at": i} for i in range(5)] + [None, "x", 3]
        result = to_camel(items)
        assert len(result) == len(items)
        assert [r["createdAt"] for r in result[:5]] == list(range(5))
        assert result[5:] == [None, "x", 3]

    def test_none_and_primitives_pass_through(self):
        assert to_camel(None) is None
        assert to_snake(None) is None
        assert to_camel("no_pks_po") == "no_pks_po"
        assert to_camel(12) == 12
        assert to_camel(False) is False

    def test_none_values_at_depth(self):
        assert to_camel({"vendor_id": None, "files": [None]}) == {"vendorId": None, "files": [None]}

    def test_values_are_never_rewritten(self):
        assert to_snake({"tanggalBAPP": "2025-08-15T00:00:00.000Z"}) == {
            "tanggal_bapp": "2025-08-15T00:00:00.000Z"
        }

    def test_input_not_mutated(self):
        payload = {"no_pks_po": "PKS/1", "items": [{"created_at": 1}]}
        snapshot = copy.deepcopy(payload)
        result = to_camel(payload)
        assert payload == snapshot
        assert result["items"] is not payload["items"]

    def test_tuple_stays_tuple(self):
        assert to_camel(({"vendor_id": 1},)) == ({"vendorId": 1},)

    def test_non_string_keys_kept(self):
        assert to_camel({1: {"project_id": 2}}) == {1: {"projectId": 2}}
