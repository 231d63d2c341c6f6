import pytest

from asset_rules.normalizers import (
    AssetClass,
    NormalizerPipeline,
    Replace,
    RuleNormalizer,
    ServiceClass,
    Unchanged,
    clean_code,
    is_short_code,
    normalize,
    normalize_well_code,
    rectify,
)


# --- rectify ---

def test_rectify_empty():
    assert rectify("") == "XXXXX000XXXX"

def test_rectify_uppercases_canonical_code():
    assert rectify("adibw002lfln") == "ADIBW002LFLN"

def test_rectify_short_input_pads_every_segment():
    assert rectify("ab12") == "ABXXX120XXXX"

def test_rectify_strips_punctuation():
    assert rectify("adib-w 002/lfln") == "ADIBW002LFLN"

def test_rectify_five_to_eight_letters_reuses_first_letters():
    # 6 letters: the last window overlaps the first one
    assert rectify("abcdef12") == "ABCDE120CDEF"
    assert rectify("abcde") == "ABCDE000BCDE"

def test_rectify_fewer_than_five_letters_fills_last_segment():
    assert rectify("abcd123") == "ABCDX123XXXX"

def test_rectify_long_input_takes_first_and_last_letters():
    assert rectify("abcdefghijk12345") == "ABCDE123HIJK"

@pytest.mark.parametrize("raw", ["", "ab12", "abcdef12", "x", "adib w002 lfln", "12-34-56", "abcdefghijk9"])
def test_rectify_is_idempotent(raw):
    once = rectify(raw)
    assert len(once) == 12
    assert rectify(once) == once


# --- helpers ---

def test_clean_code_keeps_order_and_ascii_only():
    assert clean_code(" a-b_c 1.2é3 ") == "ABC123"

def test_short_code_match_is_exact_and_case_insensitive():
    assert is_short_code("FLID001", "FLID")
    assert is_short_code("flid1234", "FLID")
    assert not is_short_code("FLID12", "FLID")
    assert not is_short_code("FLID12345", "FLID")
    assert not is_short_code(" FLID123", "FLID")
    assert not is_short_code("FLID123x", "FLID")

def test_well_code_rules():
    assert normalize_well_code("adib-0042") == "ADIB0042"
    assert normalize_well_code("welly 00123") == "WELL00123"
    assert normalize_well_code("ab-123") is None      # too few letters
    assert normalize_well_code("abcd12") is None      # too few digits


# --- normalize ---

@pytest.mark.parametrize("raw", ["FLID001", "flid1234", "Flid0001"])
def test_flowline_short_codes_are_accepted(raw):
    assert normalize(raw, AssetClass.PIPELINE, ServiceClass.FLOWLINE) == Unchanged()

@pytest.mark.parametrize("raw", [None, "", "   ", "\t"])
def test_blank_input_is_unchanged(raw):
    assert normalize(raw, AssetClass.PIPELINE, ServiceClass.FLOWLINE) == Unchanged()

def test_flowline_code_is_rectified():
    assert normalize("adibw002lfln", None, ServiceClass.FLOWLINE) == Replace("ADIBW002LFLN")
    assert normalize("FLID12345", None, ServiceClass.FLOWLINE) == Replace("FLIDX123XXXX")

def test_canonical_flowline_code_is_unchanged():
    assert normalize("ADIBW002LFLN", None, ServiceClass.FLOWLINE) == Unchanged()

def test_short_code_prefix_follows_service_class():
    assert normalize("BULK123", None, ServiceClass.BULKLINE) == Unchanged()
    assert normalize("FLID123", None, ServiceClass.BULKLINE) == Replace("FLIDX123XXXX")

def test_service_class_overrides_asset_class():
    assert normalize("adib-0042", AssetClass.WELL, None) == Replace("ADIB0042")
    assert normalize("adib-0042", AssetClass.WELL, ServiceClass.MANIFOLD) == Replace("ADIBX004XXXX")

def test_unknown_service_class_falls_back_to_asset_class():
    assert normalize("adib-0042", 1, 7) == Replace("ADIB0042")

def test_classes_without_code_rule_are_unchanged():
    assert normalize("junk!!", AssetClass.PIPELINE, None) == Unchanged()
    assert normalize("junk!!", None, None) == Unchanged()
    assert normalize("junk!!", 99, "nope") == Unchanged()

def test_option_values_are_accepted_as_ints():
    assert normalize("ab12", 2, 1) == Replace("ABXXX120XXXX")
    assert normalize("ab12", 2, 0) == Replace("ABXXX120XXXX")
    assert normalize("adib-0042", "1", None) == Replace("ADIB0042")

@pytest.mark.parametrize("asset_type", [float("inf"), float("nan"), 1.9, 1.0, True, "1.0", "١"])
def test_non_integer_option_values_resolve_to_no_class(asset_type):
    assert AssetClass.resolve(asset_type) is None
    assert normalize("adib-0042", asset_type, None) == Unchanged()


# --- record normalizers ---

def test_rule_normalizer_rewrites_slot_field_only():
    rec = {"asset_type": 2, "service_type": 1, "flowline_id": "ab12", "well_code": "ab12"}
    out = RuleNormalizer().normalize_record("asset", rec)
    assert out["flowline_id"] == "ABXXX120XXXX"
    assert out["well_code"] == "ab12"
    assert rec["flowline_id"] == "ab12"  # input untouched

def test_rule_normalizer_without_slot_field_is_a_copy():
    rec = {"asset_type": 1, "name": "x"}
    out = RuleNormalizer().normalize_record("asset", rec)
    assert out == rec and out is not rec

def test_pipeline_runs_stages_in_order():
    class Tag:
        def normalize_record(self, kind, rec):
            return {**rec, "name": rec["flowline_id"]}

    pipe = NormalizerPipeline([RuleNormalizer(), Tag()])
    out = pipe.normalize_record("asset", {"service_type": 1, "flowline_id": "ab12"})
    assert out["name"] == "ABXXX120XXXX"
