"""Tests for the carereport/normalization package."""
from __future__ import annotations

from datetime import date, datetime

import pandas as pd
import pytest

from carereport.normalization.date_formatter import format_date, parse_evaluation_date
from carereport.normalization.name_normalizer import (
    NAME_RULES,
    collapse_whitespace,
    drop_maiden_keyword,
    is_well_formed,
    keep_if_well_formed,
    last_token,
    normalize_name,
    strip_civility,
    strip_gender_marker,
    strip_nir_block,
    strip_quotes,
)
from carereport.normalization.result_normalizer import extract_result


# ---------------------------------------------------------------------------
# Name normalizer: full cascade
# ---------------------------------------------------------------------------


class TestNameNormalizerEmpty:
    @pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
    def test_blank_input_returns_empty(self, raw) -> None:
        assert normalize_name(raw) == ""

    def test_only_markers_returns_empty(self) -> None:
        assert normalize_name("(H)") == ""


class TestNameNormalizerCareSoftwareShape:
    def test_simple_male(self) -> None:
        assert normalize_name("M. DUPONT Jean (H)") == "DUPONT Jean"

    def test_simple_female(self) -> None:
        assert normalize_name("Mme. DURAND Marie (F)") == "DURAND Marie"

    def test_multi_word_surname(self) -> None:
        assert normalize_name("M. DE LA FONTAINE Jean (H)") == "DE LA FONTAINE Jean"

    def test_hyphenated_surname_and_given_name(self) -> None:
        assert (
            normalize_name("Mme. MARTIN-DUPONT Anne-Marie (F)")
            == "MARTIN-DUPONT Anne-Marie"
        )

    def test_maiden_name_kept_keyword_dropped(self) -> None:
        assert (
            normalize_name("Mme. LEFEBVRE Marie Née DUBOIS Claire (F)")
            == "LEFEBVRE Marie DUBOIS Claire"
        )

    def test_nir_block_removed(self) -> None:
        assert normalize_name("M. PETIT Pierre (H) 123456789012345 [NIR]") == "PETIT Pierre"

    def test_nir_with_separated_key_removed(self) -> None:
        assert normalize_name("M. PETIT Pierre (H) 1234567890123 45 [NIR]") == "PETIT Pierre"

    def test_extra_spaces(self) -> None:
        assert normalize_name("  M.    MARTIN   Paul   (H)  ") == "MARTIN Paul"

    def test_line_breaks(self) -> None:
        assert normalize_name("Mme.\n LEROUX\n Chloé\n (F)") == "LEROUX Chloé"

    def test_surrounding_quotes(self) -> None:
        assert normalize_name('"M. GARCIA José (H)"') == "GARCIA José"

    def test_civility_without_period(self) -> None:
        assert normalize_name("Mme BERNARD Lucie (F)") == "BERNARD Lucie"

    def test_civility_case_insensitive(self) -> None:
        assert normalize_name("MONSIEUR ROUX Henri (H)") == "ROUX Henri"

    def test_diacritics_preserved(self) -> None:
        assert normalize_name("Mme. LÉGER Hélène (F)") == "LÉGER Hélène"

    def test_apostrophe_surname(self) -> None:
        assert normalize_name("M. D'ARTAGNAN Charles (H)") == "D'ARTAGNAN Charles"


class TestNameNormalizerFallback:
    def test_well_formed_passthrough(self) -> None:
        assert normalize_name("DUPONT Jean") == "DUPONT Jean"

    def test_civility_then_single_word(self) -> None:
        assert normalize_name("Madame Michu") == "Michu"

    def test_unknown_honorific_keeps_last_word(self) -> None:
        assert normalize_name("Docteur Michu") == "Michu"

    def test_single_word(self) -> None:
        assert normalize_name("Michu") == "Michu"

    def test_numeric_cell(self) -> None:
        assert normalize_name(101) == "101"

    def test_all_caps_name_kept_whole(self) -> None:
        assert normalize_name("M. DUPONT JEAN (H)") == "DUPONT JEAN"

    def test_all_caps_residents_sharing_given_name_stay_distinct(self) -> None:
        assert normalize_name("M. DUPONT JEAN (H)") != normalize_name("M. MARTIN JEAN (H)")

    def test_stacked_gender_markers_removed(self) -> None:
        assert normalize_name("DUPONT Jean (H) (F)") == "DUPONT Jean"

    def test_marker_before_nir_block(self) -> None:
        assert normalize_name("M. PETIT Pierre (H) (H) 123456789012345 [NIR]") == "PETIT Pierre"


class TestNameNormalizerIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            "M. DUPONT Jean (H)",
            "Mme. LEFEBVRE Marie Née DUBOIS Claire (F)",
            "M. PETIT Pierre (H) 123456789012345 [NIR]",
            "M. DE LA FONTAINE Jean (H)",
            "Mme. MARTIN-DUPONT Anne-Marie (F)",
            '"M. GARCIA José (H)"',
            "DUPONT Jean",
            "Madame Michu",
            "Mme. Dupont Marie (F)",
            "Mme MME DURAND Alice",
            "quelqu'un (inconnu)",
            "DUPONT Jean (H) (F)",
            "Docteur Michu (H) (F)",
            "M. DUPONT JEAN (H)",
            "Mme Née (F)",
        ],
    )
    def test_normalizing_twice_is_stable(self, raw: str) -> None:
        once = normalize_name(raw)
        assert normalize_name(once) == once


# ---------------------------------------------------------------------------
# Name normalizer: individual rules
# ---------------------------------------------------------------------------


class TestNameRules:
    def test_rule_order(self) -> None:
        assert [rule.name for rule in NAME_RULES] == [
            "strip_quotes",
            "collapse_whitespace",
            "strip_nir_block",
            "strip_gender_marker",
            "drop_maiden_keyword",
            "strip_civility",
        ]

    def test_strip_quotes_removes_typographic_quotes(self) -> None:
        assert strip_quotes("«DUPONT Jean»") == "DUPONT Jean"

    def test_collapse_whitespace(self) -> None:
        assert collapse_whitespace(" A \n B\t C ") == "A B C"

    def test_strip_nir_block_requires_tag(self) -> None:
        assert strip_nir_block("PETIT Pierre 123456789012345") == "PETIT Pierre 123456789012345"

    def test_strip_nir_block(self) -> None:
        assert strip_nir_block("PETIT Pierre (H) 123456789012345 [NIR]") == "PETIT Pierre (H)"

    def test_strip_gender_marker_lowercase(self) -> None:
        assert strip_gender_marker("DUPONT Jean (h)") == "DUPONT Jean"

    def test_strip_gender_marker_only_trailing(self) -> None:
        assert strip_gender_marker("(H) DUPONT Jean") == "(H) DUPONT Jean"

    def test_drop_maiden_keyword_variants(self) -> None:
        assert drop_maiden_keyword("LEFEBVRE Marie née DUBOIS") == "LEFEBVRE Marie DUBOIS"
        assert drop_maiden_keyword("LEFEBVRE Marie NEE DUBOIS") == "LEFEBVRE Marie DUBOIS"

    def test_drop_maiden_keyword_whole_word_only(self) -> None:
        assert drop_maiden_keyword("RENÉE Anne") == "RENÉE Anne"

    def test_strip_civility_requires_period_for_single_m(self) -> None:
        assert strip_civility("M DUPONT Jean") == "M DUPONT Jean"

    def test_strip_civility_repeated(self) -> None:
        assert strip_civility("Mme Mme DURAND Alice") == "DURAND Alice"

    def test_strip_civility_mademoiselle(self) -> None:
        assert strip_civility("Mademoiselle ROUX Léa") == "ROUX Léa"


class TestNameResolvers:
    def test_is_well_formed_true(self) -> None:
        assert is_well_formed("DE LA FONTAINE Jean") is True

    def test_is_well_formed_accepts_all_caps(self) -> None:
        assert is_well_formed("DUPONT JEAN") is True

    def test_is_well_formed_requires_two_words(self) -> None:
        assert is_well_formed("DUPONT") is False

    def test_is_well_formed_requires_uppercase_first_word(self) -> None:
        assert is_well_formed("Dupont Jean") is False

    def test_is_well_formed_rejects_punctuation(self) -> None:
        assert is_well_formed("DUPONT Jean (X)") is False

    def test_keep_if_well_formed_returns_none(self) -> None:
        assert keep_if_well_formed("Michu") is None

    def test_last_token(self) -> None:
        assert last_token("Docteur Jean Michu") == "Michu"

    def test_last_token_empty(self) -> None:
        assert last_token("") is None


# ---------------------------------------------------------------------------
# Result extractor
# ---------------------------------------------------------------------------


class TestExtractResult:
    def test_score_out_of_total(self) -> None:
        assert extract_result("5 / 30") == "5"

    def test_no_space_separator(self) -> None:
        assert extract_result("27/30") == "27"

    def test_plain_value_trimmed(self) -> None:
        assert extract_result("  25 ") == "25"

    def test_leading_separator_skipped(self) -> None:
        assert extract_result(" / 30") == "30"

    def test_unit_dropped(self) -> None:
        assert extract_result("24 pts") == "24"

    def test_decimal_kept(self) -> None:
        assert extract_result("3,5 / 10") == "3,5"

    def test_free_text_passthrough(self) -> None:
        assert extract_result("Non évaluable") == "Non évaluable"

    def test_integer_cell(self) -> None:
        assert extract_result(25) == "25"

    def test_integral_float_cell(self) -> None:
        assert extract_result(25.0) == "25"

    def test_none_and_blank(self) -> None:
        assert extract_result(None) == ""
        assert extract_result("   ") == ""


# ---------------------------------------------------------------------------
# Date formatter
# ---------------------------------------------------------------------------


class TestFormatDate:
    def test_formats_datetime(self) -> None:
        assert format_date(datetime(2023, 11, 5)) == "05/11/2023"

    def test_zero_pads_day_and_month(self) -> None:
        assert format_date(datetime(2023, 1, 1)) == "01/01/2023"

    def test_formats_date(self) -> None:
        assert format_date(date(1931, 7, 14)) == "14/07/1931"

    def test_formats_pandas_timestamp(self) -> None:
        assert format_date(pd.Timestamp("2024-02-29")) == "29/02/2024"

    def test_none_returns_empty(self) -> None:
        assert format_date(None) == ""

    def test_nat_returns_empty(self) -> None:
        assert format_date(pd.NaT) == ""

    def test_string_passthrough(self) -> None:
        assert format_date("2023-11-05") == "2023-11-05"

    def test_number_passthrough(self) -> None:
        assert format_date(12345) == 12345


class TestParseEvaluationDate:
    def test_care_software_format(self) -> None:
        assert parse_evaluation_date("01/01/2023 à 10:00") == datetime(2023, 1, 1, 10, 0)

    def test_day_only(self) -> None:
        assert parse_evaluation_date("15/03/2024") == datetime(2024, 3, 15)

    def test_iso(self) -> None:
        assert parse_evaluation_date("2024-03-15") == datetime(2024, 3, 15)

    def test_datetime_passthrough(self) -> None:
        value = datetime(2024, 3, 15, 9, 30)
        assert parse_evaluation_date(value) is value

    def test_date_promoted(self) -> None:
        assert parse_evaluation_date(date(2024, 3, 15)) == datetime(2024, 3, 15)

    def test_nat_returns_none(self) -> None:
        assert parse_evaluation_date(pd.NaT) is None

    @pytest.mark.parametrize("raw", [None, "", "hier", "32/01/2024", 12345])
    def test_unparseable_returns_none(self, raw) -> None:
        assert parse_evaluation_date(raw) is None
