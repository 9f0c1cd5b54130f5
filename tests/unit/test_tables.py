"""Tests for loading and freezing tax tables.

Uses isolated config directories via tmp_path and TAX_GENIE_CONFIG_PATH
so the user's settings.json never affects which tax data is loaded.
"""

import dataclasses
import json

import pytest
import yaml

from taxgenie.sdk.taxes import (
    UNBOUNDED,
    DataFormatError,
    FlatStateTax,
    NoStateTax,
    ProgressiveStateTax,
    load_tax_data,
    load_tax_tables,
    load_tax_tables_file,
)
from taxgenie.sdk.taxes.tables import DATA_DIR, get_available_years


# === TEST DATA ===

STATUSES = ("single", "head_of_household", "married_jointly", "married_separately")


def make_dataset() -> dict:
    """Small but complete tax dataset."""
    brackets = [
        {"rate": 0.10, "min": 0, "max": 10000},
        {"rate": 0.20, "min": 10001, "max": None},
    ]
    return {
        "current_year": 2025,
        "federal_tax_brackets": {status: [dict(b) for b in brackets] for status in STATUSES},
        "standard_deductions": {status: 5000 for status in STATUSES},
        "child_tax_credit": 1234,
        "fica_rates": {
            "social_security": 0.062,
            "medicare": 0.0145,
            "additional_medicare": 0.009,
            "social_security_wage_base": 100000,
            "additional_medicare_threshold": {status: 200000 for status in STATUSES},
        },
        "contribution_limits": {"contribution_401k": 20000, "hsa_family": 8000},
        "state_tax_data": {
            "AA": {"type": "progressive", "brackets": [
                {"rate": 0.01, "min": 0, "max": 5000},
                {"rate": 0.05, "min": 5001, "max": None},
            ]},
            "BB": {"type": "flat", "rate": 0.04},
            "CC": {"type": "none"},
        },
    }


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point settings at an empty config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("TAX_GENIE_CONFIG_PATH", str(config_dir))
    return config_dir


# === TESTS ===


class TestBundledData:
    """The shipped 2025 tax data."""

    def test_2025_is_available(self):
        assert 2025 in get_available_years()

    def test_loads_2025(self):
        tables = load_tax_tables_file(DATA_DIR / "2025.yaml")

        assert tables.year == 2025
        assert tables.standard_deduction("single") == 15000
        assert tables.limits.max_401k == 23500
        assert tables.fica.additional_medicare_threshold["married_jointly"] == 250000

    def test_top_federal_bracket_is_unbounded_marker(self):
        tables = load_tax_tables_file(DATA_DIR / "2025.yaml")

        for status in STATUSES:
            top = tables.federal_brackets(status)[-1]
            assert top.max is UNBOUNDED
            assert not isinstance(top.max, float)

    def test_state_rule_variants(self):
        tables = load_tax_tables_file(DATA_DIR / "2025.yaml")

        assert isinstance(tables.state_rule("CA"), ProgressiveStateTax)
        assert tables.state_rule("CA").brackets[-1].max is UNBOUNDED
        assert tables.state_rule("IL") == FlatStateTax(rate=0.0495)
        assert isinstance(tables.state_rule("TX"), NoStateTax)

    def test_all_fifty_states_present(self):
        tables = load_tax_tables_file(DATA_DIR / "2025.yaml")
        assert len(tables.states) == 50


class TestLoadTaxTables:
    """Validation and freezing of a dataset dict."""

    def test_loads_minimal_dataset(self):
        tables = load_tax_tables(make_dataset())

        assert tables.year == 2025
        assert tables.year_table.child_tax_credit == 1234
        assert tables.federal_brackets("single")[1].max is UNBOUNDED
        assert tables.state_rule("AA").brackets[1].max is UNBOUNDED

    def test_state_lookup_is_case_insensitive(self):
        tables = load_tax_tables(make_dataset())
        assert tables.state_rule("bb") == FlatStateTax(rate=0.04)

    def test_unknown_state_has_no_tax(self):
        tables = load_tax_tables(make_dataset())
        assert isinstance(tables.state_rule("ZZ"), NoStateTax)

    def test_missing_current_year(self):
        dataset = make_dataset()
        del dataset["current_year"]

        with pytest.raises(DataFormatError, match="current_year"):
            load_tax_tables(dataset)

    @pytest.mark.parametrize("key", [
        "federal_tax_brackets",
        "standard_deductions",
        "child_tax_credit",
        "fica_rates",
        "contribution_limits",
    ])
    def test_missing_required_section(self, key):
        dataset = make_dataset()
        del dataset[key]

        with pytest.raises(DataFormatError):
            load_tax_tables(dataset)

    def test_missing_filing_status(self):
        dataset = make_dataset()
        del dataset["standard_deductions"]["head_of_household"]

        with pytest.raises(DataFormatError, match="head_of_household"):
            load_tax_tables(dataset)

    def test_not_a_mapping(self):
        with pytest.raises(DataFormatError):
            load_tax_tables(["not", "a", "dataset"])

    def test_bracket_gap_rejected(self):
        dataset = make_dataset()
        dataset["federal_tax_brackets"]["single"][1]["min"] = 10500

        with pytest.raises(DataFormatError, match="must start at 10001"):
            load_tax_tables(dataset)

    def test_bounded_top_bracket_rejected(self):
        dataset = make_dataset()
        dataset["federal_tax_brackets"]["single"][1]["max"] = 50000

        with pytest.raises(DataFormatError, match="no upper limit"):
            load_tax_tables(dataset)

    def test_open_middle_bracket_rejected(self):
        dataset = make_dataset()
        dataset["state_tax_data"]["AA"]["brackets"][0]["max"] = None

        with pytest.raises(DataFormatError, match="only the top bracket"):
            load_tax_tables(dataset)

    def test_first_bracket_must_start_at_zero(self):
        dataset = make_dataset()
        dataset["federal_tax_brackets"]["married_jointly"][0]["min"] = 1

        with pytest.raises(DataFormatError, match="start at 0"):
            load_tax_tables(dataset)

    def test_empty_bracket_list_rejected(self):
        dataset = make_dataset()
        dataset["federal_tax_brackets"]["single"] = []

        with pytest.raises(DataFormatError, match="empty"):
            load_tax_tables(dataset)

    def test_unknown_state_type_rejected(self):
        dataset = make_dataset()
        dataset["state_tax_data"]["DD"] = {"type": "graduated", "rate": 0.02}

        with pytest.raises(DataFormatError):
            load_tax_tables(dataset)


class TestImmutability:
    """Loaded tables are read-only."""

    def test_states_mapping_is_read_only(self):
        tables = load_tax_tables(make_dataset())

        with pytest.raises(TypeError):
            tables.states["ZZ"] = FlatStateTax(rate=0.5)

    def test_standard_deductions_read_only(self):
        tables = load_tax_tables(make_dataset())

        with pytest.raises(TypeError):
            tables.year_table.standard_deductions["single"] = 0

    def test_tables_are_frozen(self):
        tables = load_tax_tables(make_dataset())

        with pytest.raises(dataclasses.FrozenInstanceError):
            tables.limits.max_401k = 1

    def test_loading_does_not_mutate_dataset(self):
        dataset = make_dataset()
        load_tax_tables(dataset)
        assert dataset == make_dataset()


class TestContributionLimits:

    def test_two_earners_each_capped(self):
        tables = load_tax_tables(make_dataset())
        assert tables.limits.max_401k_per_earner((90000, 90000)) == [20000, 20000]

    def test_capped_by_income(self):
        tables = load_tax_tables(make_dataset())
        assert tables.limits.max_401k_per_earner((12000,)) == [12000]

    def test_second_earner_without_wages(self):
        tables = load_tax_tables(make_dataset())
        assert tables.limits.max_401k_per_earner((50000, 0)) == [20000, 0]


class TestLoadTaxData:
    """File resolution through settings."""

    def test_default_is_latest_bundled_year(self, isolated_env):
        tables = load_tax_data()
        assert tables.year == get_available_years()[0]

    def test_configured_path_wins(self, isolated_env, tmp_path):
        data_file = tmp_path / "custom.yaml"
        data_file.write_text(yaml.safe_dump(make_dataset()))
        (isolated_env / "settings.json").write_text(json.dumps({"tax_data_path": str(data_file)}))

        tables = load_tax_data()
        assert tables.year_table.child_tax_credit == 1234

    def test_configured_path_missing(self, isolated_env, tmp_path):
        missing = tmp_path / "missing.yaml"
        (isolated_env / "settings.json").write_text(json.dumps({"tax_data_path": str(missing)}))

        with pytest.raises(FileNotFoundError, match="configured path"):
            load_tax_data()

    def test_unknown_year(self, isolated_env):
        with pytest.raises(FileNotFoundError, match="1999"):
            load_tax_data(1999)

    def test_year_mismatch(self, isolated_env, tmp_path):
        dataset = make_dataset()
        dataset["current_year"] = 2024
        data_file = tmp_path / "other.yaml"
        data_file.write_text(yaml.safe_dump(dataset))
        (isolated_env / "settings.json").write_text(json.dumps({"tax_data_path": str(data_file)}))

        with pytest.raises(DataFormatError, match="expected 2025"):
            load_tax_data(2025)

    def test_invalid_yaml(self, tmp_path):
        data_file = tmp_path / "broken.yaml"
        data_file.write_text("current_year: [2025\n")

        with pytest.raises(DataFormatError, match="not valid YAML"):
            load_tax_tables_file(data_file)

    def test_same_file_loaded_once(self, isolated_env):
        assert load_tax_data() is load_tax_data()
