"""Tests for keyword option normalization."""

import pytest
from pydantic import ValidationError

from modscope.core.errors import ConfigurationError
from modscope.core.feature import ModuleFeature
from modscope.core.options import (
    InnerFeature,
    KeywordOptions,
    coerce_options,
    merge_options,
    normalize_options,
)


class NamespaceFeature(ModuleFeature):
    def default_keyword_name(self) -> str:
        return "namespace"


class TestDefaults:
    def test_none_gives_defaults(self, feature: ModuleFeature) -> None:
        options = normalize_options(None, feature)
        assert options.alias_name == "module"
        assert options.inner == ()
        assert options.preamble == ()

    def test_default_keyword_comes_from_feature(self) -> None:
        options = normalize_options({}, NamespaceFeature())
        assert options.alias_name == "namespace"

    def test_record_passes_through(self, feature: ModuleFeature) -> None:
        record = normalize_options({"as": "unit"}, feature)
        assert normalize_options(record, feature) is record


class TestShapes:
    def test_list_is_inner_shorthand(self, feature: ModuleFeature) -> None:
        options = normalize_options(["function", "method"], feature)
        assert [entry.name for entry in options.inner] == ["function", "method"]
        assert options.alias_name == "module"

    def test_mapping_with_as(self, feature: ModuleFeature) -> None:
        options = normalize_options({"as": "unit", "preamble": ["version 2"]}, feature)
        assert options.alias_name == "unit"
        assert options.preamble == ("version 2",)

    def test_alias_name_key(self, feature: ModuleFeature) -> None:
        options = normalize_options({"alias_name": "unit"}, feature)
        assert options.alias_name == "unit"

    def test_as_and_alias_name_together(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"as": "one", "alias_name": "two"}, feature)
        assert exc_info.value.field == "as"

    def test_inner_pair_keeps_options(self, feature: ModuleFeature) -> None:
        options = normalize_options({"inner": [["module", {"as": "ns"}]]}, feature)
        assert options.inner == (InnerFeature(name="module", options={"as": "ns"}),)

    def test_scalar_rejected(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options("not-a-mapping-or-list", feature)
        assert exc_info.value.field == "options"
        assert "expected to be a mapping or a list" in exc_info.value.message

    def test_coerce_keeps_raw_values(self) -> None:
        assert coerce_options({"as": 3}, "X") == {"as": 3}
        assert coerce_options(("a",), "X") == {"inner": ["a"]}
        assert coerce_options(None, "X") == {}


class TestValidation:
    def test_as_must_be_string(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"as": 12}, feature)
        assert exc_info.value.field == "as"

    @pytest.mark.parametrize("alias", ["1abc", "foo-bar", "", "Foo::Bar", "a b"])
    def test_as_must_be_identifier(self, feature: ModuleFeature, alias: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"as": alias}, feature)
        assert exc_info.value.field == "as"
        assert (
            f"The string '{alias}' cannot be used as keyword for ModuleFeature syntax"
            in exc_info.value.message
        )

    @pytest.mark.parametrize("alias", ["Namespace", "_private", "unit2"])
    def test_as_accepts_identifiers(self, feature: ModuleFeature, alias: str) -> None:
        assert normalize_options({"as": alias}, feature).alias_name == alias

    def test_inner_must_be_list(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"inner": "function"}, feature)
        assert exc_info.value.field == "inner"

    def test_inner_entry_shape(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"inner": [42]}, feature)
        assert exc_info.value.field == "inner"

    def test_inner_options_must_be_writable(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"inner": [["module", {1: 2}]]}, feature)
        assert exc_info.value.field == "inner"

    def test_inner_options_checked_for_same_feature(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"inner": [["module", {"as": "1bad"}]]}, feature)
        assert exc_info.value.field == "inner"
        assert "1bad" in exc_info.value.message

    def test_inner_options_of_other_features_kept_raw(self, feature: ModuleFeature) -> None:
        options = normalize_options({"inner": [["other", {"anything": 1}]]}, feature)
        assert options.inner[0].options == {"anything": 1}

    def test_preamble_must_be_list(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"preamble": "version 1"}, feature)
        assert exc_info.value.field == "preamble"

    def test_preamble_entries_must_be_strings(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"preamble": ["version 1", 2]}, feature)
        assert exc_info.value.field == "preamble"

    def test_inner_checked_before_as(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"inner": "x", "as": "1bad"}, feature)
        assert exc_info.value.field == "inner"

    def test_unknown_key_rejected(self, feature: ModuleFeature) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            normalize_options({"as": "unit", "colour": "red"}, feature)
        assert exc_info.value.field == "options"
        assert "colour" in exc_info.value.message


class TestRecord:
    def test_record_is_frozen(self, feature: ModuleFeature) -> None:
        options = normalize_options(None, feature)
        with pytest.raises(ValidationError):
            options.alias_name = "other"

    def test_literal_normalizes_back(self, feature: ModuleFeature) -> None:
        options = normalize_options(
            {"as": "unit", "inner": ["a", ["b", {"as": "c"}]], "preamble": ["version 1"]},
            feature,
        )
        assert options.to_literal() == {
            "as": "unit",
            "inner": ["a", ["b", {"as": "c"}]],
            "preamble": ["version 1"],
        }
        assert normalize_options(options.to_literal(), feature) == options

    def test_populate_by_alias(self) -> None:
        options = KeywordOptions.model_validate({"as": "unit"})
        assert options.alias_name == "unit"


class TestMergeOptions:
    def test_lists_concatenate_shared_first(self) -> None:
        merged = merge_options(
            {"inner": ["X"], "preamble": ["a"]}, {"inner": ["Y"], "preamble": ["b"]}, "M"
        )
        assert merged["inner"] == ["X", "Y"]
        assert merged["preamble"] == ["a", "b"]

    def test_entry_scalar_wins(self) -> None:
        merged = merge_options({"as": "one"}, {"as": "two"}, "M")
        assert merged["as"] == "two"

    def test_list_shorthand_on_both_sides(self) -> None:
        assert merge_options(["X"], ["Y"], "M") == {"inner": ["X", "Y"]}

    def test_missing_sides(self) -> None:
        assert merge_options(None, {"preamble": ["b"]}, "M") == {"preamble": ["b"]}
        assert merge_options({"inner": ["X"]}, None, "M") == {"inner": ["X"]}
