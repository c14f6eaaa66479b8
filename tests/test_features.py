"""Tests for feature names, kinds and directions."""

from unittest.mock import patch

import pytest

from plugdeps.features import (
    Direction,
    FeatureKind,
    InvalidArgumentError,
    canonical,
    normalize_features,
    self_feature,
)


class TestSelfFeature:
    def test_grouped_plugin(self):
        assert self_feature("jetpack/jetpack.php") == "JETPACK_JETPACK"

    def test_group_and_base_differ(self):
        assert self_feature("akismet/akismet-core.php") == "AKISMET_AKISMET-CORE"

    def test_single_file_plugin_has_empty_group(self):
        assert self_feature("hello.php") == "_HELLO"

    def test_windows_separators(self):
        assert self_feature("my-plugin\\main.py") == "MY-PLUGIN_MAIN"


class TestNormalizeFeatures:
    def test_upper_cases(self):
        assert normalize_features(["Foo_Bar", "baz"]) == {"FOO_BAR", "BAZ"}

    def test_case_variants_collapse(self):
        assert normalize_features(["Foo_Bar", "FOO_BAR", "foo_bar"]) == {"FOO_BAR"}

    def test_none_and_empty(self):
        assert normalize_features(None) == frozenset()
        assert normalize_features([]) == frozenset()

    def test_blank_entries_dropped(self):
        assert normalize_features(["", "  ", "x"]) == {"X"}

    def test_only_case_is_folded(self):
        assert canonical("xml-rpc") == "XML-RPC"
        assert canonical(" x") != canonical("X")
        assert normalize_features([" X", "X"]) == {" X", "X"}


class TestFeatureKind:
    def test_opposite(self):
        assert FeatureKind.PROVIDES.opposite is FeatureKind.REQUIRES
        assert FeatureKind.REQUIRES.opposite is FeatureKind.PROVIDES

    @pytest.mark.parametrize("value", ["Provides", "provides", "PROVIDES"])
    def test_coerce_string(self, value):
        assert FeatureKind.coerce(value) is FeatureKind.PROVIDES

    def test_coerce_member(self):
        assert FeatureKind.coerce(FeatureKind.REQUIRES) is FeatureKind.REQUIRES

    @pytest.mark.parametrize("value", ["Conflicts", "", None, 1])
    def test_coerce_invalid(self, value):
        with pytest.raises(InvalidArgumentError):
            FeatureKind.coerce(value)

    def test_invalid_argument_is_value_error(self):
        assert issubclass(InvalidArgumentError, ValueError)


class TestDirection:
    def test_up_maps_requires_to_provides(self):
        assert Direction.UP.from_kind is FeatureKind.REQUIRES
        assert Direction.UP.to_kind is FeatureKind.PROVIDES

    def test_down_maps_provides_to_requires(self):
        assert Direction.DOWN.from_kind is FeatureKind.PROVIDES
        assert Direction.DOWN.to_kind is FeatureKind.REQUIRES

    def test_coerce_from_kind(self):
        assert Direction.coerce(FeatureKind.REQUIRES) is Direction.UP
        assert Direction.coerce(FeatureKind.PROVIDES) is Direction.DOWN

    @pytest.mark.parametrize(
        "value,expected",
        [("up", Direction.UP), ("DOWN", Direction.DOWN), ("Requires", Direction.UP)],
    )
    def test_coerce_string(self, value, expected):
        assert Direction.coerce(value) is expected

    def test_coerce_invalid(self):
        with pytest.raises(InvalidArgumentError):
            Direction.coerce("sideways")

    def test_coerce_kind_name_uses_lookup(self):
        with patch.object(
            FeatureKind, "coerce", side_effect=AssertionError("FeatureKind.coerce called")
        ):
            assert Direction.coerce("provides") is Direction.DOWN
            with pytest.raises(InvalidArgumentError):
                Direction.coerce("sideways")


class TestFeatureKindLookup:
    def test_lookup_match(self):
        assert FeatureKind.lookup("REQUIRES") is FeatureKind.REQUIRES

    @pytest.mark.parametrize("value", ["up", "", None, 3])
    def test_lookup_no_match(self, value):
        assert FeatureKind.lookup(value) is None
