"""Tests for input validation: validate_wizard_input, validate_pages."""

import pytest

from mvp_studio.errors import ConfigurationError
from mvp_studio.utils.validator import validate_pages, validate_wizard_input


class TestValidateWizardInput:
    def test_valid_input_passes(self, wizard_input):
        result = validate_wizard_input(wizard_input)
        assert result["app_name"] == "FoodieHub"
        assert result["platforms"] == ["android"]

    def test_complexity_derived_from_feature_count(self, wizard_input):
        wizard_input["complexity"] = "complex"  # caller value ignored
        assert validate_wizard_input(wizard_input)["complexity"] == "medium"

    @pytest.mark.parametrize("count,expected", [(0, "simple"), (2, "simple"), (3, "medium"), (5, "medium"), (6, "complex")])
    def test_complexity_thresholds(self, wizard_input, count, expected):
        wizard_input["key_features"] = [f"Feature {i}" for i in range(count)]
        assert validate_wizard_input(wizard_input)["complexity"] == expected

    def test_missing_app_name_raises(self, wizard_input):
        wizard_input["app_name"] = "   "
        with pytest.raises(ConfigurationError, match="app_name"):
            validate_wizard_input(wizard_input)

    def test_invalid_app_type_raises(self, wizard_input):
        wizard_input["app_type"] = "desktop-app"
        with pytest.raises(ConfigurationError, match="app_type"):
            validate_wizard_input(wizard_input)

    def test_empty_platforms_raises(self, wizard_input):
        wizard_input["platforms"] = []
        with pytest.raises(ConfigurationError, match="platforms"):
            validate_wizard_input(wizard_input)

    def test_unknown_platform_raises(self, wizard_input):
        wizard_input["platforms"] = ["android", "symbian"]
        with pytest.raises(ConfigurationError, match="platform"):
            validate_wizard_input(wizard_input)

    def test_single_platform_string_accepted(self, wizard_input):
        wizard_input["platforms"] = "web"
        assert validate_wizard_input(wizard_input)["platforms"] == ["web"]

    def test_duplicate_platforms_collapsed(self, wizard_input):
        wizard_input["platforms"] = ["ios", "android", "ios"]
        assert validate_wizard_input(wizard_input)["platforms"] == ["ios", "android"]

    def test_theme_and_style_defaults(self, wizard_input):
        del wizard_input["theme"]
        del wizard_input["design_style"]
        result = validate_wizard_input(wizard_input)
        assert result["theme"] == "dark"
        assert result["design_style"] == "minimal"

    def test_blank_features_dropped(self, wizard_input):
        wizard_input["key_features"] = ["  Scan  ", "", "   "]
        result = validate_wizard_input(wizard_input)
        assert result["key_features"] == ["Scan"]
        assert result["complexity"] == "simple"

    def test_blank_audience_omitted(self, wizard_input):
        wizard_input["target_audience"] = "  "
        assert "target_audience" not in validate_wizard_input(wizard_input)

    def test_audience_kept_when_present(self, wizard_input):
        wizard_input["target_audience"] = "busy parents"
        assert validate_wizard_input(wizard_input)["target_audience"] == "busy parents"

    def test_non_mapping_raises(self):
        with pytest.raises(ConfigurationError):
            validate_wizard_input(["not", "a", "dict"])

    def test_configuration_error_is_value_error(self, wizard_input):
        wizard_input["theme"] = "sepia"
        with pytest.raises(ValueError):
            validate_wizard_input(wizard_input)


class TestValidatePages:
    def test_valid_pages_returned(self, pages):
        assert validate_pages(pages) is pages

    def test_empty_list_raises(self):
        with pytest.raises(ConfigurationError, match="At least one page"):
            validate_pages([])

    def test_duplicate_names_raise(self, pages):
        pages.append(dict(pages[0]))
        with pytest.raises(ConfigurationError, match="Duplicate page name 'Home'"):
            validate_pages(pages)

    def test_missing_name_raises(self, pages):
        pages[1]["name"] = ""
        with pytest.raises(ConfigurationError, match="Page 1"):
            validate_pages(pages)
