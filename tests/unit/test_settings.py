"""
Settings component tests.

Covers loading the YAML settings file, per-call patches and the expansion
of sparse "a,b,c" keyed tables into explicit mappings.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.components.settings import (
    AutofillMap,
    MetaConfigError,
    MetaSettings,
    MetaValueType,
    RestrictionMap,
    SettingsService,
    YamlSettingsSource,
    apply_settings_patch,
    expand_map,
    expand_transform_map,
    get_default_settings,
    load_settings,
    validate_settings_data,
)


class MockSettingsSource:
    """Settings source returning a fixed value."""

    def __init__(self, settings: MetaSettings | None = None) -> None:
        self._settings = settings
        self.get_count = 0

    def get(self) -> MetaSettings | None:
        self.get_count += 1
        return self._settings


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "seo.yaml"
    path.write_text(
        """
default_profile: standard
field_profiles:
  standard:
    title: [seoTitle, title]
    description: summary
profile_map:
  "news,blog": standard
default_meta:
  image: globals.seo.image
additional_meta:
  og:type: website
  og:see_also:
    - "{{ site.facebook }}"
site_name: Acme
"""
    )
    return path


# --- Defaults ---


class TestDefaults:
    """Default settings."""

    def test_default_values(self) -> None:
        settings = get_default_settings()

        assert settings.cache_enabled is True
        assert settings.cache_duration == 3600
        assert settings.include_sitename_in_title is True
        assert settings.sitename_position == "after"
        assert settings.sitename_separator == "|"
        assert settings.sitename_title_properties == ["title"]
        assert settings.truncate_suffix == "…"
        assert settings.apply_restrictions is False
        assert settings.field_profiles == {}

    def test_service_falls_back_to_defaults(self) -> None:
        service = SettingsService(MockSettingsSource(None))

        assert service.get() == get_default_settings()

    def test_service_without_source(self) -> None:
        assert SettingsService().get().cache_enabled is True

    def test_settings_are_frozen(self) -> None:
        settings = get_default_settings()

        with pytest.raises(PydanticValidationError):
            settings.cache_enabled = False  # type: ignore[misc]


# --- Loading ---


class TestLoadSettings:
    """YAML settings file loading."""

    def test_loads_and_normalizes(self, settings_file: Path) -> None:
        settings = load_settings(settings_file)

        assert settings.default_profile == "standard"
        assert settings.field_profiles["standard"]["description"] == ["summary"]
        assert settings.default_meta == {"image": ["globals.seo.image"]}
        assert settings.additional_meta["og:see_also"] == ["{{ site.facebook }}"]
        assert settings.site_name == "Acme"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MetaConfigError) as exc_info:
            load_settings(tmp_path / "nope.yaml")

        assert exc_info.value.errors[0].code == "not_found"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "seo.yaml"
        path.write_text("field_profiles: [unclosed\n")

        with pytest.raises(MetaConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_schema_errors_are_field_specific(self, tmp_path: Path) -> None:
        path = tmp_path / "seo.yaml"
        path.write_text("cache_duration: soon\nunknown_key: 1\n")

        with pytest.raises(MetaConfigError) as exc_info:
            load_settings(path)

        by_field = {error.field: error.code for error in exc_info.value.errors}
        assert by_field["cache_duration"] == "invalid_type"
        assert by_field["unknown_key"] == "unknown_setting"

    def test_empty_file_yields_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "seo.yaml"
        path.write_text("")

        assert load_settings(path) == get_default_settings()

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(MetaConfigError):
            validate_settings_data(["not", "a", "mapping"])

    def test_invalid_additional_meta(self) -> None:
        with pytest.raises(MetaConfigError):
            validate_settings_data({"additional_meta": {"og:type": 42}})

    def test_yaml_source_parses_once(self, settings_file: Path) -> None:
        source = YamlSettingsSource(settings_file)

        first = source.get()
        settings_file.write_text("default_profile: other\n")

        assert source.get() is first


# --- Patching ---


class TestSettingsPatch:
    """Per-call settings patches."""

    def test_patch_returns_new_value(self) -> None:
        base = MetaSettings(site_name="Acme")

        patched = apply_settings_patch(base, {"site_name": "Other", "cache_enabled": False})

        assert patched.site_name == "Other"
        assert patched.cache_enabled is False
        assert base.site_name == "Acme"
        assert base.cache_enabled is True

    def test_patch_replaces_top_level_values(self) -> None:
        base = MetaSettings(field_profiles={"a": {"title": ["x"]}, "b": {"title": ["y"]}})

        patched = apply_settings_patch(base, {"field_profiles": {"c": {"title": "z"}}})

        assert patched.field_profiles == {"c": {"title": ["z"]}}

    def test_empty_patch_is_identity(self) -> None:
        base = MetaSettings()

        assert apply_settings_patch(base, None) is base
        assert apply_settings_patch(base, {}) is base

    def test_invalid_patch_raises(self) -> None:
        with pytest.raises(MetaConfigError) as exc_info:
            apply_settings_patch(MetaSettings(), {"sitename_position": "middle"})

        assert exc_info.value.errors[0].field == "sitename_position"

    def test_for_call_uses_base(self) -> None:
        service = SettingsService(MockSettingsSource(MetaSettings(site_name="Acme")))

        settings = service.for_call({"sitename_separator": "-"})

        assert settings.site_name == "Acme"
        assert settings.sitename_separator == "-"


# --- Map Expansion ---


class TestExpandMap:
    """Comma-keyed table expansion."""

    def test_splits_and_strips_keys(self) -> None:
        assert expand_map({"title, og:title": 1, "image": 2}) == {
            "title": 1,
            "og:title": 1,
            "image": 2,
        }

    def test_later_entries_win(self) -> None:
        assert expand_map({"a,b": 1, "b": 2}) == {"a": 1, "b": 2}

    def test_empty_segments_ignored(self) -> None:
        assert expand_map({"a,,b,": 1}) == {"a": 1, "b": 1}

    def test_transform_map_expanded(self) -> None:
        settings = MetaSettings(image_transform_map={"og:image,twitter:image": {"width": 800}})

        transforms = expand_transform_map(settings)

        assert set(transforms) == {"og:image", "twitter:image"}
        assert transforms["og:image"].to_options() == {"width": 800}

    def test_transform_format_lowercased_and_extras_kept(self) -> None:
        settings = MetaSettings(image_transform_map={"image": {"format": "JPG", "quality": 80}})

        options = expand_transform_map(settings)["image"].to_options()

        assert options == {"format": "jpg", "quality": 80}


class TestAutofillMap:
    """Alias groups from the autofill table."""

    def test_default_groups(self) -> None:
        autofill = AutofillMap.from_settings(MetaSettings())
        groups = {group.canonical: group.aliases for group in autofill.groups}

        assert groups == {
            "title": ("og:title", "twitter:title"),
            "description": ("og:description", "twitter:description"),
            "image": ("og:image", "twitter:image"),
        }

    def test_comma_targets(self) -> None:
        autofill = AutofillMap.from_config({"og:site_name,twitter:site": "site"})

        (group,) = autofill.groups
        assert group.keys == ("site", "og:site_name", "twitter:site")


class TestRestrictionMap:
    """Per-key type and length rules."""

    def test_default_rules(self) -> None:
        restrictions = RestrictionMap.from_settings(MetaSettings())

        assert restrictions.type_for("og:image") == MetaValueType.IMAGE
        assert restrictions.type_for("og:title") == MetaValueType.TEXT
        assert restrictions.max_length_for("twitter:title") == 60
        assert restrictions.max_length_for("description") == 300

    def test_unknown_key_is_unrestricted_text(self) -> None:
        restrictions = RestrictionMap.from_settings(MetaSettings())

        assert restrictions.get("og:locale") is None
        assert restrictions.type_for("og:locale") == MetaValueType.TEXT
        assert restrictions.max_length_for("og:locale") is None

    def test_image_keys_have_no_length(self) -> None:
        settings = MetaSettings(meta_property_types={"image": {"type": "image", "max_length": 10}})

        assert RestrictionMap.from_settings(settings).max_length_for("image") is None
