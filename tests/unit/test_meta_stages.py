"""
Unit tests for individual meta pipeline stages.
"""

from __future__ import annotations

import pytest

from src.adapters.sites import StaticSiteProvider
from src.components.meta import (
    ListValue,
    Recipe,
    StaticValue,
    add_sitename,
    apply_meta_filters,
    apply_meta_restrictions,
    autofill_meta,
    classify_additional_value,
    element_cache_key,
    mime_type_for_format,
    override_meta,
    resolve_site_name,
    truncate_text,
)
from src.components.settings import MetaSettings
from src.domain.entities import Element


class TestClassifyAdditionalValue:
    def test_string(self) -> None:
        assert classify_additional_value("{{ x }}") == StaticValue(template="{{ x }}")

    def test_list(self) -> None:
        assert classify_additional_value(["a", None]) == ListValue(templates=("a", ""))

    def test_callable(self) -> None:
        def fn(ctx):
            return "x"

        assert classify_additional_value(fn) == Recipe(fn=fn)

    def test_none(self) -> None:
        assert classify_additional_value(None) == StaticValue(template="")


class TestOverrideAndAutofill:
    def test_override_replaces(self) -> None:
        meta = {"title": "a", "description": "b"}

        assert override_meta(meta, {"title": "c"}) == {"title": "c", "description": "b"}

    def test_override_none_is_noop(self) -> None:
        assert override_meta({"title": "a"}, None) == {"title": "a"}

    def test_autofill_fills_none(self) -> None:
        meta = autofill_meta({"title": "T", "og:title": None}, MetaSettings())

        assert meta["og:title"] == "T"
        assert meta["twitter:title"] == "T"

    def test_autofill_without_source(self) -> None:
        meta = autofill_meta({"description": None}, MetaSettings())

        assert "og:description" not in meta
        assert meta["description"] is None

    def test_autofill_custom_map(self) -> None:
        settings = MetaSettings(autofill_map={"og:site_name": "site"})

        meta = autofill_meta({"og:site_name": "Acme"}, settings)

        assert meta["site"] == "Acme"


class TestRestrictions:
    @pytest.mark.parametrize(
        ("value", "max_length", "suffix", "expected"),
        [
            ("short", 10, "…", "short"),
            ("exactly10!", 10, "…", "exactly10!"),
            ("abcdefghijk", 10, "…", "abcdefghi…"),
            ("abcdefghijk", 2, "...", "..."),
        ],
    )
    def test_truncate_text(self, value: str, max_length: int, suffix: str, expected: str) -> None:
        assert truncate_text(value, max_length, suffix) == expected

    def test_only_text_keys_truncated(self) -> None:
        settings = MetaSettings(
            meta_property_types={
                "title": {"type": "text", "max_length": 5},
                "image": {"type": "image", "max_length": 5},
            },
            truncate_suffix="",
        )
        meta = {"title": "Long title", "image": "https://x.test/long.jpg", "og:type": "website"}

        result = apply_meta_restrictions(meta, settings)

        assert result == {
            "title": "Long ",
            "image": "https://x.test/long.jpg",
            "og:type": "website",
        }


class TestFilters:
    def test_encodes_strings_and_lists(self) -> None:
        meta = {"title": "A & B", "tags": ["<x>", "https://a.test/?q=1&r=2"]}

        assert apply_meta_filters(meta) == {
            "title": "A &amp; B",
            "tags": ["&lt;x&gt;", "https://a.test/?q=1&r=2"],
        }

    def test_existing_entities_not_double_encoded(self) -> None:
        assert apply_meta_filters({"title": "A &amp; B"}) == {"title": "A &amp; B"}


class TestSitename:
    def test_resolution_order(self) -> None:
        sites = StaticSiteProvider(
            current_handle="fr",
            site_names={"fr": "Acme FR"},
            configured_name={"en": "Acme EN", "fr": "Acme Config FR"},
        )

        assert resolve_site_name(MetaSettings(site_name={"fr": "Mapped"}), sites) == "Mapped"
        assert resolve_site_name(MetaSettings(site_name={"en": "Mapped"}), sites) == ""
        assert resolve_site_name(MetaSettings(site_name="Plain"), sites) == "Plain"
        assert resolve_site_name(MetaSettings(), sites) == "Acme Config FR"

    def test_configured_map_falls_back_to_first_entry(self) -> None:
        sites = StaticSiteProvider(current_handle="de", configured_name={"en": "Acme EN"})

        assert resolve_site_name(MetaSettings(), sites) == "Acme EN"

    def test_configured_string_then_display_name(self) -> None:
        configured = StaticSiteProvider(configured_name="Configured", site_names={"default": "D"})
        display = StaticSiteProvider(site_names={"default": "Display"})

        assert resolve_site_name(MetaSettings(), configured) == "Configured"
        assert resolve_site_name(MetaSettings(), display) == "Display"

    def test_no_sites(self) -> None:
        assert resolve_site_name(MetaSettings(), None) == ""

    def test_add_sitename_to_several_properties(self, renderer) -> None:
        settings = MetaSettings(
            site_name="Acme",
            sitename_title_properties=["title", "og:title"],
            sitename_separator="·",
        )
        meta = {"title": "Home", "og:title": "Home OG"}

        result = add_sitename(meta, {}, settings, renderer)

        assert result["title"] == "Home · Acme"
        assert result["og:title"] == "Home OG · Acme"

    def test_add_sitename_skips_non_text(self, renderer) -> None:
        settings = MetaSettings(site_name="Acme")

        result = add_sitename({"title": ["a", "b"]}, {}, settings, renderer)

        assert result["title"] == ["a", "b"]


class TestHelpers:
    @pytest.mark.parametrize(
        ("fmt", "expected"),
        [("jpg", "image/jpeg"), ("png", "image/png"), ("webp", "image/webp")],
    )
    def test_mime_type_for_format(self, fmt: str, expected: str) -> None:
        assert mime_type_for_format(fmt) == expected

    def test_element_cache_key(self) -> None:
        assert element_cache_key(Element(id="42", site_handle="fr")) == "fr:42"
