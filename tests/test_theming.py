"""Tests for the theme model, validation, compilation and styling."""

import dataclasses

import pytest

from pyqt_formtheme.theming import (
    THEME_COLLECTIONS,
    CssTextSurface,
    MemorySurface,
    PaletteManager,
    PropertyCompiler,
    QtStyleSurface,
    StyleSheetGenerator,
    ViewportClass,
    apply_typography_scale,
    audit_accessibility,
    compile_properties,
    create_dark_theme,
    create_default_theme,
    get_font_combinations,
    get_typography_scales,
    merge_changes,
    responsive_multiplier,
    theme_from_json,
    theme_to_json,
    validate_theme,
    viewport_class,
)
from pyqt_formtheme.theming.colors import is_valid_color, parse_color
from pyqt_formtheme.theming.defaults import create_accessibility_theme, create_form_theme
from pyqt_formtheme.theming.models import FontRole, FontRoleName
from pyqt_formtheme.theming.responsive import breakpoint_px
from pyqt_formtheme.theming.style_generator import to_px, to_qss_color


# ========== DEFAULTS ==========

def test_builtin_themes_are_valid():
    """Every built-in theme and collection entry passes validation."""
    for collection in THEME_COLLECTIONS.values():
        for factory in collection.values():
            theme = factory()
            result = validate_theme(theme)
            assert result.is_valid, f"{theme.id}: {result.summary()}"


def test_default_theme_factories_return_fresh_instances():
    a = create_default_theme()
    b = create_default_theme()
    assert a is not b
    assert a.colors is not b.colors
    assert a.advanced_typography is not None
    assert a.advanced_typography.external_roles() == []


def test_dark_theme_differs_only_in_identity_and_colors():
    light = create_default_theme()
    dark = create_dark_theme()
    assert dark.is_dark and not light.is_dark
    assert dark.colors.background != light.colors.background
    assert dark.spacing == light.spacing
    assert dark.typography == light.typography


def test_font_combinations_are_independent_copies():
    combos = get_font_combinations()
    assert [c["name"] for c in combos] == ["Modern", "Classic", "Friendly", "Technical", "System"]
    combos[0]["primary"].fallbacks.append("mutated")
    assert "mutated" not in get_font_combinations()[0]["primary"].fallbacks


def test_apply_typography_scale():
    base = create_default_theme()
    large = apply_typography_scale(base, "large")
    assert large.advanced_typography.elements.input_text.size == pytest.approx(1.25)
    assert base.advanced_typography.elements.input_text.size == 1.0
    assert set(get_typography_scales()) == {"compact", "default", "comfortable", "large"}

    with pytest.raises(KeyError):
        apply_typography_scale(base, "huge")


def test_preset_themes():
    assert create_form_theme().advanced_typography.secondary.family == "Merriweather"
    accessible = create_accessibility_theme()
    assert accessible.advanced_typography.accessibility.contrast_ratio == 7.0


# ========== COLORS ==========

@pytest.mark.parametrize("value", [
    "#fff", "#FFFF", "#3B82F6", "#3B82F680", "rgb(0, 0, 0)", "rgba(0, 0, 0, 0.5)",
    "hsl(210, 50%, 40%)", "hsla(210, 50%, 40%, 0.3)", "transparent",
])
def test_valid_colors(value):
    assert is_valid_color(value)


@pytest.mark.parametrize("value", [
    "", "red-ish", "#12", "#GGGGGG", "rgb(300, 0, 0)", "hsl(10, 120%, 50%)", 12,
    "rgba(0, 0, 0, 1.2.3)", "hsl(1.2.3, 50%, 50%)", "hsl(10, 50.5.5%, 50%)",
])
def test_invalid_colors(value):
    assert not is_valid_color(value)


def test_parse_color_channels():
    assert parse_color("#abc") == (0xAA, 0xBB, 0xCC, 255)
    assert parse_color("rgba(10, 20, 30, 0.5)") == (10, 20, 30, 128)
    assert parse_color("hsl(0, 100%, 50%)") == (255, 0, 0, 255)


# ========== VALIDATION ==========

def test_validation_reports_every_independent_error():
    """Three independent violations yield exactly three errors."""
    theme = create_default_theme()
    theme = dataclasses.replace(
        theme,
        colors=dataclasses.replace(theme.colors, primary="not-a-color"),
        typography=dataclasses.replace(theme.typography, font_weight_normal=50),
        spacing=dataclasses.replace(theme.spacing, md=-1.0),
    )

    result = validate_theme(theme)

    assert not result.is_valid
    assert len(result.errors) == 3
    assert {e.field for e in result.errors} == {
        "colors.primary", "typography.font_weight_normal", "spacing.md"}
    primary_error = next(e for e in result.errors if e.field == "colors.primary")
    assert primary_error.value == "not-a-color"


def test_validation_checks_identity_and_advanced_typography():
    theme = create_default_theme()
    advanced = theme.advanced_typography
    advanced = dataclasses.replace(
        advanced,
        primary=FontRole("", []),
        accessibility=dataclasses.replace(advanced.accessibility, min_body_size=10, contrast_ratio=2.5),
    )
    theme = dataclasses.replace(theme, name="", advanced_typography=advanced)

    fields = {e.field for e in validate_theme(theme).errors}

    assert fields == {
        "name",
        "advanced_typography.primary.family",
        "advanced_typography.accessibility.min_body_size",
        "advanced_typography.accessibility.contrast_ratio",
    }


def test_malformed_color_numbers_are_validation_errors():
    theme = create_default_theme()
    theme = dataclasses.replace(theme, colors=dataclasses.replace(
        theme.colors, primary="rgba(0, 0, 0, 1.2.3)", secondary="hsl(1.2.3, 50%, 50%)"))

    result = validate_theme(theme)

    assert [e.field for e in result.errors] == ["colors.primary", "colors.secondary"]


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_are_rejected(value):
    theme = create_default_theme()
    advanced = theme.advanced_typography
    theme = dataclasses.replace(
        theme,
        typography=dataclasses.replace(theme.typography, font_weight_normal=value, font_size_base=value),
        advanced_typography=dataclasses.replace(
            advanced,
            accessibility=dataclasses.replace(advanced.accessibility, contrast_ratio=value)),
    )

    fields = {e.field for e in validate_theme(theme).errors}

    assert fields == {
        "typography.font_weight_normal",
        "typography.font_size_base",
        "advanced_typography.accessibility.contrast_ratio",
    }


def test_nan_in_imported_json_is_rejected():
    text = theme_to_json(create_default_theme()).replace(
        '"font_weight_normal": 400', '"font_weight_normal": NaN')
    assert "NaN" in text
    result = validate_theme(theme_from_json(text))
    assert [e.field for e in result.errors] == ["typography.font_weight_normal"]


def test_contrast_ratio_floor_is_three():
    theme = create_default_theme()
    advanced = dataclasses.replace(
        theme.advanced_typography,
        accessibility=dataclasses.replace(theme.advanced_typography.accessibility, contrast_ratio=3.0))
    assert validate_theme(dataclasses.replace(theme, advanced_typography=advanced)).is_valid


def test_accessibility_audit():
    """The audit flags small body text and weak contrast without blocking validation."""
    theme = create_default_theme()
    assert audit_accessibility(theme).is_valid

    advanced = dataclasses.replace(
        theme.advanced_typography,
        accessibility=dataclasses.replace(theme.advanced_typography.accessibility, min_body_size=16.0))
    strict = dataclasses.replace(
        theme, advanced_typography=advanced,
        colors=dataclasses.replace(theme.colors, text_primary="#999999"))

    fields = [e.field for e in audit_accessibility(strict).errors]

    assert "advanced_typography.elements.question_description.size" in fields
    assert "advanced_typography.elements.help_text.size" in fields
    assert "colors.text_primary" in fields
    assert validate_theme(strict).is_valid


# ========== SERIALIZATION ==========

def test_json_round_trip_preserves_theme():
    theme = create_dark_theme()
    assert theme_from_json(theme_to_json(theme)) == theme


def test_json_round_trip_without_advanced_typography():
    theme = dataclasses.replace(create_default_theme(), advanced_typography=None)
    restored = theme_from_json(theme_to_json(theme))
    assert restored.advanced_typography is None
    assert restored == theme


@pytest.mark.parametrize("text", ["{not json", "[1, 2]", '{"colors": "red"}', '{"created_at": "yesterday"}'])
def test_malformed_json_raises_value_error(text):
    with pytest.raises(ValueError):
        theme_from_json(text)


def test_merge_changes_merges_nested_groups():
    theme = create_default_theme()
    merged, errors = merge_changes(theme, {"colors": {"primary": "#FF0000"}, "name": "Mine"})

    assert errors == []
    assert merged.colors.primary == "#FF0000"
    assert merged.colors.secondary == theme.colors.secondary
    assert merged.name == "Mine"
    assert theme.colors.primary != "#FF0000"


def test_merge_changes_reports_unknown_fields():
    merged, errors = merge_changes(create_default_theme(), {"colours": {}, "colors": {"primay": "#000"}})
    assert [e.field for e in errors] == ["colours", "colors.primay"]


# ========== COMPILATION ==========

def test_compile_is_idempotent():
    theme = create_default_theme()
    first = compile_properties(theme)
    second = compile_properties(theme)
    assert first == second
    assert list(first) == list(second)


def test_compile_base_properties():
    props = compile_properties(create_default_theme())
    assert props["color-primary"] == "#3B82F6"
    assert props["color-text-primary"] == "#111827"
    assert props["font-size-base"] == "1rem"
    assert props["font-size-2xl"] == "1.5rem"
    assert props["font-weight-bold"] == "700"
    assert props["letter-spacing-tight"] == "-0.025em"
    assert props["spacing-2xl"] == "3rem"
    assert props["border-radius-full"] == "9999px"
    assert props["border-radius-md"] == "0.375rem"
    assert props["transition-duration-fast"] == "150ms"
    assert props["z-index-auto"] == "auto"
    assert props["z-index-modal"] == "1050"
    assert props["breakpoint-2xl"] == "1536px"
    assert len([k for k in props if k.startswith("color-")]) == 28


def test_compile_advanced_block():
    props = compile_properties(create_default_theme())
    assert props["font-role-primary"] == "Inter, system-ui, sans-serif"
    assert props["font-role-mono"] == "'JetBrains Mono', Menlo, monospace"
    assert props["typography-form-title-size"] == "2.25rem"
    assert props["typography-button-text-weight"] == "600"
    assert props["typography-scale-mobile"] == "0.875"
    assert props["typography-min-body-size"] == "14px"
    assert len([k for k in props if k.startswith("typography-") and
                k.rsplit("-", 1)[-1] in ("size", "height", "spacing", "weight")
                and not k.startswith("typography-min")]) == 44


def test_compile_without_advanced_typography_omits_block():
    theme = dataclasses.replace(create_default_theme(), advanced_typography=None)
    props = compile_properties(theme)
    assert "color-primary" in props
    assert not any(k.startswith(("typography-", "font-role-")) for k in props)


def test_compile_advanced_failure_keeps_base_block(monkeypatch):
    """A failure in the advanced block omits only that block."""
    compiler = PropertyCompiler()

    def broken(advanced):
        raise RuntimeError("boom")

    monkeypatch.setattr(compiler, "compile_advanced_typography", broken)
    props = compiler.compile(create_default_theme())

    assert props["color-primary"] == "#3B82F6"
    assert not any(k.startswith("typography-") for k in props)


def test_font_stack_quotes_names_with_spaces():
    role = FontRole("Roboto Slab", ["Georgia", "serif"])
    assert role.font_stack() == "'Roboto Slab', Georgia, serif"
    assert create_default_theme().advanced_typography.role(FontRoleName.MONO).family == "JetBrains Mono"


# ========== STYLE PROJECTIONS ==========

def test_qss_conversions():
    assert to_qss_color("#3B82F6") == "#3b82f6"
    assert to_qss_color("rgba(0, 0, 0, 0.5)") == "rgba(0, 0, 0, 128)"
    assert to_px("1.5rem") == "24px"
    assert to_px("9999px") == "9999px"
    assert to_px("auto", default="1px") == "1px"


def test_style_sheet_generator_uses_element_typography():
    props = compile_properties(create_default_theme())
    qss = StyleSheetGenerator(props).generate_form_style()
    assert "QPushButton" in qss
    assert "#3b82f6" in qss
    assert "font-size: 36px" in qss  # form title, 2.25rem


def test_css_text_surface_renders_root_block():
    texts = []
    surface = CssTextSurface(on_change=texts.append)
    surface.apply({"color-primary": "#FF0000"})
    surface.apply({"spacing-md": "1rem"})

    assert surface.text == ":root {\n  --form-color-primary: #FF0000;\n  --form-spacing-md: 1rem;\n}"
    surface.clear()
    assert surface.text == ""
    assert len(texts) == 3


def test_memory_surface_merges_partial_writes():
    surface = MemorySurface()
    surface.apply({"a": "1", "b": "2"})
    surface.apply({"b": "3"})
    assert surface.properties == {"a": "1", "b": "3"}
    assert surface.write_count == 2


def test_palette_manager(qapp):
    """Palette roles follow the compiled colors."""
    manager = PaletteManager(compile_properties(create_dark_theme()))
    info = manager.get_palette_info()
    assert info["window"] == "#111827"
    assert info["button"] == "#60a5fa"


def test_qt_style_surface_styles_widget(qapp):
    from PyQt6.QtWidgets import QWidget

    widget = QWidget()
    surface = QtStyleSurface(widget)
    surface.apply(compile_properties(create_default_theme()))

    assert "QLineEdit" in widget.styleSheet()
    assert widget.palette().color(widget.backgroundRole()).name() == "#ffffff"

    surface.clear()
    assert widget.styleSheet() == ""


def test_merge_changes_rejects_scalar_for_group():
    theme = create_default_theme()
    merged, errors = merge_changes(theme, {"colors": "red", "created_at": 5})
    assert [e.field for e in errors] == ["colors", "created_at"]
    assert merged.colors == theme.colors


def test_qt_style_surface_keeps_properties_without_target(qapp, monkeypatch):
    """Writes made while nothing can be styled still reach the next styled apply."""
    from PyQt6.QtWidgets import QWidget

    widget = QWidget()
    surface = QtStyleSurface(widget)
    monkeypatch.setattr(surface, "_resolve_target", lambda: None)
    surface.apply(compile_properties(create_dark_theme()))
    assert widget.styleSheet() == ""
    monkeypatch.undo()

    surface.apply({"color-primary": "#FF0000"})

    assert widget.palette().color(widget.backgroundRole()).name() == "#111827"
    assert "QLineEdit" in widget.styleSheet()


# ========== RESPONSIVE ==========

@pytest.mark.parametrize("width, expected", [
    (320, ViewportClass.MOBILE),
    (640, ViewportClass.MOBILE),
    (641, ViewportClass.TABLET),
    (1023, ViewportClass.TABLET),
    (1024, ViewportClass.DESKTOP),
    (1920, ViewportClass.DESKTOP),
])
def test_viewport_class_follows_breakpoints(width, expected):
    assert viewport_class(create_default_theme(), width) is expected


def test_viewport_class_resolves_rem_breakpoints():
    theme = create_default_theme()
    theme = dataclasses.replace(
        theme, breakpoints=dataclasses.replace(theme.breakpoints, sm="30rem", lg="60rem"))
    assert viewport_class(theme, 480) is ViewportClass.MOBILE
    assert viewport_class(theme, 900) is ViewportClass.TABLET
    assert viewport_class(theme, 960) is ViewportClass.DESKTOP


def test_relative_breakpoints_cannot_be_resolved():
    assert breakpoint_px("12pt") == 16.0
    with pytest.raises(ValueError):
        breakpoint_px("50vw")


def test_responsive_multiplier():
    theme = create_default_theme()
    responsive = theme.advanced_typography.responsive
    assert responsive_multiplier(theme, 375) == responsive.mobile
    assert responsive_multiplier(theme, 800) == responsive.tablet
    assert responsive_multiplier(theme, 1440) == responsive.desktop
    assert responsive_multiplier(dataclasses.replace(theme, advanced_typography=None), 375) == 1.0
