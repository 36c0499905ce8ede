from __future__ import annotations

# We use pytest because the repository already standardizes on it for automated checks.
import pytest

# We import the existing Settings loader so tests run with the real default config structure.
from destscore.config.settings import get_settings

# We test the override helper directly because it is pure (no I/O) and guards what clients may change.
from destscore.config.overrides import apply_settings_overrides


def test_apply_settings_overrides_returns_same_object_when_none():
    # Load the baseline settings once (this is a cached Pydantic model).
    settings = get_settings()

    # When no overrides are provided, we expect a no-op and the same object back (fast path).
    assert apply_settings_overrides(settings, None) is settings
    assert apply_settings_overrides(settings, {}) is settings


def test_apply_settings_overrides_can_override_scoring_knobs():
    settings = get_settings()

    # Move the ideal temperature and the default for missing safety data.
    overrides = {"scoring": {"ideal_temperature_c": 25, "attribute_defaults": {"safety_overall": 3}}}
    out = apply_settings_overrides(settings, overrides)

    assert out.scoring.ideal_temperature_c == 25
    assert out.scoring.attribute_defaults.safety_overall == 3
    # Sibling keys survive the deep merge.
    assert out.scoring.attribute_defaults.walkability == settings.scoring.attribute_defaults.walkability

    # The cached shared settings should remain unchanged (avoid cross-request leakage).
    assert settings.scoring.ideal_temperature_c == 20


def test_apply_settings_overrides_can_change_default_sort_only_within_browse():
    settings = get_settings()
    out = apply_settings_overrides(settings, {"browse": {"default_sort": "cost"}})
    assert out.browse.default_sort == "cost"


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()

    # The catalog path is a file path and never overridable per request.
    overrides = {"catalog": {"path": "/etc/passwd"}}

    # Note: in regex, a literal dot must be escaped as `\.` (a raw string avoids double escaping).
    with pytest.raises(ValueError, match=r"disallowed key: 'catalog'"):
        apply_settings_overrides(settings, overrides)

    with pytest.raises(ValueError, match=r"comparison"):
        apply_settings_overrides(settings, {"comparison": {"max_destinations": 99}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()

    # `browse` is a restricted subtree (only `default_sort` is allowed), so it must be a mapping.
    with pytest.raises(ValueError, match=r"settings_overrides key 'browse' must be a mapping"):
        apply_settings_overrides(settings, {"browse": 1})


def test_apply_settings_overrides_revalidates_values():
    settings = get_settings()

    # Pydantic's ValidationError is a ValueError subclass, so callers handle both the same way.
    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"scoring": {"neutral_score": 150}})
    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"browse": {"default_sort": "popularity"}})


def test_apply_settings_overrides_cannot_lift_the_weight_cap():
    settings = get_settings()

    # `max_weight` bounds the weights a request may send, so the same request must not change it.
    with pytest.raises(ValueError, match=r"scoring\.max_weight"):
        apply_settings_overrides(settings, {"scoring": {"max_weight": 1000}})
