"""
Per-request settings overrides.

Clients may tune scoring for a single compare/browse call by sending
`settings_overrides`, e.g. `{"scoring": {"ideal_temperature_c": 24}}`. Only the
subtrees listed in `OVERRIDABLE` are accepted; the result is a new, re-validated
`Settings`, and the cached process settings are left untouched.
"""

from __future__ import annotations

from typing import Any, Mapping

from destscore.config.settings import Settings

# True: anything below this key may change. Mapping: only the listed children may.
OVERRIDABLE: dict[str, Any] = {
    "scoring": {
        "neutral_score": True,
        "ideal_temperature_c": True,
        "climate_penalty_per_degree": True,
        "attribute_defaults": True,
        "default_weights": True,
    },
    "browse": {"default_sort": True},
}


def overridable_paths(tree: Mapping[str, Any] = OVERRIDABLE, prefix: str = "") -> list[str]:
    """Dotted paths clients may override, e.g. `["scoring.neutral_score", ..., "browse.default_sort"]`."""
    paths: list[str] = []
    for key, rule in tree.items():
        dotted = f"{prefix}{key}"
        paths.extend([dotted] if rule is True else overridable_paths(rule, prefix=f"{dotted}."))
    return paths


def _restrict(overrides: Mapping[str, Any], tree: Mapping[str, Any], trail: tuple[str, ...] = ()) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in overrides.items():
        where = ".".join((*trail, key))
        rule = tree.get(key)
        if rule is None:
            raise ValueError(f"settings_overrides contains a disallowed key: '{where}'")
        if rule is True:
            out[key] = value
        elif isinstance(value, Mapping):
            out[key] = _restrict(value, rule, (*trail, key))
        else:
            raise ValueError(f"settings_overrides key '{where}' must be a mapping")
    return out


def _merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in patch.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def apply_settings_overrides(settings: Settings, overrides: Mapping[str, Any] | None) -> Settings:
    """Return `settings` with `overrides` applied, or `settings` itself when there are none.

    Raises:
        ValueError: On a key outside `OVERRIDABLE`, or (as pydantic's ValidationError)
            when a merged value fails validation.
    """
    if not overrides:
        return settings
    allowed = _restrict(overrides, OVERRIDABLE)
    return Settings.model_validate(_merge(settings.model_dump(), allowed))
