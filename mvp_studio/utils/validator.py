"""Checks wizard fields and page lists before any bundle is assembled."""

from mvp_studio.errors import ConfigurationError
from mvp_studio.state import (
    APP_TYPES,
    DESIGN_STYLES,
    PLATFORMS,
    THEMES,
    PageSpec,
    WizardInput,
    derive_complexity,
)


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{field} must be a non-empty string.")
    return value.strip()


def _require_choice(value, field: str, allowed: set[str]) -> str:
    if value not in allowed:
        raise ConfigurationError(
            f"Invalid {field} '{value}'. Must be one of: {sorted(allowed)}"
        )
    return value


def validate_wizard_input(raw: dict) -> WizardInput:
    """Validate collected wizard fields and return a normalized WizardInput.

    App name, app type and platforms are required. Theme and design style
    default to dark/minimal. Complexity is always derived from the feature
    count; a caller-supplied value is ignored.

    Raises ConfigurationError on any violation.
    """
    if not isinstance(raw, dict):
        raise ConfigurationError("Wizard input must be a mapping.")

    app_name = _require_text(raw.get("app_name"), "app_name")
    app_type = _require_choice(raw.get("app_type"), "app_type", APP_TYPES)

    platforms = raw.get("platforms")
    if isinstance(platforms, str):
        platforms = [platforms]
    if not platforms:
        raise ConfigurationError("platforms must be a non-empty list.")
    unique_platforms = []
    for platform in platforms:
        _require_choice(platform, "platform", PLATFORMS)
        if platform not in unique_platforms:
            unique_platforms.append(platform)

    theme = _require_choice(raw.get("theme", "dark"), "theme", THEMES)
    design_style = _require_choice(
        raw.get("design_style", "minimal"), "design_style", DESIGN_STYLES
    )

    features = raw.get("key_features") or []
    if not isinstance(features, list):
        raise ConfigurationError("key_features must be a list of strings.")
    key_features = [f.strip() for f in features if isinstance(f, str) and f.strip()]

    description = raw.get("description") or ""
    if not isinstance(description, str):
        raise ConfigurationError("description must be a string.")

    validated: WizardInput = {
        "app_name": app_name,
        "app_type": app_type,
        "platforms": unique_platforms,
        "theme": theme,
        "design_style": design_style,
        "key_features": key_features,
        "description": description.strip(),
        "complexity": derive_complexity(key_features),
    }

    audience = raw.get("target_audience")
    if isinstance(audience, str) and audience.strip():
        validated["target_audience"] = audience.strip()

    return validated


def validate_pages(pages: list[PageSpec]) -> list[PageSpec]:
    """Check that the page list is non-empty with unique, non-empty names.

    Returns the pages unchanged. Raises ConfigurationError otherwise.
    """
    if not pages:
        raise ConfigurationError("At least one page is required.")

    seen = set()
    for i, page in enumerate(pages):
        name = page.get("name") if isinstance(page, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"Page {i} is missing a name.")
        if name in seen:
            raise ConfigurationError(f"Duplicate page name '{name}'.")
        seen.add(name)

    return pages
