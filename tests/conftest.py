"""Shared fixtures for the MVP Studio test suite."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from mvp_studio.graph import assemble_bundle


@pytest.fixture
def wizard_input():
    """FoodieHub wizard input with three key features (medium complexity)."""
    return {
        "app_name": "FoodieHub",
        "app_type": "mobile-app",
        "platforms": ["android"],
        "theme": "dark",
        "design_style": "minimal",
        "key_features": ["Barcode Scan", "Recipe Suggestions", "Push Alerts"],
        "description": "Track pantry items and get recipe ideas before food expires.",
        "complexity": "medium",
    }


@pytest.fixture
def pages():
    """Three uniquely named pages in discovery order."""
    return [
        {
            "name": "Home",
            "purpose": "Overview of pantry status and expiring items",
            "components": ["Header", "Expiry List", "Bottom Nav"],
            "layout": "vertical",
        },
        {
            "name": "Inventory",
            "purpose": "Browse and edit scanned pantry items",
            "components": ["Search Bar", "Item Grid", "Scan Button"],
            "layout": "grid",
        },
        {
            "name": "Recipes",
            "purpose": "Suggest recipes from items on hand",
            "components": ["Recipe Cards", "Filters"],
            "layout": "vertical",
        },
    ]


@pytest.fixture
def builder_tools():
    """Ranked tools: one with stored page variants (Framer) and one without (Uizard)."""
    return [
        {"name": "Framer", "url": "https://framer.com", "reasons": ["AI-powered design"]},
        {"name": "Uizard", "url": "https://uizard.io", "reasons": ["Fast mockups", "Free tier"]},
    ]


@pytest.fixture
def bundle(wizard_input, pages, builder_tools):
    """Assembled Prompt Bundle for FoodieHub."""
    return assemble_bundle(wizard_input, pages, builder_tools)


@pytest.fixture
def fixed_time():
    return datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_config(tmp_path):
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "default_builder": "framer",
        "enhancements": {
            "color_scheme": "default",
            "animation": "subtle",
            "spacing": "comfortable",
            "typography": "modern",
        },
        "builder_tools": [
            {"name": "Framer", "url": "https://framer.com", "reasons": ["Rapid prototyping"]},
        ],
        "output_dir": str(tmp_path / "output"),
        "default_export_format": "markdown",
        "generation_backend": "local",
        "generation_url": "https://discovery.example.com/pages",
        "generation_timeout": 5,
        "generation_max_retries": 2,
        "generation_retry_min_wait": 0,
        "generation_retry_max_wait": 0,
    }
    with patch("mvp_studio.config._config", test_config):
        yield test_config
