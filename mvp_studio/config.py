"""Settings for the prompt pipeline: config.yaml plus environment overrides, loaded once on import."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

# Environment variable -> config key. Values from the environment win over config.yaml.
ENV_OVERRIDES = {
    "MVP_STUDIO_GENERATION_URL": "generation_url",
    "MVP_STUDIO_GENERATION_BACKEND": "generation_backend",
    "MVP_STUDIO_OUTPUT_DIR": "output_dir",
}


def _load(path: Path) -> dict:
    config = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    for env_var, key in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            config[key] = value
    return config


_config = _load(CONFIG_PATH)


def get_config() -> dict:
    """Return the loaded settings dictionary."""
    return _config
