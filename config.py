import json
import os
from typing import Any, Dict

CONFIG_PATH = "config.json"

# Environment variables that override config.json when set.
ENV_OVERRIDES = {
    "spotify_client_id": "SPOTIFY_CLIENT_ID",
    "spotify_client_secret": "SPOTIFY_CLIENT_SECRET",
}

# Default configuration values
DEFAULT_CONFIG = {
    # Spotify Web API (OAuth client credentials)
    # Create an app at https://developer.spotify.com/dashboard to obtain these.
    "spotify_client_id": "",
    "spotify_client_secret": "",
    "spotify_token_url": "https://accounts.spotify.com/api/token",
    "spotify_api_base_url": "https://api.spotify.com/v1",

    # HTTP behavior
    "request_timeout": 30,
    "token_expiry_margin": 0,

    # Interactive shell
    "search_limit": 10,
    "log_level": "INFO",
}

# Validation rules for config fields
CONFIG_SCHEMA = {
    "spotify_client_id": {"type": str, "required": True},
    "spotify_client_secret": {"type": str, "required": True},
    "spotify_token_url": {"type": str, "required": False},
    "spotify_api_base_url": {"type": str, "required": False},
    "request_timeout": {"type": (int, float), "required": False, "min": 1, "max": 300},
    "token_expiry_margin": {"type": (int, float), "required": False, "min": 0, "max": 600},
    "search_limit": {"type": int, "required": False, "min": 1, "max": 50},
    "log_level": {
        "type": str,
        "required": False,
        "choices": ["DEBUG", "INFO", "WARNING", "ERROR"],
    },
}


def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Replace credential fields with SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET when set."""
    for key, env_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name, "").strip()
        if value:
            config[key] = value
    return config


def read_config_file(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Read config.json and fill in defaults, without environment overrides."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file {path} not found.")

    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Config file {path} must contain a JSON object.")

    # Apply defaults for missing fields
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    return config


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from file, applying defaults and environment overrides."""
    return apply_env_overrides(read_config_file(path))


def save_config(config: Dict[str, Any], path: str = CONFIG_PATH) -> bool:
    """Save configuration to file."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        raise IOError(f"Failed to save config: {e}") from e


def validate_config(config: Dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate configuration against schema.
    Returns (is_valid, list_of_errors).
    """
    errors = []

    for key, rules in CONFIG_SCHEMA.items():
        if rules.get("required", False) and key not in config:
            errors.append(f"Missing required field: {key}")
            continue

        if key not in config:
            continue

        value = config[key]

        expected_type = rules.get("type")
        # bool passes isinstance(int); numeric fields must not accept it.
        if isinstance(value, bool) and expected_type is not bool:
            errors.append(f"Field '{key}' must not be a boolean")
            continue
        if expected_type and not isinstance(value, expected_type):
            type_names = expected_type.__name__ if not isinstance(expected_type, tuple) else "/".join(t.__name__ for t in expected_type)
            errors.append(f"Field '{key}' must be {type_names}, got {type(value).__name__}")
            continue

        if rules.get("required", False) and isinstance(value, str) and not value.strip():
            errors.append(f"Field '{key}' must not be empty")
            continue

        if "choices" in rules and value not in rules["choices"]:
            errors.append(f"Field '{key}' must be one of {rules['choices']}, got '{value}'")

        if isinstance(value, (int, float)):
            if "min" in rules and value < rules["min"]:
                errors.append(f"Field '{key}' must be >= {rules['min']}, got {value}")
            if "max" in rules and value > rules["max"]:
                errors.append(f"Field '{key}' must be <= {rules['max']}, got {value}")

    return len(errors) == 0, errors


def update_config(key: str, value: Any, path: str = CONFIG_PATH) -> tuple[bool, str]:
    """
    Update a single config field with validation.
    Returns (success, message).
    """
    # Edit the file contents; environment overrides are never written back.
    config = read_config_file(path)

    if key not in CONFIG_SCHEMA:
        return False, f"Unknown config key: {key}"

    test_config = config.copy()
    test_config[key] = value

    # Only report errors for the field being changed; other fields may still be unset.
    _, errors = validate_config(test_config)
    errors = [e for e in errors if f"'{key}'" in e or e.endswith(f": {key}")]
    if errors:
        return False, f"Validation failed: {', '.join(errors)}"

    config[key] = value
    save_config(config, path)

    return True, f"Updated '{key}'"


def reset_to_defaults(path: str = CONFIG_PATH) -> tuple[bool, str]:
    """Reset configuration to default values."""
    try:
        save_config(DEFAULT_CONFIG.copy(), path)
        return True, "Configuration reset to defaults"
    except IOError as e:
        return False, f"Failed to reset config: {e}"


def get_config_value(key: str, default: Any = None, path: str = CONFIG_PATH) -> Any:
    """Get a single config value with optional default."""
    try:
        config = load_config(path)
    except (OSError, ValueError):
        return default
    return config.get(key, default)
