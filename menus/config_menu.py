import questionary
from config import (
    load_config, validate_config, update_config, reset_to_defaults,
    CONFIG_SCHEMA
)
from utils.logger import log_error, log_success

SECRET_KEYS = {"spotify_client_secret"}


def config_menu(config: dict) -> dict:
    """
    Display the configuration menu and handle user selections.
    Returns the potentially updated config dict.
    """
    while True:
        choice = questionary.select(
            "⚙️ Config Menu — What would you like to do?",
            choices=[
                "View current config",
                "Update a setting",
                "Reset to defaults",
                "Validate configuration",
                "Back"
            ]
        ).ask()

        if choice == "View current config":
            view_config(config)

        elif choice == "Update a setting":
            config = update_setting_menu(config)

        elif choice == "Reset to defaults":
            config = reset_config_menu(config)

        elif choice == "Validate configuration":
            validate_config_menu(config)

        elif choice == "Back" or choice is None:
            break

    return config


def mask_value(key: str, value) -> str:
    """Hide all but the last four characters of secret settings."""
    if key in SECRET_KEYS and isinstance(value, str) and value:
        return "*" * max(0, len(value) - 4) + value[-4:]
    return str(value)


def view_config(config: dict):
    """Display the current configuration in a readable format."""
    print("\n" + "=" * 50)
    print("📋 Current Configuration")
    print("=" * 50)

    categories = {
        "Credentials": ["spotify_client_id", "spotify_client_secret"],
        "Endpoints": ["spotify_token_url", "spotify_api_base_url"],
        "HTTP": ["request_timeout", "token_expiry_margin"],
        "Shell": ["search_limit", "log_level"],
    }

    for category, keys in categories.items():
        print(f"\n{category}:")
        for key in keys:
            if key in config:
                print(f"  {key}: {mask_value(key, config[key]) or '(not set)'}")

    print("\n" + "=" * 50)
    input("\nPress Enter to continue...")


def update_setting_menu(config: dict) -> dict:
    """Menu to update individual settings."""
    editable_keys = list(CONFIG_SCHEMA.keys())
    editable_keys.append("Back")

    key = questionary.select(
        "Select setting to update:",
        choices=editable_keys
    ).ask()

    if key == "Back" or key is None:
        return config

    schema = CONFIG_SCHEMA.get(key, {})
    current_value = config.get(key, "Not set")

    print(f"\nCurrent value: {mask_value(key, current_value)}")

    if "choices" in schema:
        new_value = questionary.select(
            f"Select new value for {key}:",
            choices=schema["choices"]
        ).ask()

    elif schema.get("type") in [int, (int, float)]:
        min_val = schema.get("min", 0)
        max_val = schema.get("max", 9999)
        new_value_str = questionary.text(
            f"Enter new value for {key} ({min_val}-{max_val}):",
            default=str(current_value) if current_value != "Not set" else ""
        ).ask()

        try:
            if schema.get("type") == int:
                new_value = int(new_value_str)
            else:
                new_value = float(new_value_str)
        except (TypeError, ValueError):
            log_error("Invalid number format")
            return config

    elif key in SECRET_KEYS:
        new_value = questionary.password(f"Enter new value for {key}:").ask()

    else:
        new_value = questionary.text(
            f"Enter new value for {key}:",
            default=str(current_value) if current_value != "Not set" else ""
        ).ask()

    if new_value is None:
        return config

    success, message = update_config(key, new_value)

    if success:
        log_success(message)
        config[key] = new_value
    else:
        log_error(message)

    return config


def reset_config_menu(config: dict) -> dict:
    """Menu to reset configuration to defaults."""
    confirm = questionary.confirm(
        "⚠️ Reset all settings to defaults? This clears your Spotify credentials.",
        default=False
    ).ask()

    if confirm:
        success, message = reset_to_defaults()

        if success:
            log_success(message)
            config = load_config()
        else:
            log_error(message)

    return config


def validate_config_menu(config: dict):
    """Validate the current configuration and show any errors."""
    is_valid, errors = validate_config(config)

    print("\n" + "=" * 50)
    print("🔍 Configuration Validation")
    print("=" * 50)

    if is_valid:
        log_success("Configuration is valid! ✓")
    else:
        log_error("Configuration has errors:")
        for error in errors:
            print(f"  ✗ {error}")

    print("=" * 50)
    input("\nPress Enter to continue...")
