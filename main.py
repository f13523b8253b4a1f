import json
import sys
from typing import Optional

from config import load_config, validate_config
from menus.config_menu import config_menu
from menus.lookup_menu import lookup_menu, search_menu
from menus.main_menu import main_menu
from spotify_catalog import SpotifyClient
from utils.logger import setup_logging, log_info, log_error


def build_client(config: dict) -> Optional[SpotifyClient]:
    """Create a client from config, or report why it cannot be built."""
    is_valid, errors = validate_config(config)
    if not is_valid:
        log_error("Configuration is incomplete:")
        for error in errors:
            log_error(f"  {error}")
        log_info("Set spotify_client_id and spotify_client_secret in the Config Menu.")
        return None
    return SpotifyClient.from_config(config)


def run(config: dict) -> None:
    client: Optional[SpotifyClient] = None

    try:
        while True:
            choice = main_menu()

            if choice in ("Look up a resource", "Search the catalog"):
                if client is None:
                    client = build_client(config)
                if client is None:
                    continue

                if choice == "Look up a resource":
                    lookup_menu(client)
                else:
                    search_menu(client, config)

            elif choice == "Config Menu":
                config = config_menu(config)
                # Settings may have changed; rebuild the client on next use.
                if client is not None:
                    client.close()
                    client = None
                setup_logging(config.get("log_level", "INFO"))

            elif choice == "Exit" or choice is None:
                log_info("Exiting program...")
                break

            else:
                log_error("Invalid choice.")
    finally:
        if client is not None:
            client.close()


if __name__ == "__main__":
    try:
        config = load_config()
    except FileNotFoundError as e:
        setup_logging()
        log_error(f"Config file not found: {e}")
        log_error("Please create config.json with spotify_client_id and spotify_client_secret.")
        sys.exit(1)
    except (json.JSONDecodeError, ValueError) as e:
        setup_logging()
        log_error(f"Config file contains invalid JSON: {e}")
        sys.exit(1)

    setup_logging(config.get("log_level", "INFO"))
    run(config)
