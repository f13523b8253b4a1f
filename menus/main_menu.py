import questionary


def main_menu() -> str:
    return questionary.select(
        "🎧 Spotify Catalog — What would you like to do?",
        choices=[
            "Look up a resource",
            "Search the catalog",
            "Config Menu",
            "Exit",
        ],
    ).ask()
