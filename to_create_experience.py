import argparse
import sys

from playwright.sync_api import Error as PlaywrightError

from api_local_storage import LocalStorageAPI, PartialUpdateError, StorageError
from api_scraper import ScraperAPI
from api_url_ids import CREATOR_HUB_URL_TEMPLATE, derive_ids_from_url

DEFAULT_EXPERIENCE_NAME = "Aetheria: The Omni-Verse"
DEFAULT_DESCRIPTION = (
    "Explore infinite realms, collect and breed spirits, engage in action combat, "
    "and build your own realm in this multiplayer adventure."
)


def manual_instructions(experience_name):
    return [
        "Open Roblox Studio",
        "Click File > Publish to Roblox As...",
        f'Create new experience: "{experience_name}"',
        "Note the Universe ID and Place ID from the Home tab",
        "Run: to_update_ids.py <universeId> <placeId>",
    ]


def build_parser():
    parser = argparse.ArgumentParser(
        prog="to_create_experience.py",
        description="Create a Roblox experience in the Creator Hub and record its IDs.",
    )
    parser.add_argument("username", nargs="?", help="Roblox username (default: config.json)")
    parser.add_argument("password", nargs="?", help="Roblox password (default: config.json)")
    parser.add_argument("--name", default=DEFAULT_EXPERIENCE_NAME, help="Experience name")
    parser.add_argument("--description", default=DEFAULT_DESCRIPTION, help="Experience description")
    parser.add_argument("--headless", action="store_true", help="Run the browser without a window")
    parser.add_argument("--record", default="roblox-config.json", help="Experience record file")
    parser.add_argument("--manifest", default="default.project.json", help="Rojo project file")
    parser.add_argument("--config", default="config.json", help="Credentials file")
    return parser


def fall_back_to_manual(storage, experience_name):
    """Prints the Studio steps and leaves a placeholder record to fill in later."""
    steps = manual_instructions(experience_name)
    print("\nPlease create the experience manually in Roblox Studio:")
    for i, step in enumerate(steps, start=1):
        print(f"{i}. {step}")
    print(f"\nThe IDs are also in the Creator Hub URL:\n{CREATOR_HUB_URL_TEMPLATE}")
    try:
        storage.save_manual_fallback_record(experience_name, " / ".join(steps))
    except OSError as e:
        print(f"⚠️  Could not write placeholder record: {e}", file=sys.stderr)


def main(argv=None):
    """
    Orchestrates the whole creation: log in, create the experience, read the
    IDs from the resulting URL and write both config files.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    storage = LocalStorageAPI(record_file=args.record, manifest_file=args.manifest,
                              config_file=args.config)

    # 1. Resolve credentials
    credentials = {"username": args.username, "password": args.password}
    if not all(credentials.values()):
        try:
            credentials = storage.get_config().get("credentials", {})
        except StorageError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
    if not credentials.get("username") or not credentials.get("password"):
        parser.print_usage()
        print("Pass <username> <password> or put them under \"credentials\" in config.json.")
        return 1

    # 2. Drive the browser
    url = None
    try:
        scraper = ScraperAPI(headless=args.headless)
    except PlaywrightError as e:
        print(f"❌ Could not launch the browser: {e}", file=sys.stderr)
        fall_back_to_manual(storage, args.name)
        return 1
    try:
        if scraper.login(credentials):
            url = scraper.create_experience(args.name, args.description)
    finally:
        scraper.close()  # Ensure browser is always closed

    # 3. Extract IDs and update config
    universe_id, place_id = derive_ids_from_url(url)
    if not (universe_id and place_id):
        print("❌ Could not extract Universe ID and Place ID from the page.", file=sys.stderr)
        fall_back_to_manual(storage, args.name)
        return 1

    print("\n=== Experience Created Successfully ===")
    print(f"Universe ID: {universe_id}")
    print(f"Place ID: {place_id}")

    try:
        # The fresh record replaces the old one, so the manifest must be readable first
        storage.get_project_manifest()
        storage.save_new_experience_record(universe_id, place_id, args.name)
        result = storage.update_config_with_ids(universe_id, place_id)
    except PartialUpdateError as e:
        print(f"❌ Partial update: {e}", file=sys.stderr)
        print(f"   UPDATED:     {e.updated_file}", file=sys.stderr)
        print(f"   NOT UPDATED: {e.pending_file}", file=sys.stderr)
        print(f"   Run: to_update_ids.py {universe_id} {place_id}", file=sys.stderr)
        return 2
    except StorageError as e:
        print(f"❌ Error updating configuration: {e}", file=sys.stderr)
        print(f"   Run: to_update_ids.py {universe_id} {place_id}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"❌ Could not write '{args.record}': {e}", file=sys.stderr)
        print(f"   Run: to_update_ids.py {universe_id} {place_id}", file=sys.stderr)
        return 1

    print(f"\nExperience URL: {result['experienceUrl']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
