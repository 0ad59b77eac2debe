import argparse
import sys

from api_local_storage import LocalStorageAPI, NotFoundError, PartialUpdateError, ValidationError
from api_experience_page import ExperiencePageAPI
from api_url_ids import CREATOR_HUB_URL_TEMPLATE

HELP_EPILOG = f"""\
Example: to_update_ids.py 123456789 987654321

To find these IDs:
1. Open your experience in Roblox Studio
2. Go to File > Game Settings > Security
3. Universe ID and Place ID are shown there

Or find them in the Creator Hub URL:
{CREATOR_HUB_URL_TEMPLATE}
"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog="to_update_ids.py",
        description="Update roblox-config.json and default.project.json with Roblox experience IDs.",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("universe_id", nargs="?", help="Universe ID of the experience")
    parser.add_argument("place_id", nargs="?", help="Place ID of the start place")
    parser.add_argument("--record", default="roblox-config.json", help="Experience record file")
    parser.add_argument("--manifest", default="default.project.json", help="Rojo project file")
    parser.add_argument("--verify", action="store_true",
                        help="Check the public experience page after updating")
    return parser


def main(argv=None):
    """
    Orchestrates the direct update: validates the IDs, writes both files
    and reports the result. Returns the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.universe_id or not args.place_id:
        parser.print_help()
        return 1

    storage = LocalStorageAPI(record_file=args.record, manifest_file=args.manifest)
    try:
        result = storage.update_config_with_ids(args.universe_id, args.place_id)
    except ValidationError as e:
        print(f"❌ Invalid IDs: {e}", file=sys.stderr)
        return 1
    except NotFoundError as e:
        print(f"❌ Error updating configuration: {e}", file=sys.stderr)
        print("   No files were changed.", file=sys.stderr)
        return 1
    except PartialUpdateError as e:
        print(f"❌ Partial update: {e}", file=sys.stderr)
        print(f"   UPDATED:     {e.updated_file}", file=sys.stderr)
        print(f"   NOT UPDATED: {e.pending_file}", file=sys.stderr)
        print(f"   Set \"servePlaceIds\": [{e.place_id}] in {e.pending_file} by hand.", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"❌ Could not write '{args.record}': {e}", file=sys.stderr)
        print("   No files were changed.", file=sys.stderr)
        return 1

    print("\nConfiguration updated successfully!")
    print(f"Universe ID: {result['universeId']}")
    print(f"Place ID: {result['placeId']}")
    print(f"Experience URL: {result['experienceUrl']}")

    if args.verify:
        title = ExperiencePageAPI().fetch_experience_title(result["placeId"])
        if title:
            print(f"✅ Experience page found: {title}")
        else:
            print("⚠️  Could not confirm the experience page. Double-check the Place ID.")

    print("\nNext steps:")
    print("1. Run: rojo serve")
    print("2. In Roblox Studio, open the Rojo plugin")
    print('3. Click "Connect" and sync your code')
    return 0


if __name__ == "__main__":
    sys.exit(main())
