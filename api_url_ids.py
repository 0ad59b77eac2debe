import re

CREATOR_HUB_URL_TEMPLATE = "https://create.roblox.com/dashboard/creations/experiences/[UNIVERSE_ID]/places/[PLACE_ID]"

UNIVERSE_ID_PATTERN = re.compile(r"experiences/(\d+)")
PLACE_ID_PATTERN = re.compile(r"places/(\d+)")


def derive_ids_from_url(url):
    """
    Pulls the Universe ID and Place ID out of a Creator Hub URL, e.g.
    .../dashboard/creations/experiences/{universeId}/places/{placeId}

    Each ID is matched on its own and comes back as None when absent.
    A URL with neither is a normal result, not an error.
    """
    if not url:
        return None, None

    universe_match = UNIVERSE_ID_PATTERN.search(url)
    place_match = PLACE_ID_PATTERN.search(url)

    universe_id = universe_match.group(1) if universe_match else None
    place_id = place_match.group(1) if place_match else None
    return universe_id, place_id
