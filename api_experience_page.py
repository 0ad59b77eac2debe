import requests
from bs4 import BeautifulSoup

from api_local_storage import LocalStorageAPI


class ExperiencePageAPI:
    """
    Handles network communication with the public Roblox experience page,
    used to confirm that a Place ID points at a real experience.
    """
    USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/138.0.0.0 Safari/537.36"
    TIMEOUT_SECONDS = 15

    def __init__(self, session=None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.USER_AGENT})

    # --- Public Methods ---

    def fetch_experience_title(self, place_id):
        """
        Returns the experience title shown on its public page, or None if the
        page could not be fetched or carries no title.
        """
        url = LocalStorageAPI.build_experience_url(place_id)
        print(f"🔎 Checking {url} ...")
        try:
            req = self.session.get(url, timeout=self.TIMEOUT_SECONDS)
            req.raise_for_status()
        except requests.exceptions.RequestException as e:
            print(f"⚠️  Could not fetch the experience page: {e}")
            return None
        return self.__parse_title(req.text)

    # --- Private Methods ---

    def __parse_title(self, html):
        """Prefers the og:title meta tag, falls back to <title>."""
        soup = BeautifulSoup(html, "html.parser")
        tag = soup.find("meta", {"property": "og:title"})
        if tag and tag.get("content"):
            return tag["content"].strip()
        if soup.title and soup.title.string:
            return soup.title.string.strip()
        return None
