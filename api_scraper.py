from playwright.sync_api import sync_playwright, TimeoutError, Error as PlaywrightError


class ScraperAPI:
    """
    Handles all browser-based interactions with Roblox for the purpose of
    creating a new experience. It encapsulates a Playwright browser instance.
    """
    LOGIN_URL = "https://www.roblox.com/login"
    CREATIONS_URL = "https://create.roblox.com/dashboard/creations"

    VIEWPORT = {"width": 1280, "height": 800}
    NAVIGATION_TIMEOUT_MS = 30000

    def __init__(self, headless=False):
        """Initializes the Playwright instance and launches the browser."""
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(headless=headless)
        self._page = self._browser.new_page(viewport=self.VIEWPORT)
        print("✅ ScraperAPI initialized, browser launched.")

    def login(self, credentials: dict):
        """
        Logs into Roblox using the provided credentials.
        This is the first step before anything can be created.
        """
        print("Navigating to Roblox login...")
        try:
            self._page.goto(self.LOGIN_URL, wait_until="networkidle")

            print("Entering credentials...")
            self._page.fill("#login-username", credentials.get("username", ""))
            self._page.fill("#login-password", credentials.get("password", ""))
            self._page.click("#login-button")

            # Roblox leaves /login once the session cookie is set
            self._page.wait_for_url(lambda url: "/login" not in url, timeout=self.NAVIGATION_TIMEOUT_MS)
            self._page.wait_for_load_state("networkidle")
            print("✅ Logged in successfully.")
            return True
        except TimeoutError:
            print("❌ Login did not complete in time. Check the credentials or any 2-step prompt.")
            return False
        except PlaywrightError as e:
            print(f"❌ An unexpected error occurred during login: {e}")
            return False

    def create_experience(self, name: str, description: str):
        """
        Walks the Creator Hub "Create" dialog and returns the URL the browser
        lands on afterwards, or None if any step fails.
        """
        print("\n--- Navigating to Creator Hub ---")
        try:
            self._page.goto(self.CREATIONS_URL, wait_until="networkidle")
            self._page.wait_for_timeout(3000)

            self._page.locator('button:has-text("Create"), button:has-text("New")').first.click()
            self._page.wait_for_timeout(1000)

            self._page.locator("text=Experience").first.click()
            self._page.wait_for_timeout(2000)

            print(f"Filling in details for '{name}'...")
            self._page.locator('input[placeholder*="name"], input[name="name"]').first.fill(name)
            self._page.locator(
                'textarea[placeholder*="description"], textarea[name="description"]'
            ).first.fill(description)

            self._page.locator('button[type="submit"], button:has-text("Create")').last.click()
            self._page.wait_for_timeout(5000)

            url = self._page.url
            print(f"Current URL: {url}")
            return url
        except TimeoutError:
            print("❌ Timed out while walking the Creator Hub dialog.")
            return None
        except PlaywrightError as e:
            print(f"❌ Error creating experience: {e}")
            return None

    def close(self):
        """Closes the browser and stops the Playwright instance."""
        print("\n--- Closing Browser ---")
        self._browser.close()
        self._playwright.stop()
        print("✅ Browser closed.")
