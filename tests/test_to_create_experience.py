import json

import pytest
from playwright.sync_api import Error as PlaywrightError

import to_create_experience


class FakeScraper:
    """Stands in for ScraperAPI so no browser is launched."""
    instances = []

    def __init__(self, headless=False):
        self.headless = headless
        self.logged_in_with = None
        self.closed = False
        FakeScraper.instances.append(self)

    def login(self, credentials):
        self.logged_in_with = credentials
        return self.login_ok

    def create_experience(self, name, description):
        self.created = (name, description)
        return self.url

    def close(self):
        self.closed = True


@pytest.fixture
def fake_scraper(monkeypatch):
    FakeScraper.instances = []
    FakeScraper.login_ok = True
    FakeScraper.url = "https://create.roblox.com/dashboard/creations/experiences/111/places/222"
    monkeypatch.setattr(to_create_experience, "ScraperAPI", FakeScraper)
    return FakeScraper


def run(argv, tmp_path, manifest_file):
    return to_create_experience.main(argv + [
        "--record", str(tmp_path / "roblox-config.json"),
        "--manifest", str(manifest_file),
        "--config", str(tmp_path / "config.json"),
    ])


def test_creates_and_records_ids(tmp_path, manifest_file, fake_scraper, capsys):
    assert run(["user", "pass", "--name", "My Game", "--headless"], tmp_path, manifest_file) == 0

    scraper = fake_scraper.instances[0]
    assert scraper.headless is True
    assert scraper.closed is True
    assert scraper.logged_in_with == {"username": "user", "password": "pass"}

    record = json.loads((tmp_path / "roblox-config.json").read_text(encoding="utf-8"))
    assert record["universeId"] == "111"
    assert record["placeId"] == "222"
    assert record["experienceName"] == "My Game"
    assert "createdAt" in record
    assert json.loads(manifest_file.read_text(encoding="utf-8"))["servePlaceIds"] == [222]
    assert "Experience Created Successfully" in capsys.readouterr().out


def test_credentials_from_config(tmp_path, manifest_file, fake_scraper):
    (tmp_path / "config.json").write_text(
        json.dumps({"credentials": {"username": "cfg-user", "password": "cfg-pass"}}), encoding="utf-8")

    assert run([], tmp_path, manifest_file) == 0
    assert fake_scraper.instances[0].logged_in_with["username"] == "cfg-user"


def test_no_credentials_prints_usage(tmp_path, manifest_file, fake_scraper, capsys):
    assert run([], tmp_path, manifest_file) == 1
    assert fake_scraper.instances == []
    assert "usage:" in capsys.readouterr().out


def test_unparsable_url_falls_back_to_manual(tmp_path, manifest_file, fake_scraper, capsys):
    fake_scraper.url = "https://create.roblox.com/dashboard/creations"
    before = manifest_file.read_bytes()

    assert run(["user", "pass"], tmp_path, manifest_file) == 1

    captured = capsys.readouterr()
    assert "Could not extract" in captured.err
    assert "Publish to Roblox As" in captured.out
    record = json.loads((tmp_path / "roblox-config.json").read_text(encoding="utf-8"))
    assert "instructions" in record
    assert manifest_file.read_bytes() == before
    assert fake_scraper.instances[0].closed is True


def test_login_failure_skips_creation(tmp_path, manifest_file, fake_scraper):
    fake_scraper.login_ok = False

    assert run(["user", "pass"], tmp_path, manifest_file) == 1
    scraper = fake_scraper.instances[0]
    assert not hasattr(scraper, "created")
    assert scraper.closed is True


def test_missing_manifest_leaves_record_untouched(tmp_path, manifest_file, fake_scraper, capsys):
    record_path = tmp_path / "roblox-config.json"
    record_path.write_text('{"experienceName": "Old Game"}', encoding="utf-8")
    manifest_file.unlink()

    assert run(["user", "pass"], tmp_path, manifest_file) == 1

    assert record_path.read_text(encoding="utf-8") == '{"experienceName": "Old Game"}'
    assert "file not found" in capsys.readouterr().err


def test_manifest_write_failure_reports_partial_update(tmp_path, manifest_file, fake_scraper,
                                                       capsys, monkeypatch):
    real_save = to_create_experience.LocalStorageAPI._save_json_file

    def failing_save(self, filepath, data):
        if filepath == str(manifest_file):
            raise PermissionError("read-only")
        real_save(self, filepath, data)

    monkeypatch.setattr(to_create_experience.LocalStorageAPI, "_save_json_file", failing_save)

    assert run(["user", "pass"], tmp_path, manifest_file) == 2

    err = capsys.readouterr().err
    assert f"UPDATED:     {tmp_path / 'roblox-config.json'}" in err
    assert f"NOT UPDATED: {manifest_file}" in err


def test_browser_launch_failure_falls_back_to_manual(tmp_path, manifest_file, monkeypatch, capsys):
    def broken_launch(headless=False):
        raise PlaywrightError("Executable doesn't exist")

    monkeypatch.setattr(to_create_experience, "ScraperAPI", broken_launch)

    assert run(["user", "pass"], tmp_path, manifest_file) == 1

    captured = capsys.readouterr()
    assert "Could not launch the browser" in captured.err
    assert "Publish to Roblox As" in captured.out
    record = json.loads((tmp_path / "roblox-config.json").read_text(encoding="utf-8"))
    assert "instructions" in record
