import json
import os
import stat
import tempfile
from datetime import datetime, timezone


class StorageError(Exception):
    """Base class for every local-file failure raised by LocalStorageAPI."""


class ValidationError(StorageError):
    """The supplied identifiers are missing or malformed. No file was touched."""


class NotFoundError(StorageError):
    """A required JSON document is missing, unreadable or has the wrong shape."""

    def __init__(self, filepath, reason):
        super().__init__(f"'{filepath}': {reason}")
        self.filepath = filepath
        self.reason = reason


class PartialUpdateError(StorageError):
    """
    The experience record was written but the project manifest was not.
    The two files no longer agree on the Place ID and need a manual fix.
    """

    def __init__(self, updated_file, pending_file, place_id, cause):
        super().__init__(
            f"'{updated_file}' was updated but '{pending_file}' was not: {cause}"
        )
        self.updated_file = updated_file
        self.pending_file = pending_file
        self.place_id = place_id
        self.cause = cause


class LocalStorageAPI:
    """
    Handles all local file interactions: the experience record
    (roblox-config.json), the Rojo project manifest (default.project.json)
    and the optional credentials config.
    """
    EXPERIENCE_BASE_URL = "https://www.roblox.com/games/"
    # Left behind by the manual fallback flow, never carried into an automated update
    TRANSIENT_FIELDS = ("instructions",)

    def __init__(self, record_file="roblox-config.json", manifest_file="default.project.json",
                 config_file="config.json"):
        self.record_file = record_file
        self.manifest_file = manifest_file
        self.config_file = config_file

    # --- Public Methods ---

    @classmethod
    def build_experience_url(cls, place_id):
        """Derives the public experience URL from a Place ID."""
        return f"{cls.EXPERIENCE_BASE_URL}{place_id}/"

    @staticmethod
    def validate_ids(universe_id, place_id):
        """
        Checks both identifiers before any file is opened.
        Returns the stripped (universe_id, place_id) pair as strings.
        """
        universe_id = "" if universe_id is None else str(universe_id).strip()
        place_id = "" if place_id is None else str(place_id).strip()

        if not universe_id:
            raise ValidationError("Universe ID must not be empty.")
        if not place_id:
            raise ValidationError("Place ID must not be empty.")
        # int() alone would let "+5", "-5" and "1_000" through
        if not (place_id.isascii() and place_id.isdigit()):
            raise ValidationError(f"Place ID must be a positive integer, got '{place_id}'.")
        # "007" is stored as "7" so the record matches servePlaceIds
        return universe_id, str(int(place_id))

    def get_experience_record(self):
        """Loads roblox-config.json. Raises NotFoundError if it is missing or malformed."""
        return self._load_json_file(self.record_file)

    def get_project_manifest(self):
        """Loads default.project.json. Raises NotFoundError if it is missing or malformed."""
        manifest = self._load_json_file(self.manifest_file)
        serve_place_ids = manifest.get("servePlaceIds", [])
        if not isinstance(serve_place_ids, list):
            raise NotFoundError(self.manifest_file, "'servePlaceIds' is not a list")
        return manifest

    def get_config(self):
        """Loads the optional config.json (credentials). Returns an empty dict when absent."""
        if not os.path.exists(self.config_file):
            return {}
        return self._load_json_file(self.config_file)

    def update_config_with_ids(self, universe_id, place_id):
        """
        Writes the Universe ID and Place ID into the experience record and
        points the manifest's servePlaceIds at the Place ID.

        Both documents are read before either is written, so a missing or
        malformed file leaves both untouched. A failure while writing the
        manifest raises PartialUpdateError.
        """
        universe_id, place_id = self.validate_ids(universe_id, place_id)

        record = self.get_experience_record()
        manifest = self.get_project_manifest()

        record["universeId"] = universe_id
        record["placeId"] = place_id
        record["experienceUrl"] = self.build_experience_url(place_id)
        for field in self.TRANSIENT_FIELDS:
            record.pop(field, None)

        self._save_json_file(self.record_file, record)
        print(f"✓ Updated {self.record_file}")

        manifest["servePlaceIds"] = [int(place_id)]
        try:
            self._save_json_file(self.manifest_file, manifest)
        except OSError as e:
            raise PartialUpdateError(self.record_file, self.manifest_file, place_id, e) from e
        print(f"✓ Updated {self.manifest_file}")

        return {
            "universeId": universe_id,
            "placeId": place_id,
            "experienceUrl": record["experienceUrl"],
        }

    def save_new_experience_record(self, universe_id, place_id, experience_name):
        """Writes a fresh experience record, replacing whatever was there before."""
        universe_id, place_id = self.validate_ids(universe_id, place_id)
        record = {
            "universeId": universe_id,
            "placeId": place_id,
            "experienceName": experience_name,
            "createdAt": self._utc_timestamp(),
            "experienceUrl": self.build_experience_url(place_id),
        }
        print(f"💾 Saving experience record to '{self.record_file}'...")
        self._save_json_file(self.record_file, record)
        print("✅ Experience record saved.")
        return record

    def save_manual_fallback_record(self, experience_name, instructions):
        """
        Leaves a placeholder record with manual instructions so that
        to_update_ids.py has a document to fill in later.
        An existing record is never replaced. Returns True if a file was written.
        """
        if os.path.exists(self.record_file):
            print(f"ℹ️  '{self.record_file}' already exists, leaving it as is.")
            return False
        record = {
            "experienceName": experience_name,
            "createdAt": self._utc_timestamp(),
            "instructions": instructions,
        }
        self._save_json_file(self.record_file, record)
        print(f"💾 Wrote placeholder '{self.record_file}' with manual instructions.")
        return True

    # --- Private Methods ---

    @staticmethod
    def _utc_timestamp():
        return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def _load_json_file(self, filepath):
        """Reads and parses a JSON document whose top level must be an object."""
        if not os.path.exists(filepath):
            raise NotFoundError(filepath, "file not found")
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise NotFoundError(filepath, f"could not be read ({e})") from e
        except json.JSONDecodeError as e:
            raise NotFoundError(filepath, f"is not valid JSON ({e})") from e
        if not isinstance(data, dict):
            raise NotFoundError(filepath, "top level is not a JSON object")
        return data

    def _save_json_file(self, filepath, data):
        """
        Writes data next to the target first, then swaps it into place.
        A symlinked target is written through, and an existing file keeps its mode.
        """
        target = os.path.realpath(filepath)
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".json", dir=os.path.dirname(target))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
            if os.path.exists(target):
                os.chmod(tmp_path, stat.S_IMODE(os.stat(target).st_mode))
            else:
                # mkstemp creates 0600; give new files the usual umask-based mode
                umask = os.umask(0)
                os.umask(umask)
                os.chmod(tmp_path, 0o666 & ~umask)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
