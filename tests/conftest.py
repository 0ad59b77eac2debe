import json

import pytest

from api_local_storage import LocalStorageAPI


MANIFEST = {
    "name": "aetheria",
    "servePort": 34872,
    "servePlaceIds": [1, 2, 3],
    "tree": {
        "$className": "DataModel",
        "ReplicatedStorage": {"$path": "src/shared"},
    },
}

RECORD = {
    "experienceName": "Aetheria: The Omni-Verse",
    "createdAt": "2024-01-01T00:00:00.000Z",
    "instructions": "Publish from Studio, then run to_update_ids.py",
}


@pytest.fixture
def record_file(tmp_path):
    path = tmp_path / "roblox-config.json"
    path.write_text(json.dumps(RECORD, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def manifest_file(tmp_path):
    path = tmp_path / "default.project.json"
    path.write_text(json.dumps(MANIFEST, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def storage(record_file, manifest_file):
    return LocalStorageAPI(record_file=str(record_file), manifest_file=str(manifest_file))
