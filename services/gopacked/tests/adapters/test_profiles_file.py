import json

import pytest

from gopacked.adapters.errors import ProfileReadError
from gopacked.adapters.launcher.profiles_file import PROFILES_FILENAME, LauncherProfilesFile
from gopacked.ports.launcher_profiles import ProfileRequest


def _write(tmp_path, document):
    (tmp_path / PROFILES_FILENAME).write_text(json.dumps(document), encoding="utf-8")


def _read(tmp_path):
    return json.loads((tmp_path / PROFILES_FILENAME).read_text(encoding="utf-8"))


def test_register_merges_existing_profile_and_keeps_other_keys(tmp_path):
    _write(
        tmp_path,
        {
            "clientToken": "abc",
            "profiles": {"Sky Pack": {"name": "Sky Pack", "icon": "Grass", "javaArgs": "-Xmx1G"}},
        },
    )
    request = ProfileRequest(
        name="Sky Pack",
        game_dir=tmp_path / "gopacked" / "skypack",
        version_id="skypack",
        settings={"javaArgs": "-Xmx4G"},
    )
    LauncherProfilesFile().register(tmp_path, request)

    data = _read(tmp_path)
    assert data["clientToken"] == "abc"
    profile = data["profiles"]["Sky Pack"]
    assert profile["icon"] == "Grass"
    assert profile["javaArgs"] == "-Xmx4G"
    assert profile["lastVersionId"] == "skypack"
    assert profile["gameDir"] == str(tmp_path / "gopacked" / "skypack")


def test_register_creates_profiles_table(tmp_path):
    _write(tmp_path, {})
    request = ProfileRequest(name="P", game_dir=tmp_path, version_id="p", settings={})
    LauncherProfilesFile().register(tmp_path, request)
    assert _read(tmp_path)["profiles"]["P"]["name"] == "P"


def test_unregister_removes_profile(tmp_path):
    _write(tmp_path, {"profiles": {"P": {"name": "P"}, "Q": {"name": "Q"}}})
    LauncherProfilesFile().unregister(tmp_path, "P")
    assert list(_read(tmp_path)["profiles"]) == ["Q"]


def test_unregister_unknown_profile_leaves_file_untouched(tmp_path):
    _write(tmp_path, {"profiles": {}})
    before = (tmp_path / PROFILES_FILENAME).read_text(encoding="utf-8")
    LauncherProfilesFile().unregister(tmp_path, "P")
    assert (tmp_path / PROFILES_FILENAME).read_text(encoding="utf-8") == before


def test_unreadable_profiles_raise(tmp_path):
    with pytest.raises(ProfileReadError):
        LauncherProfilesFile().unregister(tmp_path, "P")
    (tmp_path / PROFILES_FILENAME).write_text("{broken", encoding="utf-8")
    with pytest.raises(ProfileReadError):
        LauncherProfilesFile().unregister(tmp_path, "P")
