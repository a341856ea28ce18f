import json
import logging

import pytest

from gopacked.adapters.launcher.profiles_file import LauncherProfilesFile
from gopacked.application.definition_store import read_definition
from gopacked.application.pack_lifecycle import install_pack, uninstall_pack, update_pack
from gopacked.application.settings import PackPaths
from gopacked.domain.file_entry import FileEntry, Side
from gopacked.domain.pack import GoPack
from gopacked.domain.version import Version

A1 = "http://x/mods/a-1.jar"
A2 = "http://x/mods/a-2.jar"
LAUNCHER_JSON = "http://x/skypack.json"


class RecordingLoader:
    def __init__(self):
        self.calls = []

    def install(self, forge_version, install_path, side):
        self.calls.append((forge_version, install_path, side))


def _pack(**overrides):
    fields = dict(
        name="Sky Pack",
        simple_name="skypack",
        version=Version.of(1, 0),
        author="someone",
        profile_settings={"javaArgs": "-Xmx4G"},
        mcl_version=FileEntry.directory(
            {"json": FileEntry.file(LAUNCHER_JSON, "1", filename="skypack.json")}
        ),
        files=FileEntry.directory(
            {"mods": FileEntry.directory({"a": FileEntry.file(A1, "1")})}
        ),
    )
    fields.update(overrides)
    return GoPack(**fields)


@pytest.fixture
def minecraft(tmp_path, fetcher):
    mc = tmp_path / "minecraft"
    mc.mkdir()
    (mc / "launcher_profiles.json").write_text(json.dumps({"profiles": {}}), encoding="utf-8")
    for url in (A1, A2, LAUNCHER_JSON):
        fetcher.bodies[url] = b"data"
    return mc


@pytest.fixture
def paths(minecraft):
    return PackPaths(minecraft / "gopacked" / "skypack", minecraft)


def _profiles(minecraft):
    return json.loads((minecraft / "launcher_profiles.json").read_text(encoding="utf-8"))["profiles"]


def test_install_client_registers_profile_and_saves_definition(paths, minecraft, make_context, confirm_yes):
    ctx = make_context(profiles=LauncherProfilesFile(), prompt=confirm_yes)
    result = install_pack(_pack(), paths, ctx)

    assert result.exit_code == 0
    assert (paths.install_path / "mods" / "a-1.jar").exists()
    assert (minecraft / "versions" / "skypack" / "skypack.json").exists()
    profile = _profiles(minecraft)["Sky Pack"]
    assert profile["gameDir"] == str(paths.install_path)
    assert profile["lastVersionId"] == "skypack"
    assert profile["javaArgs"] == "-Xmx4G"
    saved = read_definition(paths.install_path)
    assert saved.value is not None
    assert saved.value.version == Version.of(1)


def test_install_server_skips_profile_and_launcher_version(paths, minecraft, make_context):
    ctx = make_context(Side.SERVER, profiles=LauncherProfilesFile())
    result = install_pack(_pack(), paths, ctx)

    assert result.exit_code == 0
    assert (paths.install_path / "mods" / "a-1.jar").exists()
    assert not (minecraft / "versions").exists()
    assert _profiles(minecraft) == {}


def test_install_runs_forge_only_when_confirmed(paths, make_context, confirm_yes, confirm_no):
    loader = RecordingLoader()
    install_pack(_pack(forge_version="14.23.5"), paths, make_context(prompt=confirm_yes, loader_installer=loader))
    assert loader.calls == [("14.23.5", paths.install_path.absolute(), Side.CLIENT)]
    assert "Would you like to install Forge v14.23.5?" in confirm_yes.prompts

    declined = RecordingLoader()
    install_pack(_pack(forge_version="14.23.5"), paths, make_context(prompt=confirm_no, loader_installer=declined))
    assert declined.calls == []


def test_install_declined_version_gate_changes_nothing(paths, make_context, confirm_no):
    ctx = make_context(prompt=confirm_no)
    result = install_pack(_pack(gopacked_min=Version.of(9)), paths, ctx)

    assert result.exit_code == 0
    assert [d.code for d in result.diagnostics] == ["TOOL_VERSION_UNSUPPORTED", "RUN_CANCELLED"]
    assert confirm_no.prompts == ["Would you like to continue anyway?"]
    assert not paths.install_path.exists()


def test_install_accepted_version_gate_continues(paths, make_context, confirm_yes):
    result = install_pack(_pack(gopacked_max=Version.of(0, 1)), paths, make_context(prompt=confirm_yes))
    assert result.exit_code == 0
    assert (paths.install_path / "mods" / "a-1.jar").exists()


def test_install_path_blocked_by_file_is_fatal(paths, make_context):
    paths.install_path.parent.mkdir(parents=True)
    paths.install_path.write_text("not a directory", encoding="utf-8")
    result = install_pack(_pack(), paths, make_context())
    assert result.exit_code == 3
    assert [d.code for d in result.diagnostics] == ["INSTALL_PATH_FAILED"]


def test_install_root_is_created_when_files_tree_is_other_side(paths, make_context):
    result = install_pack(_pack(files=FileEntry.directory(side=Side.SERVER)), paths, make_context())

    assert result.exit_code == 0
    assert paths.install_path.is_dir()
    saved = read_definition(paths.install_path).value
    assert saved is not None and saved.simple_name == "skypack"


def test_install_root_behind_broken_symlink_is_fatal(paths, fetcher, make_context):
    paths.install_path.parent.mkdir(parents=True)
    paths.install_path.symlink_to(paths.install_path.parent / "gone")
    result = install_pack(_pack(), paths, make_context())

    assert result.exit_code == 3
    assert [d.code for d in result.diagnostics] == ["INSTALL_PATH_FAILED"]
    assert fetcher.calls == []


def test_fresh_install_does_not_warn_about_root(paths, make_context, caplog):
    with caplog.at_level(logging.WARNING, logger="gopacked"):
        install_pack(_pack(), paths, make_context())
    assert "already exists" not in caplog.text


def test_missing_profiles_file_is_reported_and_install_continues(tmp_path, fetcher, make_context):
    fetcher.bodies.update({A1: b"a", LAUNCHER_JSON: b"j"})
    mc = tmp_path / "mc"
    paths = PackPaths(mc / "gopacked" / "skypack", mc)
    result = install_pack(_pack(), paths, make_context(profiles=LauncherProfilesFile()))
    assert [d.code for d in result.diagnostics] == ["PROFILE_INSTALL_FAILED"]
    assert (paths.install_path / "mods" / "a-1.jar").exists()


def test_update_moves_launcher_version_and_saves_new_definition(paths, minecraft, fetcher, make_context):
    old = _pack()
    install_pack(old, paths, make_context(profiles=LauncherProfilesFile()))
    new = _pack(
        simple_name="skypack2",
        version=Version.of(2),
        files=FileEntry.directory({"mods": FileEntry.directory({"a": FileEntry.file(A2, "2")})}),
    )
    fetcher.calls.clear()

    result = update_pack(old, new, paths, make_context(profiles=LauncherProfilesFile()))

    assert result.exit_code == 0
    assert not (minecraft / "versions" / "skypack").exists()
    assert (minecraft / "versions" / "skypack2" / "skypack.json").exists()
    assert sorted(p.name for p in (paths.install_path / "mods").iterdir()) == ["a-2.jar"]
    assert _profiles(minecraft)["Sky Pack"]["lastVersionId"] == "skypack2"
    saved = read_definition(paths.install_path).value
    assert saved is not None and saved.simple_name == "skypack2"


def test_update_skips_forge_when_version_unchanged(paths, make_context, confirm_yes):
    old = _pack(forge_version="14.23.5")
    install_pack(old, paths, make_context())
    loader = RecordingLoader()
    update_pack(old, _pack(forge_version="14.23.5", version=Version.of(1, 1)), paths, make_context(prompt=confirm_yes, loader_installer=loader))
    assert loader.calls == []


def test_update_renamed_pack_replaces_profile(paths, minecraft, make_context):
    old = _pack()
    install_pack(old, paths, make_context(profiles=LauncherProfilesFile()))
    update_pack(old, _pack(name="Sky Pack Deluxe"), paths, make_context(profiles=LauncherProfilesFile()))
    assert list(_profiles(minecraft)) == ["Sky Pack Deluxe"]


def test_uninstall_removes_everything(paths, minecraft, make_context, confirm_yes):
    pack = _pack()
    install_pack(pack, paths, make_context(profiles=LauncherProfilesFile()))

    ctx = make_context(profiles=LauncherProfilesFile(), prompt=confirm_yes)
    result = uninstall_pack(pack, paths, ctx)

    assert result.exit_code == 0
    assert not paths.install_path.exists()
    assert not (minecraft / "versions" / "skypack").exists()
    assert _profiles(minecraft) == {}
    assert confirm_yes.prompts == ["Are you sure you wish to uninstall Sky Pack v1.0?"]


def test_uninstall_declined_keeps_install(paths, make_context, confirm_no):
    pack = _pack()
    install_pack(pack, paths, make_context())
    result = uninstall_pack(pack, paths, make_context(prompt=confirm_no))
    assert [d.code for d in result.diagnostics] == ["RUN_CANCELLED"]
    assert (paths.install_path / "mods" / "a-1.jar").exists()
