import os
import configparser

import pytest

from storage_paths import (
    StoragePaths,
    StorageLocationError,
    UnsupportedPlatformError,
    apply_path_overrides,
    resolve_storage_paths,
)


def test_linux_paths():
    paths = resolve_storage_paths("Linux", {"HOME": "/home/alice"})
    assert paths.config_path == os.path.join("/home/alice", ".config", "Cursor", "User", "globalStorage", "storage.json")
    assert paths.backup_dir == os.path.join("/home/alice", ".config", "Cursor", "User", "globalStorage", "backups")


def test_linux_paths_under_sudo_use_invoking_user():
    paths = resolve_storage_paths("Linux", {"HOME": "/root", "SUDO_USER": "bob"})
    assert paths.config_path.startswith(os.path.join("/home", "bob", ".config"))


def test_macos_paths():
    paths = resolve_storage_paths("Darwin", {"HOME": "/Users/alice"})
    assert paths.config_path == os.path.join(
        "/Users/alice", "Library", "Application Support", "Cursor", "User", "globalStorage", "storage.json")
    assert os.path.dirname(paths.backup_dir) == os.path.dirname(paths.config_path)


@pytest.mark.parametrize("system", ["Windows", "CYGWIN_NT-10.0", "MINGW64_NT-10.0", "MSYS_NT-10.0"])
def test_windows_like_paths(system):
    paths = resolve_storage_paths(system, {"APPDATA": "C:/Users/alice/AppData/Roaming"})
    assert paths.config_path == os.path.join(
        "C:/Users/alice/AppData/Roaming", "Cursor", "User", "globalStorage", "storage.json")
    assert os.path.basename(paths.backup_dir) == "backups"


def test_windows_without_appdata():
    with pytest.raises(StorageLocationError):
        resolve_storage_paths("Windows", {})


def test_unsupported_platform():
    with pytest.raises(UnsupportedPlatformError) as excinfo:
        resolve_storage_paths("SunOS", {"HOME": "/home/alice"})
    assert excinfo.value.system == "SunOS"


def test_custom_app_name():
    paths = resolve_storage_paths("Linux", {"HOME": "/home/alice"}, app_name="Code")
    assert os.path.join(".config", "Code", "User") in paths.config_path


def test_resolution_does_not_touch_filesystem(tmp_path):
    resolve_storage_paths("Linux", {"HOME": str(tmp_path)})
    assert list(tmp_path.iterdir()) == []


def _paths_config(storage_path="", backup_dir=""):
    config = configparser.ConfigParser()
    config.add_section('Paths')
    config.set('Paths', 'storage_path', storage_path)
    config.set('Paths', 'backup_dir', backup_dir)
    return config


def test_overrides_empty_keep_defaults():
    paths = StoragePaths("/a/storage.json", "/a/backups")
    assert apply_path_overrides(paths, _paths_config()) == paths
    assert apply_path_overrides(paths, None) == paths


def test_override_storage_path_moves_backups_alongside():
    paths = StoragePaths("/a/storage.json", "/a/backups")
    result = apply_path_overrides(paths, _paths_config(storage_path="/b/storage.json"))
    assert result == StoragePaths("/b/storage.json", os.path.join("/b", "backups"))


def test_override_backup_dir_only():
    paths = StoragePaths("/a/storage.json", "/a/backups")
    result = apply_path_overrides(paths, _paths_config(backup_dir="/c/snapshots"))
    assert result == StoragePaths("/a/storage.json", "/c/snapshots")
