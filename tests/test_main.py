import json
import logging
import os
import re

import main
from device_ids import DEV_DEVICE_ID_KEY, MAC_MACHINE_ID_KEY, MACHINE_ID_KEY, RESERVED_KEYS
from main import (
    EXIT_FATAL,
    EXIT_INTERRUPTED,
    EXIT_OK,
    MENU_ABOUT,
    MENU_BACKUP,
    MENU_EXIT,
    MENU_LIST_BACKUPS,
    MENU_RESET,
    MENU_SHOW_IDS,
    run_menu,
)

UUID4_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def _write_config(ctx, data):
    os.makedirs(os.path.dirname(ctx.paths.config_path), exist_ok=True)
    with open(ctx.paths.config_path, "w", encoding="utf-8") as f:
        json.dump(data, f)


def test_exit_returns_zero(ctx, make_presenter):
    presenter = make_presenter([MENU_EXIT])
    assert run_menu(ctx, presenter) == EXIT_OK
    assert presenter.messages == []


def test_invalid_choice_reports_and_continues(ctx, make_presenter):
    presenter = make_presenter(["9", "abc", MENU_EXIT])
    assert run_menu(ctx, presenter) == EXIT_OK
    assert len(presenter.errors) == 2
    assert "Invalid choice" in presenter.errors[0]


def test_show_ids_without_file(ctx, make_presenter):
    presenter = make_presenter([MENU_SHOW_IDS, MENU_EXIT])
    run_menu(ctx, presenter)
    assert "No device IDs are currently set" in presenter.messages[0][1]


def test_declining_reset_has_no_side_effects(ctx, storage_dir, make_presenter):
    _write_config(ctx, {"foo": "bar"})
    before = open(ctx.paths.config_path, "rb").read()

    presenter = make_presenter([MENU_RESET, MENU_EXIT], confirms=[False])
    run_menu(ctx, presenter)

    assert len(presenter.confirm_prompts) == 1
    assert open(ctx.paths.config_path, "rb").read() == before
    assert not os.path.exists(ctx.paths.backup_dir)
    assert presenter.messages == []


def test_reset_backs_up_then_rewrites(ctx, make_presenter):
    _write_config(ctx, {"foo": "bar"})
    original = open(ctx.paths.config_path, "rb").read()

    presenter = make_presenter([MENU_RESET, MENU_EXIT], confirms=[True])
    run_menu(ctx, presenter)

    backups = os.listdir(ctx.paths.backup_dir)
    assert len(backups) == 1
    assert open(os.path.join(ctx.paths.backup_dir, backups[0]), "rb").read() == original

    data = json.load(open(ctx.paths.config_path, encoding="utf-8"))
    assert data["foo"] == "bar"
    title, text, kind = presenter.messages[0]
    assert kind == "success"
    assert data[MACHINE_ID_KEY] in text
    assert backups[0] in text


def test_reset_with_corrupt_file_reports_and_keeps_file(ctx, make_presenter):
    os.makedirs(os.path.dirname(ctx.paths.config_path))
    with open(ctx.paths.config_path, "wb") as f:
        f.write(b'{"a":')

    presenter = make_presenter([MENU_RESET, MENU_EXIT], confirms=[True])
    assert run_menu(ctx, presenter) == EXIT_OK

    assert open(ctx.paths.config_path, "rb").read() == b'{"a":'
    assert len(presenter.errors) == 1
    assert "not valid JSON" in presenter.errors[0]


def test_reset_aborted_when_backup_fails(ctx, make_presenter, monkeypatch):
    _write_config(ctx, {"foo": "bar"})
    before = open(ctx.paths.config_path, "rb").read()

    def failing_backup(config_path, backup_dir):
        raise main.BackupError("disk full")

    monkeypatch.setattr(main, "backup_if_exists", failing_backup)
    presenter = make_presenter([MENU_RESET, MENU_EXIT], confirms=[True])
    run_menu(ctx, presenter)

    assert open(ctx.paths.config_path, "rb").read() == before
    assert "disk full" in presenter.errors[0]


def test_backup_only_without_file(ctx, make_presenter):
    presenter = make_presenter([MENU_BACKUP, MENU_EXIT])
    run_menu(ctx, presenter)
    assert presenter.messages[0][2] == "warning"
    assert "no backup needed" in presenter.messages[0][1]
    assert not os.path.exists(ctx.paths.backup_dir)


def test_backup_only_with_file(ctx, make_presenter):
    _write_config(ctx, {"a": 1})
    presenter = make_presenter([MENU_BACKUP, MENU_EXIT])
    run_menu(ctx, presenter)
    assert presenter.messages[0][2] == "success"
    assert len(os.listdir(ctx.paths.backup_dir)) == 1


def test_list_backups_menu(ctx, make_presenter):
    os.makedirs(ctx.paths.backup_dir)
    for name in ["storage_backup_20240101_100000.json", "storage_backup_20240102_090000.json"]:
        with open(os.path.join(ctx.paths.backup_dir, name), "w") as f:
            f.write("{}")

    presenter = make_presenter([MENU_LIST_BACKUPS, MENU_EXIT])
    run_menu(ctx, presenter)

    text = presenter.messages[0][1]
    assert text.index("20240102_090000") < text.index("20240101_100000")
    assert "2024-01-02 09:00:00" in text


def test_list_backups_menu_without_dir(ctx, make_presenter):
    presenter = make_presenter([MENU_LIST_BACKUPS, MENU_EXIT])
    run_menu(ctx, presenter)
    assert "No backup directory found" in presenter.messages[0][1]


def test_about_shows_version(ctx, make_presenter):
    presenter = make_presenter([MENU_ABOUT, MENU_EXIT])
    run_menu(ctx, presenter)
    assert main.version in presenter.messages[0][1]


def test_end_to_end_reset_then_show(tmp_path, make_presenter):
    home = tmp_path / "home"
    presenter = make_presenter([MENU_RESET, MENU_SHOW_IDS, MENU_EXIT], confirms=[True])

    code = main.main(system="Linux", environ={"HOME": str(home)}, presenter=presenter,
                     config_dir=str(tmp_path / "tool"))

    assert code == EXIT_OK
    storage = home / ".config" / "Cursor" / "User" / "globalStorage" / "storage.json"
    data = json.loads(storage.read_text(encoding="utf-8"))
    assert set(data) == set(RESERVED_KEYS)
    assert re.fullmatch(r"[0-9a-f]{64}", data[MACHINE_ID_KEY])
    assert re.fullmatch(r"[0-9a-f]{64}", data[MAC_MACHINE_ID_KEY])
    assert UUID4_RE.match(data[DEV_DEVICE_ID_KEY])

    shown = presenter.messages[1][1]
    for key in RESERVED_KEYS:
        assert data[key] in shown
    assert (tmp_path / "tool" / "config.ini").exists()


def test_main_unsupported_platform_exits_nonzero(tmp_path, make_presenter):
    presenter = make_presenter([])
    code = main.main(system="Plan9", environ={"HOME": str(tmp_path)}, presenter=presenter,
                     config_dir=str(tmp_path / "tool"))
    assert code == EXIT_FATAL


def test_main_missing_appdata_exits_nonzero(tmp_path, make_presenter):
    code = main.main(system="Windows", environ={}, presenter=make_presenter([]),
                     config_dir=str(tmp_path / "tool"))
    assert code == EXIT_FATAL


def test_main_interrupt_exits_130(tmp_path, make_presenter):
    presenter = make_presenter([KeyboardInterrupt])
    code = main.main(system="Linux", environ={"HOME": str(tmp_path)}, presenter=presenter,
                     config_dir=str(tmp_path / "tool"))
    assert code == EXIT_INTERRUPTED


def test_main_closed_stdin_exits_zero(tmp_path, make_presenter):
    presenter = make_presenter([EOFError])
    code = main.main(system="Linux", environ={"HOME": str(tmp_path)}, presenter=presenter,
                     config_dir=str(tmp_path / "tool"))
    assert code == EXIT_OK


def test_main_uses_configured_storage_path(tmp_path, make_presenter):
    tool_dir = tmp_path / "tool"
    tool_dir.mkdir()
    custom = tmp_path / "custom" / "storage.json"
    (tool_dir / "config.ini").write_text(f"[Paths]\nstorage_path = {custom}\nbackup_dir =\n", encoding="utf-8")

    presenter = make_presenter([MENU_RESET, MENU_EXIT], confirms=[True])
    main.main(system="Linux", environ={"HOME": str(tmp_path / "home")}, presenter=presenter,
              config_dir=str(tool_dir))

    assert custom.exists()
    assert not (tmp_path / "home").exists()


def test_invalid_utf8_reported_for_reset_and_show(ctx, make_presenter):
    os.makedirs(os.path.dirname(ctx.paths.config_path))
    with open(ctx.paths.config_path, "wb") as f:
        f.write(b'{"a": "\xff\xfe"}')

    presenter = make_presenter([MENU_RESET, MENU_SHOW_IDS, MENU_EXIT], confirms=[True])
    assert run_menu(ctx, presenter) == EXIT_OK

    assert len(presenter.errors) == 2
    assert all("not valid JSON" in error for error in presenter.errors)
    assert open(ctx.paths.config_path, "rb").read() == b'{"a": "\xff\xfe"}'


def test_failed_write_reported_as_io_error(ctx, make_presenter, monkeypatch):
    _write_config(ctx, {"foo": "bar"})
    before = open(ctx.paths.config_path, "rb").read()

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", failing_replace)
    presenter = make_presenter([MENU_RESET, MENU_EXIT], confirms=[True])
    run_menu(ctx, presenter)

    assert open(ctx.paths.config_path, "rb").read() == before
    assert not [name for name in os.listdir(os.path.dirname(ctx.paths.config_path)) if name.endswith(".tmp")]
    assert presenter.errors == ["File operation failed: disk full"]


def test_reported_errors_stay_below_warning_level(ctx, make_presenter, caplog):
    os.makedirs(os.path.dirname(ctx.paths.config_path))
    with open(ctx.paths.config_path, "w") as f:
        f.write("{oops")

    presenter = make_presenter([MENU_SHOW_IDS, MENU_EXIT])
    with caplog.at_level(logging.DEBUG):
        run_menu(ctx, presenter)

    assert presenter.errors
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
