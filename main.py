# main.py
# Cursor 设备 ID 重置工具 主程序入口文件
# 功能：提供一个交互式菜单界面，查看、备份并重置 Cursor 的设备标识符

import os
import sys
import logging
from collections import namedtuple

from colorama import Fore, Style, init

from logo import print_logo, version
from config import get_config, get_config_file_path
from translator import Translator
from ui import choose_presenter
from device_ids import MACHINE_ID_KEY, MAC_MACHINE_ID_KEY, DEV_DEVICE_ID_KEY
from storage_paths import (
    DEFAULT_APP_NAME,
    StorageLocationError,
    UnsupportedPlatformError,
    apply_path_overrides,
    resolve_storage_paths,
)
from storage_backup import BackupError, backup_if_exists, list_backups
from reset_device_ids import ConfigParseError, read_ids, reset_ids

# 初始化 colorama 库，启用跨平台终端颜色支持
init()

logger = logging.getLogger(__name__)

EMOJI = {
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
}

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# 启动时构建一次，之后只读 / Built once at startup, read-only afterwards
AppContext = namedtuple("AppContext", ["paths", "translator", "app_name", "config_file"])

MENU_SHOW_IDS = "1"
MENU_RESET = "2"
MENU_BACKUP = "3"
MENU_LIST_BACKUPS = "4"
MENU_ABOUT = "5"
MENU_EXIT = "6"

SEPARATOR = '━' * 46


# ==================== 启动 ====================

def setup_logging(config):
    """根据配置初始化日志 / Configure logging from the [Logging] section"""
    level_name = 'WARNING'
    log_file = ''
    if config is not None and config.has_section('Logging'):
        level_name = config.get('Logging', 'level', fallback='WARNING').strip().upper() or 'WARNING'
        log_file = config.get('Logging', 'file', fallback='').strip()

    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    kwargs = {'level': level, 'format': LOG_FORMAT}
    if log_file:
        kwargs['filename'] = os.path.expanduser(log_file)
        kwargs['encoding'] = 'utf-8'
    logging.basicConfig(**kwargs)


def build_context(config, translator, system=None, environ=None, config_file=None):
    """解析路径并构建运行上下文 / Resolve paths and build the run context

    Raises:
        UnsupportedPlatformError: 不支持的操作系统
        StorageLocationError: 无法确定存储位置
    """
    app_name = DEFAULT_APP_NAME
    if config is not None:
        app_name = config.get('App', 'name', fallback=DEFAULT_APP_NAME).strip() or DEFAULT_APP_NAME

    paths = resolve_storage_paths(system=system, environ=environ, app_name=app_name)
    paths = apply_path_overrides(paths, config)
    logger.info("Using storage file %s, backups in %s", paths.config_path, paths.backup_dir)
    return AppContext(paths=paths, translator=translator, app_name=app_name, config_file=config_file)


# ==================== 菜单操作 ====================

def menu_options(translator):
    return [
        (MENU_SHOW_IDS, translator.get('menu.show_ids')),
        (MENU_RESET, translator.get('menu.reset')),
        (MENU_BACKUP, translator.get('menu.backup')),
        (MENU_LIST_BACKUPS, translator.get('menu.list_backups')),
        (MENU_ABOUT, translator.get('menu.about')),
        (MENU_EXIT, translator.get('menu.exit')),
    ]


def format_ids(ctx, ids, heading):
    t = ctx.translator
    return "\n".join([
        heading,
        SEPARATOR,
        f"{t.get('ids.machine_id')}: {ids[MACHINE_ID_KEY]}",
        f"{t.get('ids.mac_machine_id')}: {ids[MAC_MACHINE_ID_KEY]}",
        f"{t.get('ids.dev_device_id')}: {ids[DEV_DEVICE_ID_KEY]}",
        SEPARATOR,
        "",
        f"{t.get('ids.storage_file')}: {ctx.paths.config_path}",
    ])


def show_current_ids(ctx, presenter):
    """显示当前设备 ID"""
    t = ctx.translator
    ids = read_ids(ctx.paths.config_path)
    if ids is None:
        presenter.show_message(t.get('ids.title'), t.get('ids.not_set_yet'))
        return
    presenter.show_message(t.get('ids.title'), format_ids(ctx, ids, t.get('ids.current')))


def reset_with_backup(ctx, presenter):
    """确认后备份并重置设备 ID"""
    t = ctx.translator
    if not presenter.confirm(t.get('reset.confirm')):
        logger.info("Reset declined by user")
        return

    backup_path = backup_if_exists(ctx.paths.config_path, ctx.paths.backup_dir)
    new_ids = reset_ids(ctx.paths.config_path)

    text = format_ids(ctx, new_ids, t.get('reset.new_ids'))
    if backup_path:
        text += f"\n{t.get('reset.backup_created', name=os.path.basename(backup_path))}"
    else:
        text += f"\n{t.get('backup.no_file')}"
    presenter.show_message(t.get('reset.success'), text, kind="success")


def create_backup_only(ctx, presenter):
    """仅创建备份"""
    t = ctx.translator
    backup_path = backup_if_exists(ctx.paths.config_path, ctx.paths.backup_dir)
    if backup_path is None:
        presenter.show_message(t.get('backup.title'), t.get('backup.no_file'), kind="warning")
        return
    presenter.show_message(
        t.get('backup.title'),
        t.get('backup.created', name=os.path.basename(backup_path), directory=ctx.paths.backup_dir),
        kind="success",
    )


def show_backups(ctx, presenter):
    """列出可用备份，最新的在前"""
    t = ctx.translator
    backup_dir = ctx.paths.backup_dir
    if not os.path.isdir(backup_dir):
        presenter.show_message(t.get('backups.title'), t.get('backups.no_directory'))
        return

    backups = list_backups(backup_dir)
    if not backups:
        presenter.show_message(t.get('backups.title'), t.get('backups.no_files', directory=backup_dir))
        return

    lines = [t.get('backups.header'), SEPARATOR]
    for entry in backups:
        lines.append(f"• {entry.filename} ({entry.timestamp.strftime('%Y-%m-%d %H:%M:%S')}, {entry.size / 1024:.1f} KB)")
    lines.append(SEPARATOR)
    lines.append(f"{t.get('backups.directory')}: {backup_dir}")
    presenter.show_message(t.get('backups.title'), "\n".join(lines))


def show_about(ctx, presenter):
    t = ctx.translator
    text = t.get('about.text', version=version, app=ctx.app_name)
    if ctx.config_file:
        text += f"\n\n{t.get('about.config_file')}: {ctx.config_file}"
    presenter.show_message(t.get('about.title'), text)


MENU_ACTIONS = {
    MENU_SHOW_IDS: show_current_ids,
    MENU_RESET: reset_with_backup,
    MENU_BACKUP: create_backup_only,
    MENU_LIST_BACKUPS: show_backups,
    MENU_ABOUT: show_about,
}


def run_menu(ctx, presenter):
    """
    主菜单循环

    每个操作完成后回到菜单；只有“退出”结束循环。
    操作失败会显示原因，然后继续循环。

    Returns:
        int: 退出码 / Exit code
    """
    t = ctx.translator
    options = menu_options(t)
    while True:
        choice = presenter.select_option(t.get('menu.title'), options)

        if choice == MENU_EXIT:
            print(f"{Fore.GREEN}👋 {t.get('menu.goodbye')}{Style.RESET_ALL}")
            return EXIT_OK

        action = MENU_ACTIONS.get(choice)
        if action is None:
            presenter.show_error(t.get('menu.invalid_choice', choices=f"{MENU_SHOW_IDS}-{MENU_EXIT}"))
            continue

        try:
            action(ctx, presenter)
        except ConfigParseError as e:
            logger.info("Config parse error: %s", e)
            presenter.show_error(t.get('errors.parse_error', path=e.path, error=e.reason))
        except BackupError as e:
            logger.info("Backup failed: %s", e)
            presenter.show_error(t.get('errors.backup_failed', error=str(e)))
        except OSError as e:
            logger.info("I/O error: %s", e)
            presenter.show_error(t.get('errors.io_error', error=str(e)))


def main(system=None, environ=None, presenter=None, config_dir=None):
    """
    程序主函数

    程序流程:
        1. 配置初始化与日志
        2. 翻译器
        3. 路径解析（仅一次）
        4. 主菜单循环

    Returns:
        int: 0 正常退出，1 致命错误，130 用户中断
    """
    translator = None
    try:
        config = get_config(config_dir=config_dir)
        if config is None:
            return EXIT_FATAL
        setup_logging(config)
        translator = Translator(config)

        try:
            ctx = build_context(config, translator, system=system, environ=environ,
                                config_file=get_config_file_path(config_dir))
        except UnsupportedPlatformError as e:
            print(f"{Fore.RED}{EMOJI['ERROR']} {translator.get('errors.unsupported_platform', system=e.system)}{Style.RESET_ALL}")
            return EXIT_FATAL
        except StorageLocationError as e:
            print(f"{Fore.RED}{EMOJI['ERROR']} {translator.get('errors.storage_location', error=str(e))}{Style.RESET_ALL}")
            return EXIT_FATAL

        if presenter is None:
            print_logo()
            presenter = choose_presenter(config.get('UI', 'mode', fallback='auto'), translator)
        return run_menu(ctx, presenter)

    except KeyboardInterrupt:
        message = translator.get('menu.interrupted') if translator else "Interrupted by user"
        print(f"\n{Fore.RED}{message}{Style.RESET_ALL}")
        return EXIT_INTERRUPTED
    except EOFError:
        # 标准输入已关闭，视为正常退出 / stdin closed, treated as a normal exit
        print()
        return EXIT_OK


# 程序入口点
if __name__ == "__main__":
    sys.exit(main())
