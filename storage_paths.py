"""Cursor storage.json 路径定位 / Locate Cursor's storage.json

根据操作系统计算配置文件路径和同级的备份目录，只做路径计算，不访问文件系统。
Maps the host OS to the config file path and its sibling backup directory.
Pure path computation; nothing here touches the filesystem.
"""

import os
import platform
import logging
from collections import namedtuple

from utils import get_actual_home_dir

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "Cursor"
STORAGE_FILE_NAME = "storage.json"
BACKUP_DIR_NAME = "backups"

# Windows 下的 POSIX 模拟环境 / POSIX emulation environments on Windows
WINDOWS_LIKE_PREFIXES = ("CYGWIN", "MINGW", "MSYS")

StoragePaths = namedtuple("StoragePaths", ["config_path", "backup_dir"])


class UnsupportedPlatformError(Exception):
    """不支持的操作系统 / Unsupported operating system"""

    def __init__(self, system):
        super().__init__(f"Unsupported operating system: {system}")
        self.system = system


class StorageLocationError(EnvironmentError):
    """无法确定存储位置（例如缺少 APPDATA）/ Storage location cannot be determined"""
    pass


def _global_storage_parts(app_name):
    return (app_name, "User", "globalStorage")


def resolve_storage_paths(system=None, environ=None, app_name=DEFAULT_APP_NAME):
    """获取 storage.json 与备份目录路径 / Get storage.json and backup directory paths

    Args:
        system: 操作系统标识，默认为 platform.system() / OS identifier
        environ: 环境变量映射，默认为 os.environ / Environment mapping
        app_name: 编辑器目录名 / Editor directory name

    Returns:
        StoragePaths: (config_path, backup_dir)

    Raises:
        UnsupportedPlatformError: 未知操作系统 / Unknown OS
        StorageLocationError: Windows 下未设置 APPDATA / APPDATA missing on Windows
    """
    if system is None:
        system = platform.system()
    if environ is None:
        environ = os.environ

    if system == "Linux":
        base = os.path.join(get_actual_home_dir(environ), ".config")
    elif system == "Darwin":
        base = os.path.join(get_actual_home_dir(environ), "Library", "Application Support")
    elif system == "Windows" or system.upper().startswith(WINDOWS_LIKE_PREFIXES):
        appdata = environ.get("APPDATA")
        if not appdata:
            raise StorageLocationError("APPDATA Environment Variable Not Set")
        base = appdata
    else:
        raise UnsupportedPlatformError(system)

    storage_dir = os.path.join(base, *_global_storage_parts(app_name))
    paths = StoragePaths(
        config_path=os.path.join(storage_dir, STORAGE_FILE_NAME),
        backup_dir=os.path.join(storage_dir, BACKUP_DIR_NAME),
    )
    logger.debug("Resolved storage paths for %s: %s", system, paths)
    return paths


def apply_path_overrides(paths, config):
    """应用配置文件中的路径覆盖 / Apply path overrides from the tool configuration

    [Paths] 中的空值表示保留计算出的默认路径。
    Empty values under [Paths] keep the computed default.
    """
    if config is None or not config.has_section('Paths'):
        return paths

    config_path = config.get('Paths', 'storage_path', fallback='').strip()
    backup_dir = config.get('Paths', 'backup_dir', fallback='').strip()

    if config_path:
        config_path = os.path.expanduser(config_path)
        if not backup_dir:
            backup_dir = os.path.join(os.path.dirname(config_path), BACKUP_DIR_NAME)
    if backup_dir:
        backup_dir = os.path.expanduser(backup_dir)

    return StoragePaths(
        config_path=config_path or paths.config_path,
        backup_dir=backup_dir or paths.backup_dir,
    )
