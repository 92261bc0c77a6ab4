"""storage.json 备份管理 / storage.json backup management

备份文件命名为 storage_backup_<YYYYMMDD>_<HHMMSS>.json，创建后不再修改，也不会自动删除。
Backups are named storage_backup_<YYYYMMDD>_<HHMMSS>.json, never modified after
creation and never deleted automatically.
"""

import os
import re
import shutil
import logging
from collections import namedtuple
from datetime import datetime

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "storage_backup_"
BACKUP_SUFFIX = ".json"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# 同一秒内的重复备份追加 _<n> 后缀 / Same-second duplicates get an _<n> suffix
_BACKUP_NAME_RE = re.compile(r"^storage_backup_(\d{8}_\d{6})(?:_(\d+))?\.json$")

BackupEntry = namedtuple("BackupEntry", ["filename", "path", "timestamp", "size"])


class BackupError(OSError):
    """备份目录创建或文件复制失败 / Backup directory creation or copy failed"""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


def backup_filename(now, counter=0):
    """生成备份文件名 / Build a backup file name"""
    stamp = now.strftime(TIMESTAMP_FORMAT)
    if counter:
        return f"{BACKUP_PREFIX}{stamp}_{counter}{BACKUP_SUFFIX}"
    return f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"


def backup_if_exists(config_path, backup_dir, now=None):
    """如果配置文件存在则创建带时间戳的备份 / Back up the config file if it exists

    Args:
        config_path: storage.json 路径 / Path to storage.json
        backup_dir: 备份目录 / Backup directory
        now: 备份时间，默认为当前本地时间 / Backup time, defaults to local now

    Returns:
        str or None: 新备份文件路径，文件不存在时返回 None / New backup path, or None when there is nothing to back up

    Raises:
        BackupError: 无法创建目录或复制文件 / Directory creation or copy failed
    """
    if not os.path.isfile(config_path):
        logger.info("No config file at %s, skipping backup", config_path)
        return None

    if now is None:
        now = datetime.now()

    try:
        os.makedirs(backup_dir, exist_ok=True)
    except OSError as e:
        raise BackupError(f"Cannot create backup directory {backup_dir}: {e}", cause=e) from e

    counter = 0
    backup_path = os.path.join(backup_dir, backup_filename(now))
    while os.path.exists(backup_path):
        counter += 1
        backup_path = os.path.join(backup_dir, backup_filename(now, counter))

    try:
        shutil.copy2(config_path, backup_path)
    except OSError as e:
        raise BackupError(f"Cannot copy {config_path} to {backup_path}: {e}", cause=e) from e

    logger.info("Created backup %s", backup_path)
    return backup_path


def list_backups(backup_dir):
    """列出所有备份，最新的在前 / List backups, newest first

    排序依据为文件名中的时间戳，而不是文件的修改时间。
    Ordering uses the timestamp embedded in the file name, not file mtimes.

    Returns:
        list[BackupEntry]: 目录不存在或为空时返回空列表 / Empty when the directory is missing or empty
    """
    if not os.path.isdir(backup_dir):
        return []

    keyed = []
    for filename in os.listdir(backup_dir):
        match = _BACKUP_NAME_RE.match(filename)
        if not match:
            continue
        path = os.path.join(backup_dir, filename)
        if not os.path.isfile(path):
            continue
        stamp, counter = match.group(1), int(match.group(2) or 0)
        try:
            timestamp = datetime.strptime(stamp, TIMESTAMP_FORMAT)
        except ValueError:
            logger.debug("Ignoring backup with invalid timestamp: %s", filename)
            continue
        entry = BackupEntry(filename, path, timestamp, os.path.getsize(path))
        keyed.append(((stamp, counter), entry))

    keyed.sort(key=lambda item: item[0], reverse=True)
    return [entry for _, entry in keyed]
