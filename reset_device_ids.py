# -*- coding: utf-8 -*-
"""
Cursor 设备 ID 重置 / Cursor Device ID Reset

读取 storage.json，写入三个新的标识符，并保留其它所有键：
Reads storage.json, writes three fresh identifiers and keeps every other key:
- 机器 ID (telemetry.machineId)
- Mac 机器 ID (telemetry.macMachineId)
- 设备 ID (telemetry.devDeviceId)

写入使用临时文件加替换，中断不会留下写了一半的文件。
Writes go to a temp file that replaces the original, so an interruption never
leaves a half-written file behind.

无法解析的 storage.json 不会被覆盖，而是抛出 ConfigParseError。
A storage.json that fails to parse is never overwritten; ConfigParseError is raised.
"""

import os
import json
import shutil
import tempfile
import logging

from device_ids import RESERVED_KEYS, generate_new_ids

logger = logging.getLogger(__name__)

NOT_SET = "Not set"


class ConfigParseError(ValueError):
    """storage.json 存在但不是合法的 JSON 对象 / storage.json exists but is not a valid JSON object"""

    def __init__(self, path, reason):
        super().__init__(f"Cannot parse {path}: {reason}")
        self.path = path
        self.reason = reason


def load_storage(config_path):
    """读取 storage.json / Load storage.json

    Returns:
        dict or None: 文件不存在时返回 None / None when the file does not exist

    Raises:
        ConfigParseError: 文件不是合法的 JSON 对象 / File is not a valid JSON object
        OSError: 读取失败 / Read failure
    """
    if not os.path.exists(config_path):
        return None

    with open(config_path, "rb") as f:
        raw = f.read()

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigParseError(config_path, str(e)) from e

    if not isinstance(data, dict):
        raise ConfigParseError(config_path, f"top-level value is {type(data).__name__}, expected object")
    return data


def write_storage(config_path, data):
    """以原子替换方式写入 storage.json / Write storage.json via temp file and replace

    Raises:
        OSError: 写入失败，原文件保持不变 / Write failure; the original file is left untouched
    """
    directory = os.path.dirname(config_path) or "."
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(mode="w", encoding="utf-8", delete=False,
                                         dir=directory, prefix="storage.json.", suffix=".tmp") as tmp_file:
            tmp_path = tmp_file.name
            json.dump(data, tmp_file, indent=4, ensure_ascii=False)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        if os.path.exists(config_path):
            shutil.copymode(config_path, tmp_path)
        os.replace(tmp_path, config_path)
        tmp_path = None
    finally:
        # 替换未完成时清理临时文件 / Clean up the temp file if it was not moved into place
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)


def reset_ids(config_path):
    """重置设备 ID / Reset the device IDs

    Args:
        config_path: storage.json 路径 / Path to storage.json

    Returns:
        dict: 三个新标识符 / The three new identifiers

    Raises:
        ConfigParseError: 现有文件无法解析，文件保持不变 / Existing file cannot be parsed; it is left untouched
        OSError: 目录创建、读取或写入失败 / Directory, read or write failure
    """
    os.makedirs(os.path.dirname(config_path) or ".", exist_ok=True)

    data = load_storage(config_path)
    if data is None:
        logger.info("No storage file at %s, creating a new one", config_path)
        data = {}

    new_ids = generate_new_ids()
    data.update(new_ids)

    write_storage(config_path, data)
    logger.info("Wrote new device ids to %s", config_path)
    return new_ids


def read_ids(config_path):
    """读取当前设备 ID / Read the current device IDs

    Returns:
        dict or None: 文件不存在时返回 None；缺失的键显示为 "Not set"
                      None when the file is missing; absent keys read as "Not set"

    Raises:
        ConfigParseError: 文件不是合法的 JSON 对象 / File is not a valid JSON object
    """
    data = load_storage(config_path)
    if data is None:
        return None
    return {key: NOT_SET if data.get(key) is None else str(data[key]) for key in RESERVED_KEYS}
