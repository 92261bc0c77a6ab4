"""设备标识符生成 / Device identifier generation

所有随机值都来自操作系统提供的随机源 (os.urandom)，不依赖外部的 uuidgen 等工具。
All random values come from the OS randomness source (os.urandom); no external
uuidgen-style tools are needed.
"""

import os
import re

MACHINE_ID_KEY = "telemetry.machineId"
MAC_MACHINE_ID_KEY = "telemetry.macMachineId"
DEV_DEVICE_ID_KEY = "telemetry.devDeviceId"

RESERVED_KEYS = (MACHINE_ID_KEY, MAC_MACHINE_ID_KEY, DEV_DEVICE_ID_KEY)

MACHINE_ID_LENGTH = 64

_HEX32_RE = re.compile(r"^[0-9a-fA-F]{32}$")


def generate_hex(length: int) -> str:
    """生成指定长度的小写十六进制字符串 / Generate a lowercase hex string of exactly `length` chars

    Raises:
        ValueError: length 为负数时 / When length is negative
    """
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    # 奇数长度多取一个字节再截断 / Odd lengths take one extra byte and trim
    return os.urandom((length + 1) // 2).hex()[:length]


def format_uuid4(hex32: str) -> str:
    """将 32 位十六进制字符串格式化为 UUID v4 / Format 32 hex chars as a canonical UUID v4

    版本半字节固定为 4，变体字节最高两位固定为 10 (RFC 4122)。
    The version nibble is forced to 4 and the top two variant bits to 10 (RFC 4122).

    Raises:
        ValueError: 输入不是 32 个十六进制字符时 / When the input is not 32 hex characters
    """
    if not isinstance(hex32, str) or not _HEX32_RE.match(hex32):
        raise ValueError(f"expected 32 hex characters, got {hex32!r}")
    h = hex32.lower()
    variant = "89ab"[int(h[16], 16) & 0x3]
    return f"{h[0:8]}-{h[8:12]}-4{h[13:16]}-{variant}{h[17:20]}-{h[20:32]}"


def generate_uuid4() -> str:
    """生成新的 UUID v4 字符串 / Generate a new UUID v4 string"""
    return format_uuid4(generate_hex(32))


def generate_new_ids():
    """生成三个新的设备标识符 / Generate the three fresh device identifiers

    Returns:
        dict: 保留键到新值的映射 / Mapping of reserved key to new value
    """
    return {
        MACHINE_ID_KEY: generate_hex(MACHINE_ID_LENGTH),
        MAC_MACHINE_ID_KEY: generate_hex(MACHINE_ID_LENGTH),
        DEV_DEVICE_ID_KEY: generate_uuid4(),
    }
