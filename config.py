"""工具配置管理 / Tool configuration management

本工具自身的设置保存在用户文档目录下的 INI 文件中：
This tool keeps its own settings in an INI file under the user's Documents folder:

    <Documents>/.cursor-id-reset/config.ini

首次运行时使用默认值创建，之后缺失的节或选项会自动补全。
Created with defaults on first run; missing sections or options are filled in later.
"""

import os
import configparser
import logging

from colorama import Fore, Style

from utils import get_user_documents_path

logger = logging.getLogger(__name__)

EMOJI = {
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
}

CONFIG_DIR_NAME = ".cursor-id-reset"
CONFIG_FILE_NAME = "config.ini"
CONFIG_HOME_ENV = "CURSOR_ID_RESET_HOME"

DEFAULT_CONFIG = {
    'App': {
        'name': 'Cursor',
    },
    'Paths': {
        # 留空表示使用按操作系统计算的默认路径 / Empty means use the per-OS default
        'storage_path': '',
        'backup_dir': '',
    },
    'UI': {
        # auto | rich | plain
        'mode': 'auto',
    },
    'Language': {
        'current_language': '',
        'fallback_language': 'en',
    },
    'Logging': {
        'level': 'WARNING',
        'file': '',
    },
}


def get_config_dir(config_dir=None):
    """获取配置目录 / Get configuration directory"""
    if config_dir:
        return config_dir
    env_dir = os.environ.get(CONFIG_HOME_ENV)
    if env_dir:
        return os.path.expanduser(env_dir)
    return os.path.join(get_user_documents_path(), CONFIG_DIR_NAME)


def get_config_file_path(config_dir=None):
    """获取配置文件路径 / Get configuration file path"""
    return os.path.join(get_config_dir(config_dir), CONFIG_FILE_NAME)


def setup_config(config_dir=None):
    """加载配置，补全缺失项并保存 / Load config, fill in missing defaults and save

    Returns:
        configparser.ConfigParser: 已加载的配置 / Loaded configuration

    Raises:
        OSError: 配置目录或文件无法创建时 / When config directory or file cannot be written
        configparser.Error: 配置文件格式错误时 / When config file is malformed
    """
    config_file = get_config_file_path(config_dir)
    os.makedirs(os.path.dirname(config_file), exist_ok=True)

    config = configparser.ConfigParser()
    if os.path.exists(config_file):
        config.read(config_file, encoding='utf-8')

    changed = not os.path.exists(config_file)
    for section, options in DEFAULT_CONFIG.items():
        if not config.has_section(section):
            config.add_section(section)
            changed = True
        for option, value in options.items():
            if not config.has_option(section, option):
                config.set(section, option, value)
                changed = True

    if changed:
        with open(config_file, 'w', encoding='utf-8') as f:
            config.write(f)
        logger.info("Wrote default configuration to %s", config_file)

    return config


def get_config(translator=None, config_dir=None):
    """获取配置 / Get configuration

    Args:
        translator: 翻译器对象（可选）/ Translator object (optional)
        config_dir: 配置目录，默认为文档目录下的 .cursor-id-reset / Config directory override

    Returns:
        configparser.ConfigParser or None: 加载失败时返回 None / None when loading fails
    """
    try:
        return setup_config(config_dir)
    except (OSError, configparser.Error) as e:
        message = translator.get('config.load_failed', error=str(e)) if translator else f"Failed to load configuration: {e}"
        print(f"{Fore.RED}{EMOJI['ERROR']} {message}{Style.RESET_ALL}")
        return None
