"""多语言翻译管理 / Multi-language translation management

从程序目录下的 locales/<lang>.json 加载翻译，支持点分隔的嵌套键、
回退语言和 str.format 参数。
Loads translations from locales/<lang>.json next to this module and resolves
dotted keys with a fallback language and str.format kwargs.
"""

import os
import sys
import json
import locale
import logging

logger = logging.getLogger(__name__)

LOCALES_DIR_NAME = 'locales'


class Translator:
    """
    多语言翻译管理类

    功能:
        - 自动检测系统语言
        - 加载集成的翻译文件
        - 提供翻译文本获取接口
    """

    def __init__(self, config=None, locales_dir=None):
        """
        初始化翻译器

        优先级：配置文件中保存的语言 > 系统语言检测
        Priority: language saved in config > detected system language

        Args:
            config: configparser.ConfigParser 或 None
            locales_dir: 翻译文件目录，默认为模块旁的 locales / Locales directory override
        """
        self.translations = {}
        self.locales_dir = locales_dir

        self.fallback_language = 'en'
        if config is not None and config.has_option('Language', 'fallback_language'):
            self.fallback_language = config.get('Language', 'fallback_language') or 'en'

        saved_language = ''
        if config is not None and config.has_option('Language', 'current_language'):
            saved_language = config.get('Language', 'current_language').strip()

        self.load_translations()

        if saved_language and saved_language in self.translations:
            self.current_language = saved_language
        else:
            self.current_language = self.detect_system_language()
            if self.current_language not in self.translations:
                self.current_language = self.fallback_language

    def detect_system_language(self):
        """
        检测系统语言并返回对应的语言代码

        Returns:
            str: 语言代码（如 'en', 'zh_cn'）
        """
        try:
            system_locale = locale.getlocale()[0]
        except ValueError:
            system_locale = None

        candidates = [system_locale or '', os.getenv('LANG', '')]
        for candidate in candidates:
            value = candidate.lower()
            if value.startswith('zh'):
                return 'zh_cn'
            if value.startswith('en'):
                return 'en'
        return 'en'

    def _locales_paths(self):
        if self.locales_dir:
            return [self.locales_dir]
        paths = []
        # PyInstaller 打包后的临时目录 / PyInstaller bundle directory
        if hasattr(sys, '_MEIPASS'):
            paths.append(os.path.join(sys._MEIPASS, LOCALES_DIR_NAME))
        paths.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), LOCALES_DIR_NAME))
        return paths

    def load_translations(self):
        """从 locales 目录加载所有可用的翻译文件 / Load every translation file found"""
        for locales_dir in self._locales_paths():
            if not os.path.isdir(locales_dir):
                continue
            for file in sorted(os.listdir(locales_dir)):
                if not file.endswith('.json'):
                    continue
                lang_code = file[:-5]
                try:
                    with open(os.path.join(locales_dir, file), 'r', encoding='utf-8') as f:
                        self.translations[lang_code] = json.load(f)
                except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                    logger.warning("Failed to load translation file %s: %s", file, e)

    def _lookup(self, lang_code, keys):
        value = self.translations.get(lang_code, {})
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return value

    def get(self, key, fallback=None, **kwargs):
        """
        获取翻译文本，支持回退语言和格式化

        Args:
            key (str): 翻译键，支持点分隔的嵌套键（如 'menu.title'）
            fallback (str, optional): 当翻译不存在时的回退文本
            **kwargs: 用于格式化翻译文本的参数

        Returns:
            str: 翻译后的文本
        """
        keys = key.split('.')
        for lang_code in (self.current_language, self.fallback_language):
            value = self._lookup(lang_code, keys)
            if value is not None and not isinstance(value, dict):
                text = str(value)
                if kwargs:
                    try:
                        text = text.format(**kwargs)
                    except (KeyError, IndexError) as e:
                        logger.warning("Missing format argument %s for translation key %s", e, key)
                return text

        return fallback if fallback is not None else key

    def set_language(self, lang_code):
        """设置当前语言，语言不存在时返回 False / Set current language"""
        if lang_code in self.translations:
            self.current_language = lang_code
            return True
        return False

    def get_available_languages(self):
        """获取所有已加载的语言代码 / Get all loaded language codes"""
        return sorted(self.translations.keys())
