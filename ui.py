"""终端界面呈现层 / Terminal presentation layer

两种可互换的实现，行为一致，只是外观不同：
Two interchangeable implementations that behave identically and only look different:

- PlainPresenter: colorama 彩色文本 + input() 提示 / colorama text and input() prompts
- RichPresenter: rich 面板与对话框 / rich panels and dialog prompts

核心逻辑（路径、备份、重置）不依赖本模块。
The core logic (paths, backups, reset) never depends on this module.
"""

import os
import sys
import logging

from colorama import Fore, Style, init
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table
from rich.text import Text

logger = logging.getLogger(__name__)

# 初始化 colorama 用于彩色终端输出 / Initialize colorama for colored terminal output
init()

EMOJI = {
    "SUCCESS": "✅",
    "ERROR": "❌",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "MENU": "📋",
    "ARROW": "➜",
}

UI_MODES = ("auto", "rich", "plain")

_KIND_STYLES = {
    "info": (Fore.CYAN, EMOJI["INFO"], "cyan"),
    "success": (Fore.GREEN, EMOJI["SUCCESS"], "green"),
    "warning": (Fore.YELLOW, EMOJI["WARNING"], "yellow"),
}


class Presenter:
    """界面接口 / Presentation interface"""

    def __init__(self, translator):
        self.translator = translator

    def _t(self, key, fallback, **kwargs):
        if self.translator is None:
            return fallback.format(**kwargs) if kwargs else fallback
        return self.translator.get(key, fallback=fallback, **kwargs)

    def show_message(self, title, text, kind="info"):
        raise NotImplementedError

    def show_error(self, text):
        raise NotImplementedError

    def confirm(self, text):
        raise NotImplementedError

    def select_option(self, title, options):
        """显示选项并返回用户输入 / Show options and return the raw user input

        Args:
            title: 菜单标题 / Menu title
            options: [(key, label), ...]

        Returns:
            str: 去除首尾空白的输入，由调用方校验 / Stripped input, validated by the caller
        """
        raise NotImplementedError


class PlainPresenter(Presenter):
    """纯文本界面 / Plain text interface"""

    def __init__(self, translator, input_func=input):
        super().__init__(translator)
        self.input = input_func

    def _pause(self):
        self.input(f"{self._t('ui.press_enter', 'Press Enter to continue')}...")

    def show_message(self, title, text, kind="info"):
        color, emoji, _ = _KIND_STYLES.get(kind, _KIND_STYLES["info"])
        print(f"\n{color}{emoji} {title}{Style.RESET_ALL}")
        print(f"{Fore.YELLOW}{'─' * 60}{Style.RESET_ALL}")
        print(text)
        print(f"{Fore.YELLOW}{'─' * 60}{Style.RESET_ALL}")
        self._pause()

    def show_error(self, text):
        print(f"{Fore.RED}{EMOJI['ERROR']} {self._t('ui.error', 'Error')}: {text}{Style.RESET_ALL}")
        self._pause()

    def confirm(self, text):
        print(f"{Fore.YELLOW}{EMOJI['WARNING']}  {text}{Style.RESET_ALL}")
        reply = self.input(f"{self._t('ui.confirm_prompt', 'Do you want to continue? (y/N)')}: ")
        return reply.strip().lower() in ("y", "yes")

    def select_option(self, title, options):
        print(f"\n{Fore.CYAN}{EMOJI['MENU']} {title}:{Style.RESET_ALL}")
        print(f"{Fore.YELLOW}{'─' * 40}{Style.RESET_ALL}")
        for key, label in options:
            print(f"{Fore.GREEN}{key}{Style.RESET_ALL}. {label}")
        print(f"{Fore.YELLOW}{'─' * 40}{Style.RESET_ALL}")
        choices = f"{options[0][0]}-{options[-1][0]}" if options else ""
        choice = self.input(f"\n{EMOJI['ARROW']} {Fore.CYAN}{self._t('menu.input_choice', 'Enter your choice ({choices})', choices=choices)}: {Style.RESET_ALL}")
        return choice.strip()


class RichPresenter(Presenter):
    """rich 对话框界面 / rich dialog interface"""

    def __init__(self, translator, console=None):
        super().__init__(translator)
        self.console = console or Console(highlight=False)

    def show_message(self, title, text, kind="info"):
        _, _, border = _KIND_STYLES.get(kind, _KIND_STYLES["info"])
        self.console.print(Panel(Text(text), title=title, border_style=border))
        Prompt.ask(self._t('ui.press_enter', 'Press Enter to continue'), default="",
                   show_default=False, console=self.console)

    def show_error(self, text):
        self.console.print(Panel(Text(text), title=self._t('ui.error', 'Error'), border_style="red"))
        Prompt.ask(self._t('ui.press_enter', 'Press Enter to continue'), default="",
                   show_default=False, console=self.console)

    def confirm(self, text):
        return Confirm.ask(f"[yellow]{escape(text)}[/yellow]", default=False, console=self.console)

    def select_option(self, title, options):
        table = Table(show_header=False, box=None)
        table.add_column(style="bold green", justify="right")
        table.add_column()
        for key, label in options:
            table.add_row(key, label)
        self.console.print(Panel(table, title=title, border_style="blue"))
        choices = f"{options[0][0]}-{options[-1][0]}" if options else ""
        choice = Prompt.ask(self._t('menu.input_choice', 'Enter your choice ({choices})', choices=choices),
                            console=self.console)
        return choice.strip()


def supports_rich(stdin=None, stdout=None, environ=None):
    """检测终端是否适合 rich 对话框 / Detect whether the terminal can host rich dialogs"""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    environ = os.environ if environ is None else environ
    if environ.get("TERM", "") == "dumb":
        return False
    try:
        return stdin.isatty() and stdout.isatty()
    except (AttributeError, ValueError):
        return False


def choose_presenter(mode, translator):
    """根据配置和终端能力选择界面 / Pick the presenter from the configured mode and terminal capabilities

    Args:
        mode: auto | rich | plain
        translator: 翻译器对象 / Translator object
    """
    mode = (mode or "auto").strip().lower()
    if mode not in UI_MODES:
        logger.warning("Unknown UI mode %r, falling back to plain", mode)
        mode = "plain"
    if mode == "auto":
        mode = "rich" if supports_rich() else "plain"
    logger.debug("Using %s presenter", mode)
    if mode == "rich":
        return RichPresenter(translator)
    return PlainPresenter(translator)
