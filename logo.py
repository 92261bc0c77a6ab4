# logo.py
# 程序横幅与版本信息 / Banner and version information

from colorama import Fore, Style

version = "2.0.0"

CURSOR_LOGO = f"""
{Fore.CYAN}
   ██████╗██╗   ██╗██████╗ ███████╗ ██████╗ ██████╗     ██╗██████╗
  ██╔════╝██║   ██║██╔══██╗██╔════╝██╔═══██╗██╔══██╗    ██║██╔══██╗
  ██║     ██║   ██║██████╔╝███████╗██║   ██║██████╔╝    ██║██║  ██║
  ██║     ██║   ██║██╔══██╗╚════██║██║   ██║██╔══██╗    ██║██║  ██║
  ╚██████╗╚██████╔╝██║  ██║███████║╚██████╔╝██║  ██║    ██║██████╔╝
   ╚═════╝ ╚═════╝ ╚═╝  ╚═╝╚══════╝ ╚═════╝ ╚═╝  ╚═╝    ╚═╝╚═════╝
{Style.RESET_ALL}"""

CURSOR_DESCRIPTION = f"""
{Fore.YELLOW}        Device ID Reset Tool  {Fore.GREEN}v{version}{Style.RESET_ALL}
"""


def print_logo():
    """打印程序横幅 / Print the program banner"""
    print(CURSOR_LOGO)
    print(CURSOR_DESCRIPTION)
