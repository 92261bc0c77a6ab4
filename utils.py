"""通用工具函数 / Shared helper functions

用户目录定位等与具体业务无关的小工具
Small helpers for locating user directories.
"""

import os
import sys


def get_actual_home_dir(environ=None):
    """获取实际用户的主目录（处理 sudo 情况）/ Get actual user's home directory (handle sudo case)

    Args:
        environ: 环境变量映射，默认为 os.environ / Environment mapping, defaults to os.environ

    Returns:
        str: 主目录路径 / Home directory path
    """
    if environ is None:
        environ = os.environ
    sudo_user = environ.get('SUDO_USER')
    if sudo_user:
        return os.path.join("/home", sudo_user)
    home = environ.get('HOME')
    if home:
        return home
    return os.path.expanduser("~")


def get_user_documents_path():
    """获取用户文档文件夹路径 / Get user Documents folder path

    Returns:
        str: 用户文档文件夹的绝对路径 / Absolute path to user's Documents folder
    """
    if sys.platform == "win32":
        try:
            # 尝试从 Windows 注册表获取文档路径 / Try to get Documents path from Windows registry
            import winreg
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Shell Folders") as key:
                documents_path, _ = winreg.QueryValueEx(key, "Personal")
                return documents_path
        except OSError:
            return os.path.join(os.path.expanduser("~"), "Documents")
    elif sys.platform == "darwin":
        return os.path.join(os.path.expanduser("~"), "Documents")
    else:  # Linux
        return os.path.join(get_actual_home_dir(), "Documents")
