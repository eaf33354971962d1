# PACKL v1.0
import ctypes
import platform


def get_platform():
    '''Detect platform (linux/windows/darwin)'''
    return platform.system().lower()


def is_windows():
    '''Check if running on Windows'''
    return get_platform() == 'windows'


def is_admin():
    '''Check if the current process is elevated (Windows only)'''
    if not is_windows():
        return False
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except (AttributeError, OSError):
        return False
