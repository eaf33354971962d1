# PACKL v1.0
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables (.env in the working directory, if any)
load_dotenv()

DEFAULT_MANIFEST_URL = "https://raw.githubusercontent.com/duhsoares21/packably/main/packages/"


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_float(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got '{value}'")


# Central directory for all PACKL data files
PACKL_HOME = Path(os.getenv('PACKL_HOME') or Path.home() / 'packl')
APPS_DIR = PACKL_HOME / 'apps'
ALIASES_DIR = APPS_DIR / '.aliases'
DOWNLOADS_DIR = Path(os.getenv('PACKL_DOWNLOADS_DIR') or Path.home() / 'Downloads')
LOG_FILE = PACKL_HOME / 'packl.log'
AUDIT_LOG_DIR = PACKL_HOME / 'audit'

MANIFEST_URL = os.getenv('PACKL_MANIFEST_URL') or DEFAULT_MANIFEST_URL
USER_AGENT = os.getenv('PACKL_USER_AGENT') or 'Packl-App/1.0'
REQUEST_TIMEOUT = _env_float('PACKL_REQUEST_TIMEOUT', 30.0)

# None = wait for the installer as long as it takes
INSTALL_TIMEOUT = _env_float('PACKL_INSTALL_TIMEOUT', None)

STRICT_UPDATE = _env_bool('PACKL_STRICT_UPDATE', False)
AUDIT_ENABLED = _env_bool('PACKL_AUDIT', True)


def ensure_dirs():
    '''Create the PACKL directories if missing'''
    for directory in (PACKL_HOME, APPS_DIR, ALIASES_DIR, DOWNLOADS_DIR):
        directory.mkdir(parents=True, exist_ok=True)
