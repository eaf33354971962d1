# PACKL v1.0 - Command aliases and user PATH
import logging
import subprocess
from pathlib import Path

import config
from utils.errors import PacklError

_log = logging.getLogger(__name__)


def create_alias(alias, executable_path, aliases_dir=None):
    '''Write <alias>.bat forwarding all arguments to the executable'''
    executable_path = Path(executable_path)
    if not executable_path.is_file():
        raise PacklError(f"Executable {executable_path} not found, no alias created", package=alias, step="alias")

    aliases_dir = Path(aliases_dir or config.ALIASES_DIR)
    aliases_dir.mkdir(parents=True, exist_ok=True)

    batch_file = aliases_dir / f"{alias}.bat"
    batch_file.write_text(f'@echo off\n"{executable_path}" %*\n', encoding='utf-8')
    _log.info("Alias %s -> %s", batch_file, executable_path)
    return batch_file


def remove_alias(alias, aliases_dir=None):
    '''Delete <alias>.bat; returns True if it existed'''
    batch_file = Path(aliases_dir or config.ALIASES_DIR) / f"{alias}.bat"
    try:
        batch_file.unlink()
    except FileNotFoundError:
        return False
    _log.info("Removed alias %s", batch_file)
    return True


def split_path(value):
    return [entry for entry in (value or '').split(';') if entry]


def ensure_path_entry(entries, entry):
    '''Return entries with entry appended unless already present (case-insensitive).
    Pure: the caller decides whether and where to persist the result.
    '''
    entry = str(entry)
    normalized = entry.rstrip('\\').lower()
    if any(e.rstrip('\\').lower() == normalized for e in entries):
        return list(entries)
    return list(entries) + [entry]


def _powershell(script):
    try:
        result = subprocess.run(
            ['powershell', '-NoProfile', '-ExecutionPolicy', 'Bypass', '-Command', script],
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='ignore'
        )
    except OSError as e:
        raise PacklError(f"Cannot run PowerShell: {e}", step="PATH") from e

    if result.returncode != 0:
        raise PacklError(f"PowerShell failed ({result.returncode}): {(result.stderr or '').strip()}", step="PATH")
    return (result.stdout or '').strip()


def read_user_path():
    '''Current user-level PATH entries'''
    return split_path(_powershell("[Environment]::GetEnvironmentVariable('PATH', 'User')"))


def write_user_path(entries):
    value = ';'.join(entries).replace("'", "''")
    _powershell(f"[Environment]::SetEnvironmentVariable('PATH', '{value}', 'User')")


def register_path(entry):
    '''Make sure entry is on the user PATH; returns True if PATH changed'''
    current = read_user_path()
    updated = ensure_path_entry(current, entry)
    if updated == current:
        _log.info("%s already on user PATH", entry)
        return False

    write_user_path(updated)
    _log.info("Added %s to user PATH", entry)
    return True
