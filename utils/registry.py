# PACKL v1.0 - Installed programs lookup (Windows uninstall registry)
import json
import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from utils.errors import RegistryQueryError

_log = logging.getLogger(__name__)

# 32-bit programs on 64-bit Windows
UNINSTALL_KEY = r'HKLM:Software\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall\*'

QUERY_TIMEOUT = 60

_MSIEXEC = re.compile(r'^\s*"?(?:[a-z]:\\[^"]*\\)?msiexec(?:\.exe)?"?\s', re.IGNORECASE)
_PRODUCT_CODE = re.compile(r'\{[0-9A-Fa-f-]{36}\}')
_EXE_PATH = re.compile(r'^(.*?\.exe)(?=\s|$)(.*)$', re.IGNORECASE)


@dataclass(frozen=True)
class InstalledProgram:
    display_name: Optional[str] = None
    display_version: Optional[str] = None
    publisher: Optional[str] = None
    install_location: Optional[str] = None
    install_date: Optional[str] = None
    uninstall_string: Optional[str] = None

    @classmethod
    def from_registry(cls, entry):
        return cls(
            display_name=entry.get('DisplayName'),
            display_version=entry.get('DisplayVersion'),
            publisher=entry.get('Publisher'),
            install_location=entry.get('InstallLocation'),
            install_date=entry.get('InstallDate'),
            uninstall_string=entry.get('UninstallString'),
        )


@dataclass(frozen=True)
class UninstallCommand:
    target: str
    arguments: str = ''
    is_msi: bool = False


def _ps_like_literal(value):
    '''Escape a value for use inside a single-quoted -like pattern'''
    value = value.replace("'", "''")
    return re.sub(r'([\[\]*?`])', r'`\1', value)


def build_query(package_name):
    '''PowerShell pipeline listing uninstall entries that mention the package'''
    return (
        f"Get-ItemProperty '{UNINSTALL_KEY}' "
        f"| Where-Object {{ $_.UninstallString -like '*{_ps_like_literal(package_name)}*' }} "
        "| Select-Object DisplayName, DisplayVersion, Publisher, InstallLocation, InstallDate, UninstallString "
        "| ConvertTo-Json -Compress"
    )


def find_installed_program(package_name):
    '''Look up the uninstall entry for a package.
    Returns None when nothing matches; a failing query raises RegistryQueryError.
    '''
    command = ['powershell', '-NoProfile', '-ExecutionPolicy', 'Bypass', '-Command', build_query(package_name)]

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='ignore',
            timeout=QUERY_TIMEOUT
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise RegistryQueryError(f"Installed programs query failed: {e}", package=package_name, step="registry lookup") from e

    if result.returncode != 0:
        raise RegistryQueryError(
            f"Installed programs query exited with {result.returncode}: {(result.stderr or '').strip()}",
            package=package_name, step="registry lookup"
        )

    if result.stderr and result.stderr.strip():
        _log.warning("Registry query stderr for %s: %s", package_name, result.stderr.strip())

    output = (result.stdout or '').strip()
    if not output:
        _log.info("No uninstall entry for %s", package_name)
        return None

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise RegistryQueryError(f"Unreadable registry query output: {e}", package=package_name, step="registry lookup") from e

    entries = data if isinstance(data, list) else [data]
    entries = [e for e in entries if isinstance(e, dict)]
    if not entries:
        return None

    if len(entries) > 1:
        _log.warning(
            "%d uninstall entries match %s, using '%s' (others: %s)",
            len(entries), package_name, entries[0].get('DisplayName'),
            ', '.join(str(e.get('DisplayName')) for e in entries[1:])
        )

    program = InstalledProgram.from_registry(entries[0])
    _log.info("Found %s %s: %s", program.display_name, program.display_version, program.uninstall_string)
    return program


def parse_uninstall_command(uninstall_string):
    '''Split a registry UninstallString into target and existing arguments.
    Handles "C:\\path\\unins000.exe" /x, C:\\Program Files\\x\\uninst.exe /S
    and MsiExec.exe /X{GUID}.
    '''
    text = (uninstall_string or '').strip()
    if not text:
        raise ValueError("Empty uninstall string")

    if _MSIEXEC.match(text + ' '):
        code = _PRODUCT_CODE.search(text)
        if not code:
            raise ValueError(f"MSI uninstall string without product code: {text}")
        return UninstallCommand(target=code.group(0), is_msi=True)

    if text.startswith('"'):
        end = text.find('"', 1)
        if end == -1:
            return UninstallCommand(target=text.strip('"'))
        return UninstallCommand(target=text[1:end], arguments=text[end + 1:].strip())

    if Path(text).exists():
        return UninstallCommand(target=text)

    match = _EXE_PATH.match(text)
    if match:
        return UninstallCommand(target=match.group(1), arguments=match.group(2).strip())

    return UninstallCommand(target=text)
