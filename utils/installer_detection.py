# PACKL v1.0 - Installer technology detection
import logging
import os
import re
from enum import Enum
from pathlib import Path

from utils.errors import NotFoundError

_log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MIN_STRING_LENGTH = 4


class InstallerType(Enum):
    """Silent-install convention family of an installer"""
    UNKNOWN = "Unknown"
    MSI = "MSI"
    INNO_SETUP = "InnoSetup"
    NSIS = "NSIS"
    INSTALL_SHIELD = "InstallShield"
    WISE = "Wise"


# Checked in this order against each string
SIGNATURES = [
    (("Inno Setup",), InstallerType.INNO_SETUP),
    (("Nullsoft", "NSIS"), InstallerType.NSIS),
    (("InstallShield",), InstallerType.INSTALL_SHIELD),
    (("Wise",), InstallerType.WISE),
]


_PRINTABLE_RUN = re.compile(rb'[\x20-\x7e]+')


def extract_ascii_strings(file_path, min_length=MIN_STRING_LENGTH, chunk_size=CHUNK_SIZE):
    '''Yield printable ASCII runs (bytes 32-126) of at least min_length, in file order.
    The file is read in chunks; a run crossing a chunk boundary is yielded once.
    '''
    carry = b''

    with open(file_path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break

            data = carry + chunk
            carry = b''
            for match in _PRINTABLE_RUN.finditer(data):
                run = match.group()
                if match.end() == len(data):
                    # May continue in the next chunk
                    carry = run
                    break
                if len(run) >= min_length:
                    yield run.decode('ascii')

    if len(carry) >= min_length:
        yield carry.decode('ascii')


def match_signature(text):
    '''Return the InstallerType whose signature occurs in text, or None'''
    for needles, installer_type in SIGNATURES:
        if any(needle in text for needle in needles):
            return installer_type
    return None


def detect_installer_type(file_path):
    '''Detect which installer technology produced the file.
    This is a heuristic over embedded strings, not a parser.
    '''
    file_path = Path(file_path)
    if not file_path.is_file():
        raise NotFoundError(file_path, step="detect installer")

    if file_path.suffix.lower() == '.msi':
        _log.info("%s: MSI (by extension)", file_path)
        return InstallerType.MSI

    for text in extract_ascii_strings(file_path):
        installer_type = match_signature(text)
        if installer_type is not None:
            _log.info("%s: %s (matched '%s')", file_path, installer_type.value, text[:80])
            return installer_type

    _log.info("%s: no installer signature found (%d bytes)", file_path, os.path.getsize(file_path))
    return InstallerType.UNKNOWN
