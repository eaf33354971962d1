# PACKL v1.0 - Download verification
import hashlib
import logging
from pathlib import Path

from utils.errors import NotFoundError, ChecksumMismatchError

_log = logging.getLogger(__name__)

BLOCK_SIZE = 64 * 1024


def compute_sha256(file_path, block_size=BLOCK_SIZE):
    '''SHA-256 of a file as lowercase hex, read in blocks'''
    digest = hashlib.sha256()
    with open(file_path, 'rb') as f:
        for block in iter(lambda: f.read(block_size), b''):
            digest.update(block)
    return digest.hexdigest()


def _compare(file_path, expected_hash):
    file_path = Path(file_path)
    if not file_path.is_file():
        raise NotFoundError(file_path, step="verify checksum")

    actual = compute_sha256(file_path)
    expected = (expected_hash or '').strip().lower()

    _log.info("Checksum %s expected=%s actual=%s", file_path.name, expected, actual)
    return actual == expected, actual


def verify_checksum(file_path, expected_hash):
    '''Compare the file's SHA-256 against the manifest hash (case-insensitive)'''
    return _compare(file_path, expected_hash)[0]


def enforce_checksum(file_path, expected_hash, package=None, step="verify checksum"):
    '''Verification gate: on mismatch the file is deleted and ChecksumMismatchError raised'''
    matches, actual = _compare(file_path, expected_hash)
    if matches:
        return

    error = ChecksumMismatchError(file_path, expected_hash, actual, package=package, step=step)
    try:
        Path(file_path).unlink()
        error.message += "; the file was deleted"
    except OSError as e:
        _log.warning("Could not delete %s after checksum mismatch: %s", file_path, e)
        error.message += f"; delete {file_path} manually"
    raise error
