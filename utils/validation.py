# PACKL v1.0 - Input validation and sanitization
import re


def validate_package_name(name):
    '''Validate and sanitize a package identifier.
    The name becomes a URL segment, a folder name and an alias file name.
    Returns sanitized name or raises ValueError.
    '''
    if not name or not isinstance(name, str):
        raise ValueError("Package name is required")

    name = name.strip()

    if len(name) > 128:
        raise ValueError("Package name too long (max 128 chars)")

    # Block path traversal
    if '..' in name or '/' in name or '\\' in name:
        raise ValueError("Invalid characters in package name")

    if not re.match(r'^[a-zA-Z0-9][a-zA-Z0-9_.+-]*$', name):
        raise ValueError("Package name must start with alphanumeric and contain only letters, digits, _, ., +, -")

    return name


def validate_filename(filename):
    '''Validate a filename taken from a download URL (no path traversal).
    Returns filename or raises ValueError.
    '''
    if not filename or not isinstance(filename, str):
        raise ValueError("Filename is required")

    filename = filename.strip()

    # Block path traversal
    if filename in ('.', '..') or '/' in filename or '\\' in filename:
        raise ValueError("Invalid filename")

    # Block null bytes and characters Windows rejects in file names
    if '\x00' in filename or any(c in filename for c in '<>:"|?*'):
        raise ValueError("Invalid filename")

    return filename
