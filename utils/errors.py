# PACKL v1.0 - Error taxonomy


class PacklError(Exception):
    """Base class for every failure reported to the user."""

    def __init__(self, message, package=None, step=None):
        super().__init__(message)
        self.message = message
        self.package = package
        self.step = step

    def __str__(self):
        prefix = []
        if self.package:
            prefix.append(self.package)
        if self.step:
            prefix.append(self.step)
        if prefix:
            return f"[{' / '.join(prefix)}] {self.message}"
        return self.message


class NotFoundError(PacklError):
    """Artifact, installer or file missing."""

    def __init__(self, path, message=None, **kwargs):
        self.path = str(path)
        super().__init__(message or f"File not found: {self.path}", **kwargs)


class ChecksumMismatchError(PacklError):
    """Downloaded artifact does not match the manifest hash."""

    def __init__(self, path, expected, actual, **kwargs):
        self.path = str(path)
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for {self.path} (expected {expected}, got {actual})",
            **kwargs
        )


class SubprocessFailureError(PacklError):
    """Installer or uninstaller exited with a non-zero code."""

    def __init__(self, path, exit_code, action, **kwargs):
        self.path = str(path)
        self.exit_code = exit_code
        self.action = action
        super().__init__(
            f"{action.label} failed with exit code {exit_code}: {self.path}",
            **kwargs
        )


class RegistryQueryError(PacklError):
    """The installed-programs query itself failed (not the same as 'no match')."""


class ManifestError(PacklError):
    """Manifest could not be fetched or is malformed."""


class DownloadError(PacklError):
    """Artifact download failed."""


class InstallerTimeoutError(PacklError):
    """Installer did not finish within the allowed time."""


class OperationCancelledError(PacklError):
    """The operation was cancelled by the caller."""
