# PACKL v1.0
import logging
import zipfile
from pathlib import Path

from apps.installer_base import BaseInstaller
from utils.errors import PacklError

_log = logging.getLogger(__name__)


def _safe_members(archive, destination):
    '''Reject entries that would land outside destination'''
    root = destination.resolve()
    for member in archive.infolist():
        target = (destination / member.filename).resolve()
        if target != root and root not in target.parents:
            raise PacklError(f"Archive entry escapes the install folder: {member.filename}")
        yield member


class ArchiveInstaller(BaseInstaller):
    """Extracts a zip package into the app folder."""

    def install(self, artifact_path, app_folder, timeout=None, cancel_event=None):
        app_folder = Path(app_folder)
        app_folder.mkdir(parents=True, exist_ok=True)

        try:
            with zipfile.ZipFile(artifact_path) as archive:
                members = list(_safe_members(archive, app_folder))
                archive.extractall(app_folder, members=members)
        except zipfile.BadZipFile as e:
            raise PacklError(f"{artifact_path} is not a valid zip archive: {e}",
                             package=self.package_name, step="extract") from e
        except OSError as e:
            raise PacklError(f"Could not extract {artifact_path} into {app_folder}: {e}",
                             package=self.package_name, step="extract") from e

        _log.info("%s: extracted %d entries into %s", self.package_name, len(members), app_folder)
        return None
