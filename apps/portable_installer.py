# PACKL v1.0
import logging
import shutil
from pathlib import Path

from apps.installer_base import BaseInstaller
from utils.errors import PacklError

_log = logging.getLogger(__name__)


class PortableInstaller(BaseInstaller):
    """Copies a standalone executable into the app folder, byte for byte."""

    def install(self, artifact_path, app_folder, timeout=None, cancel_event=None):
        app_folder = Path(app_folder)
        app_folder.mkdir(parents=True, exist_ok=True)

        destination = app_folder / Path(artifact_path).name
        try:
            shutil.copyfile(artifact_path, destination)
        except OSError as e:
            raise PacklError(f"Could not copy {artifact_path} to {destination}: {e}",
                             package=self.package_name, step="copy") from e

        _log.info("%s: copied %s to %s", self.package_name, artifact_path, destination)
        return destination
