# PACKL v1.0
import logging

from apps.installer_base import BaseInstaller
from utils.installer_detection import detect_installer_type
from utils.process_runner import run_installer
from utils.silent_args import Action, get_silent_arguments, merge_arguments

_log = logging.getLogger(__name__)


class ExecutableInstaller(BaseInstaller):
    """Runs a setup program (MSI, Inno Setup, NSIS, ...) silently."""

    def install(self, artifact_path, app_folder, timeout=None, cancel_event=None):
        installer_type = detect_installer_type(artifact_path)
        arguments = get_silent_arguments(installer_type, Action.INSTALL, app_folder)
        arguments = merge_arguments(arguments, self.manifest.install_args)

        _log.info("%s: %s installer, arguments %s", self.package_name, installer_type.value, arguments)
        run_installer(artifact_path, arguments, Action.INSTALL, installer_type,
                      timeout=timeout, cancel_event=cancel_event)
        return None
