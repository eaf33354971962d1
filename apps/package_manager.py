# PACKL v1.0 - Install / uninstall / update pipeline
import logging
import shlex
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

import config
from apps.archive_installer import ArchiveInstaller
from apps.dependencies import install_dependencies
from apps.executable_installer import ExecutableInstaller
from apps.manifest import PackageType
from apps.manifest_loader import fetch_manifest
from apps.portable_installer import PortableInstaller
from cli.ui import show_step, show_step_detail, show_info, show_warning, show_error
from utils import aliases
from utils.audit_logger import AuditEventType, get_audit_logger
from utils.checksum import enforce_checksum
from utils.downloader import create_session, download_file, discard_download
from utils.errors import PacklError
from utils.installer_detection import InstallerType, detect_installer_type
from utils.process_runner import run_installer
from utils.registry import InstalledProgram, find_installed_program, parse_uninstall_command
from utils.silent_args import Action, get_silent_arguments, merge_arguments
from utils.system import is_windows
from utils.validation import validate_package_name

_log = logging.getLogger(__name__)

INSTALLERS = {
    PackageType.EXECUTABLE: ExecutableInstaller,
    PackageType.ZIP: ArchiveInstaller,
    PackageType.PORTABLE: PortableInstaller,
}


class PipelineState(Enum):
    FETCHING_MANIFEST = "fetching manifest"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    RESOLVING_DEPENDENCIES = "resolving dependencies"
    INSTALLING = "installing"
    LOCATING_UNINSTALLER = "locating uninstaller"
    UNINSTALLING = "uninstalling"
    DONE = "done"
    FAILED = "failed"


@dataclass
class InstallResult:
    package: str
    version: Optional[str]
    app_folder: Path
    dependencies: List[str] = field(default_factory=list)
    alias: Optional[Path] = None


@dataclass
class UninstallResult:
    package: str
    # 'not_installed', 'folder_removed' or 'uninstaller'
    method: str
    program: Optional[InstalledProgram] = None


@dataclass
class UpdateResult:
    package: str
    install: InstallResult
    uninstall: Optional[UninstallResult] = None
    uninstall_error: Optional[PacklError] = None


class PackageManager:
    '''
    Runs the install, uninstall and update pipelines for one package at a time
    '''

    def __init__(self, session=None, apps_dir=None, aliases_dir=None, downloads_dir=None,
                 timeout=None, cancel_event=None, strict_update=None, update_path=None,
                 audit_logger=None):
        self.session = session or create_session()
        self.apps_dir = Path(apps_dir or config.APPS_DIR)
        self.aliases_dir = Path(aliases_dir or config.ALIASES_DIR)
        self.downloads_dir = Path(downloads_dir or config.DOWNLOADS_DIR)
        self.timeout = timeout if timeout is not None else config.INSTALL_TIMEOUT
        self.cancel_event = cancel_event
        self.strict_update = config.STRICT_UPDATE if strict_update is None else strict_update
        self.update_path = is_windows() if update_path is None else update_path
        self.audit = audit_logger or get_audit_logger()
        self.state = None
        self.history = []

    def _enter(self, state):
        self.state = state
        self.history.append(state)
        _log.debug("State -> %s", state.value)

    def _fail(self, error, package, event_type, details=None):
        if error.package is None:
            error.package = package
        if error.step is None and self.state is not None:
            error.step = self.state.value
        self._enter(PipelineState.FAILED)
        _log.error("%s failed: %s", event_type.value, error)
        self.audit.log_event(event_type, package, False, dict(details or {}, error=str(error)))

    # ── Install ──────────────────────────────────────────────────────────

    def install(self, package_name):
        '''Fetch, verify and install a package with its dependencies'''
        package_name = validate_package_name(package_name)
        self.history = []
        try:
            result = self._install(package_name)
        except PacklError as e:
            self._fail(e, package_name, AuditEventType.INSTALL)
            raise

        self._enter(PipelineState.DONE)
        self.audit.log_event(AuditEventType.INSTALL, package_name, True, {
            'version': result.version,
            'dependencies': result.dependencies,
            'app_folder': str(result.app_folder),
        })
        return result

    def _install(self, package_name):
        app_folder = self.apps_dir / package_name

        self._enter(PipelineState.FETCHING_MANIFEST)
        manifest = fetch_manifest(package_name, self.session)
        show_step(f"Manifest loaded: {package_name} {manifest.version or ''}".rstrip())

        self._enter(PipelineState.DOWNLOADING)
        artifact = download_file(manifest.url, self.session, self.downloads_dir, cancel_event=self.cancel_event)
        show_step(f"Downloaded {artifact.name}")

        self._enter(PipelineState.VERIFYING)
        enforce_checksum(artifact, manifest.hash, package=package_name, step="verify")
        show_step("Checksum valid")

        try:
            self._enter(PipelineState.RESOLVING_DEPENDENCIES)
            installed_deps = install_dependencies(
                manifest, self.session, self.downloads_dir,
                timeout=self.timeout, cancel_event=self.cancel_event,
                audit_logger=self.audit,
            )
            if installed_deps:
                show_step(f"{len(installed_deps)} dependencies installed")

            self._enter(PipelineState.INSTALLING)
            installer = INSTALLERS[manifest.type](manifest)
            installed_file = installer.install(artifact, app_folder, timeout=self.timeout,
                                               cancel_event=self.cancel_event)
            show_step(f"Installed into {app_folder}")
        finally:
            leftover = discard_download(artifact)
            if leftover:
                show_warning(f"Could not delete {leftover}, remove it manually")

        alias = self._register_alias(package_name, installer.executable_path(app_folder, installed_file))

        return InstallResult(
            package=package_name,
            version=manifest.version,
            app_folder=app_folder,
            dependencies=installed_deps,
            alias=alias,
        )

    def _register_alias(self, package_name, executable):
        '''Alias and PATH problems are reported but do not fail an install that succeeded'''
        if not executable.is_file():
            show_warning(f"No executable at {executable}, no alias created for {package_name}")
            return None

        try:
            alias = aliases.create_alias(package_name, executable, self.aliases_dir)
            show_step_detail(f"Alias '{package_name}' -> {executable}")
            if self.update_path and aliases.register_path(self.aliases_dir):
                show_step_detail(f"Added {self.aliases_dir} to user PATH")
        except (PacklError, OSError) as e:
            show_warning(f"Alias for {package_name} not registered: {e}")
            _log.warning("Alias registration for %s failed: %s", package_name, e)
            return None
        return alias

    # ── Uninstall ────────────────────────────────────────────────────────

    def uninstall(self, package_name):
        '''Remove a package, through its registered uninstaller when it has one'''
        package_name = validate_package_name(package_name)
        self.history = []
        try:
            result = self._uninstall(package_name)
        except PacklError as e:
            self._fail(e, package_name, AuditEventType.UNINSTALL)
            raise

        self._enter(PipelineState.DONE)
        if result.method != 'not_installed':
            self.audit.log_event(AuditEventType.UNINSTALL, package_name, True, {'method': result.method})
        return result

    def _uninstall(self, package_name):
        app_folder = self.apps_dir / package_name
        if not app_folder.exists():
            show_info(f"Package {package_name} is not installed")
            return UninstallResult(package=package_name, method='not_installed')

        self._enter(PipelineState.LOCATING_UNINSTALLER)
        program = find_installed_program(package_name)

        if program is None:
            show_step("No registered uninstaller, removing app folder")
            self._remove_folder(app_folder, package_name)
            aliases.remove_alias(package_name, self.aliases_dir)
            show_step(f"Removed {app_folder}")
            return UninstallResult(package=package_name, method='folder_removed')

        show_step(f"Found {program.display_name or package_name} {program.display_version or ''}".rstrip())

        self._enter(PipelineState.UNINSTALLING)
        try:
            command = parse_uninstall_command(program.uninstall_string)
        except ValueError as e:
            raise PacklError(str(e), package=package_name, step="parse uninstall command") from e

        if command.is_msi:
            installer_type = InstallerType.MSI
        else:
            installer_type = detect_installer_type(command.target)

        arguments = get_silent_arguments(installer_type, Action.UNINSTALL)
        if command.arguments:
            arguments = merge_arguments(arguments, shlex.split(command.arguments, posix=False))

        run_installer(command.target, arguments, Action.UNINSTALL, installer_type,
                      timeout=self.timeout, cancel_event=self.cancel_event)
        show_step("Uninstaller finished")

        if app_folder.exists():
            self._remove_folder(app_folder, package_name)
            show_step_detail(f"Removed leftover files in {app_folder}")
        aliases.remove_alias(package_name, self.aliases_dir)

        return UninstallResult(package=package_name, method='uninstaller', program=program)

    def _remove_folder(self, folder, package_name):
        try:
            shutil.rmtree(folder)
        except OSError as e:
            raise PacklError(f"Could not remove {folder}: {e}; delete it manually",
                             package=package_name, step="remove files") from e

    # ── Update ───────────────────────────────────────────────────────────

    def update(self, package_name):
        '''Uninstall then install.
        An uninstall failure is reported and the install still runs, unless strict_update is set.
        '''
        package_name = validate_package_name(package_name)

        uninstall_result = None
        uninstall_error = None
        try:
            uninstall_result = self.uninstall(package_name)
        except PacklError as e:
            if self.strict_update:
                self.audit.log_event(AuditEventType.UPDATE, package_name, False, {'error': str(e)})
                raise
            uninstall_error = e
            show_error(f"Uninstall failed: {e}")
            show_warning("Continuing with install")

        try:
            install_result = self.install(package_name)
        except PacklError as e:
            self.audit.log_event(AuditEventType.UPDATE, package_name, False, {'error': str(e)})
            raise

        self.audit.log_event(AuditEventType.UPDATE, package_name, uninstall_error is None, {
            'version': install_result.version,
            'uninstall_error': str(uninstall_error) if uninstall_error else None,
        })
        return UpdateResult(
            package=package_name,
            install=install_result,
            uninstall=uninstall_result,
            uninstall_error=uninstall_error,
        )
