# PACKL v1.0 - Dependency installation
import logging

from apps.manifest_loader import fetch_manifest
from cli.ui import show_step, show_step_detail, show_warning
from utils.audit_logger import AuditEventType
from utils.checksum import enforce_checksum
from utils.downloader import download_file, discard_download
from utils.errors import PacklError
from utils.installer_detection import detect_installer_type
from utils.process_runner import run_installer
from utils.silent_args import Action, get_silent_arguments

_log = logging.getLogger(__name__)


def is_url(entry):
    return entry.lower().startswith(('http://', 'https://'))


def _acquire(entry, session, downloads_dir, cancel_event):
    '''Download a dependency; package identifiers are verified against their manifest'''
    if is_url(entry):
        show_step_detail(f"Downloading {entry}")
        _log.warning("Dependency %s is a plain URL, no checksum to verify", entry)
        return download_file(entry, session, downloads_dir, cancel_event=cancel_event)

    dep_manifest = fetch_manifest(entry, session)
    show_step_detail(f"Downloading {entry} {dep_manifest.version or ''}".rstrip())
    artifact = download_file(dep_manifest.url, session, downloads_dir, cancel_event=cancel_event)
    enforce_checksum(artifact, dep_manifest.hash, package=entry, step="verify dependency")
    return artifact


def install_dependency(entry, session, downloads_dir=None, timeout=None, cancel_event=None):
    '''Download, classify and silently run one dependency, then delete its artifact'''
    artifact = _acquire(entry, session, downloads_dir, cancel_event)
    try:
        installer_type = detect_installer_type(artifact)
        arguments = get_silent_arguments(installer_type, Action.INSTALL_DEPENDENCY)
        run_installer(artifact, arguments, Action.INSTALL_DEPENDENCY, installer_type,
                      timeout=timeout, cancel_event=cancel_event)
    finally:
        leftover = discard_download(artifact)
        if leftover:
            show_warning(f"Could not delete {leftover}, remove it manually")
    return artifact


def install_dependencies(manifest, session, downloads_dir=None, timeout=None, cancel_event=None,
                         audit_logger=None):
    '''Install the manifest's dependencies in declared order, one at a time.
    The first failure propagates and stops the rest (nothing is rolled back).
    '''
    if not manifest.dependencies:
        show_step_detail("No dependencies")
        return []

    installed = []
    total = len(manifest.dependencies)
    for index, entry in enumerate(manifest.dependencies, 1):
        show_step(f"Dependency {index}/{total}: {entry}", "active")
        try:
            install_dependency(entry, session, downloads_dir, timeout=timeout, cancel_event=cancel_event)
        except PacklError as e:
            if audit_logger:
                audit_logger.log_event(AuditEventType.INSTALL_DEPENDENCY, manifest.name, False,
                                       {'dependency': entry, 'error': str(e)})
            raise
        if audit_logger:
            audit_logger.log_event(AuditEventType.INSTALL_DEPENDENCY, manifest.name, True,
                                   {'dependency': entry})
        installed.append(entry)
        show_step_detail(f"{entry} installed")

    _log.info("%s: %d dependencies installed", manifest.name, len(installed))
    return installed
