# PACKL v1.0 - Installer execution
import logging
import re
import subprocess
import time
from pathlib import Path

from utils.errors import (
    NotFoundError, SubprocessFailureError, InstallerTimeoutError, OperationCancelledError, PacklError
)
from utils.installer_detection import InstallerType
from utils.progress import ProgressMonitor
from utils.silent_args import Action

_log = logging.getLogger(__name__)

POLL_INTERVAL = 0.5

MSI_PRODUCT_CODE = re.compile(r'^\{[0-9A-Fa-f-]{36}\}$')

SUCCESS_MESSAGES = {
    Action.INSTALL: "App installed successfully",
    Action.UNINSTALL: "App uninstalled successfully",
    Action.INSTALL_DEPENDENCY: "Dependency installed successfully",
}


def is_msi_product_code(target):
    '''True for "{XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX}" style MSI product codes'''
    return bool(MSI_PRODUCT_CODE.match(str(target)))


def _ps_quote(value):
    '''Single-quoted PowerShell string literal'''
    return "'" + str(value).replace("'", "''") + "'"


def build_command(installer_path, arguments, action, installer_type):
    '''Command line for an installer run.
    MSI goes through msiexec as a raw command string so property quoting survives;
    everything else is started elevated through PowerShell Start-Process -Verb RunAs.
    '''
    if installer_type is InstallerType.MSI:
        switch = '/x' if action is Action.UNINSTALL else '/i'
        target = installer_path if is_msi_product_code(installer_path) else f'"{installer_path}"'
        return f"msiexec.exe {switch} {target} {arguments}".strip()

    working_dir = Path(installer_path).parent
    script = f"$p = Start-Process -FilePath {_ps_quote(installer_path)}"
    if arguments:
        script += f" -ArgumentList {_ps_quote(arguments)}"
    script += f" -WorkingDirectory {_ps_quote(working_dir)} -Verb RunAs -Wait -PassThru; exit $p.ExitCode"

    return ['powershell', '-NoProfile', '-ExecutionPolicy', 'Bypass', '-Command', script]


def _terminate(process):
    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def _wait(process, timeout, cancel_event, installer_path):
    deadline = time.monotonic() + timeout if timeout else None

    while True:
        try:
            return process.wait(timeout=POLL_INTERVAL)
        except subprocess.TimeoutExpired:
            pass

        if cancel_event is not None and cancel_event.is_set():
            _terminate(process)
            raise OperationCancelledError(f"Installer run cancelled: {installer_path}")

        if deadline is not None and time.monotonic() >= deadline:
            _terminate(process)
            raise InstallerTimeoutError(f"Installer did not finish within {timeout:g}s: {installer_path}")


def run_installer(installer_path, arguments, action, installer_type, timeout=None, cancel_event=None):
    '''Run an installer or uninstaller silently and wait for it.
    Returns 0; any other exit code raises SubprocessFailureError.
    '''
    is_product_code = installer_type is InstallerType.MSI and is_msi_product_code(installer_path)
    if not is_product_code and not Path(installer_path).is_file():
        raise NotFoundError(installer_path, f"Installer not found at {installer_path}", step=action.label)

    command = build_command(installer_path, arguments, action, installer_type)
    working_dir = None if is_product_code else str(Path(installer_path).parent)

    _log.info("%s: %s (%s) args=%r", action.label, installer_path, installer_type.value, arguments)

    with ProgressMonitor(f"Running {Path(str(installer_path)).name} ({installer_type.value})") as monitor:
        try:
            process = subprocess.Popen(command, cwd=working_dir)
        except FileNotFoundError as e:
            raise NotFoundError(e.filename or command, f"Cannot launch installer: {e}", step=action.label) from e
        except OSError as e:
            raise PacklError(f"Cannot launch {installer_path}: {e}", step=action.label) from e

        exit_code = _wait(process, timeout, cancel_event, installer_path)
        monitor.set_exit_code(exit_code)

    if exit_code != 0:
        _log.error("%s failed: %s exit code %d", action.label, installer_path, exit_code)
        raise SubprocessFailureError(installer_path, exit_code, action, step=action.label)

    _log.info("%s: %s", SUCCESS_MESSAGES[action], installer_path)
    return exit_code
