"""
Tests for the installer execution engine (subprocess launches are faked).
"""

import subprocess

import pytest

from conftest import FakePopen, make_installer
from utils.errors import (
    InstallerTimeoutError,
    NotFoundError,
    OperationCancelledError,
    SubprocessFailureError,
)
from utils.installer_detection import InstallerType
from utils.process_runner import build_command, is_msi_product_code, run_installer
from utils.silent_args import Action

PRODUCT_CODE = "{12345678-ABCD-1234-ABCD-1234567890AB}"


class HangingPopen(FakePopen):
    """Never exits on its own."""

    def wait(self, timeout=None):
        if self.terminated:
            self.returncode = 1
            return self.returncode
        raise subprocess.TimeoutExpired(self.command, timeout)


# ── Command construction ─────────────────────────────────────────────


class TestBuildCommand:
    def test_msi_install(self):
        cmd = build_command(r"C:\dl\app.msi", "/quiet INSTALLDIR=C:\\x", Action.INSTALL, InstallerType.MSI)
        assert cmd == r'msiexec.exe /i "C:\dl\app.msi" /quiet INSTALLDIR=C:\x'

    def test_msi_uninstall_by_product_code(self):
        cmd = build_command(PRODUCT_CODE, "/quiet", Action.UNINSTALL, InstallerType.MSI)
        assert cmd == f"msiexec.exe /x {PRODUCT_CODE} /quiet"

    def test_exe_is_elevated_through_powershell(self):
        cmd = build_command(r"C:\dl\setup.exe", "/VERYSILENT /DIR=C:\\x", Action.INSTALL, InstallerType.INNO_SETUP)
        assert cmd[:5] == ["powershell", "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command"]
        script = cmd[5]
        assert "-Verb RunAs" in script
        assert "-Wait -PassThru" in script
        assert "exit $p.ExitCode" in script
        assert "-ArgumentList '/VERYSILENT /DIR=C:\\x'" in script

    def test_empty_arguments_are_omitted(self):
        script = build_command(r"C:\dl\setup.exe", "", Action.INSTALL, InstallerType.UNKNOWN)[5]
        assert "-ArgumentList" not in script

    def test_single_quotes_are_escaped(self):
        script = build_command(r"C:\O'Brien\setup.exe", "/S", Action.INSTALL, InstallerType.NSIS)[5]
        assert r"-FilePath 'C:\O''Brien\setup.exe'" in script

    def test_product_code_detection(self):
        assert is_msi_product_code(PRODUCT_CODE)
        assert not is_msi_product_code(r"C:\dl\app.msi")


# ── Running ──────────────────────────────────────────────────────────


class TestRunInstaller:
    def test_missing_installer(self, tmp_path, fake_popen):
        with pytest.raises(NotFoundError):
            run_installer(tmp_path / "missing.exe", "/S", Action.INSTALL, InstallerType.NSIS)
        assert fake_popen.launches == []

    def test_success(self, tmp_path, fake_popen):
        installer = make_installer(tmp_path / "setup.exe", "Nullsoft")
        assert run_installer(installer, "/S", Action.INSTALL, InstallerType.NSIS) == 0

        launch = fake_popen.launches[0]
        assert launch.cwd == str(tmp_path)
        assert launch.command[0] == "powershell"

    def test_msi_runs_msiexec_without_elevation(self, tmp_path, fake_popen):
        installer = make_installer(tmp_path / "app.msi")
        run_installer(installer, "/quiet", Action.INSTALL_DEPENDENCY, InstallerType.MSI)

        command = fake_popen.launches[0].command
        assert command.startswith(f'msiexec.exe /i "{installer}"')
        assert "RunAs" not in command

    def test_msi_product_code_skips_file_check(self, fake_popen):
        run_installer(PRODUCT_CODE, "/quiet", Action.UNINSTALL, InstallerType.MSI)
        assert fake_popen.launches[0].cwd is None

    def test_non_zero_exit(self, tmp_path, fake_popen):
        installer = make_installer(tmp_path / "setup.exe")
        fake_popen.exit_codes = [1603]

        with pytest.raises(SubprocessFailureError) as excinfo:
            run_installer(installer, "/S", Action.UNINSTALL, InstallerType.UNKNOWN)

        assert excinfo.value.exit_code == 1603
        assert excinfo.value.action is Action.UNINSTALL
        assert "1603" in str(excinfo.value)
        assert len(fake_popen.launches) == 1

    def test_launcher_missing(self, tmp_path, monkeypatch):
        installer = make_installer(tmp_path / "setup.exe")

        def _missing(*args, **kwargs):
            raise FileNotFoundError(2, "No such file", "powershell")

        monkeypatch.setattr("utils.process_runner.subprocess.Popen", _missing)
        with pytest.raises(NotFoundError):
            run_installer(installer, "/S", Action.INSTALL, InstallerType.NSIS)

    def test_timeout_terminates(self, tmp_path, monkeypatch):
        installer = make_installer(tmp_path / "setup.exe")
        HangingPopen.launches = []
        monkeypatch.setattr("utils.process_runner.subprocess.Popen", HangingPopen)
        monkeypatch.setattr("utils.process_runner.POLL_INTERVAL", 0.01)

        with pytest.raises(InstallerTimeoutError):
            run_installer(installer, "/S", Action.INSTALL, InstallerType.NSIS, timeout=0.05)

        assert HangingPopen.launches[0].terminated

    def test_cancel_terminates(self, tmp_path, monkeypatch, cancel_event):
        installer = make_installer(tmp_path / "setup.exe")
        HangingPopen.launches = []
        monkeypatch.setattr("utils.process_runner.subprocess.Popen", HangingPopen)
        cancel_event.set()

        with pytest.raises(OperationCancelledError):
            run_installer(installer, "/S", Action.INSTALL, InstallerType.NSIS, cancel_event=cancel_event)

        assert HangingPopen.launches[0].terminated
