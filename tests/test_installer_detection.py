"""
Tests for installer technology detection.
"""

import pytest

from conftest import make_installer
from utils.errors import NotFoundError
from utils.installer_detection import (
    InstallerType,
    detect_installer_type,
    extract_ascii_strings,
    match_signature,
)


class TestExtractAsciiStrings:
    def test_runs_shorter_than_minimum_are_dropped(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"abc\x00abcd\x01xy\x02longer run\x03")
        assert list(extract_ascii_strings(path)) == ["abcd", "longer run"]

    def test_trailing_run_at_end_of_file(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"\x00\x00tail")
        assert list(extract_ascii_strings(path)) == ["tail"]

    def test_printable_range_is_32_to_126(self, tmp_path):
        path = tmp_path / "blob.bin"
        # 0x1f and 0x7f terminate runs, space and tilde do not
        path.write_bytes(b"\x1f ab~\x7fcdef")
        assert list(extract_ascii_strings(path)) == [" ab~", "cdef"]

    def test_run_spanning_chunk_boundary_is_reported_once(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"\x00" * 6 + b"Inno Setup" + b"\x00")
        assert list(extract_ascii_strings(path, chunk_size=8)) == ["Inno Setup"]

    def test_chunked_and_whole_reads_agree(self, tmp_path):
        path = make_installer(tmp_path / "a.exe", "Nullsoft Install System", offset=1000, size=4096)
        assert list(extract_ascii_strings(path, chunk_size=7)) == list(extract_ascii_strings(path))


class TestMatchSignature:
    @pytest.mark.parametrize("text, expected", [
        ("Inno Setup Setup Data (6.2.0)", InstallerType.INNO_SETUP),
        ("Nullsoft Install System v3.08", InstallerType.NSIS),
        ("NSIS Error", InstallerType.NSIS),
        ("InstallShield Wizard", InstallerType.INSTALL_SHIELD),
        ("Wise Installation Wizard", InstallerType.WISE),
        ("Microsoft Visual C++", None),
    ])
    def test_signatures(self, text, expected):
        assert match_signature(text) is expected

    def test_priority_within_one_string(self):
        assert match_signature("Wise InstallShield Inno Setup") is InstallerType.INNO_SETUP


class TestDetectInstallerType:
    def test_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            detect_installer_type(tmp_path / "nope.exe")

    @pytest.mark.parametrize("name", ["setup.msi", "SETUP.MSI", "Setup.Msi"])
    def test_msi_extension_wins_regardless_of_content(self, tmp_path, name):
        path = make_installer(tmp_path / name, "Inno Setup")
        assert detect_installer_type(path) is InstallerType.MSI

    def test_empty_msi(self, tmp_path):
        path = tmp_path / "empty.msi"
        path.write_bytes(b"")
        assert detect_installer_type(path) is InstallerType.MSI

    def test_inno_setup_at_offset_500(self, tmp_path):
        path = make_installer(tmp_path / "foo-setup.exe", "Inno Setup: Setup Data", offset=500)
        assert detect_installer_type(path) is InstallerType.INNO_SETUP

    def test_first_signature_by_position_wins(self, tmp_path):
        path = tmp_path / "mixed.exe"
        path.write_bytes(b"\x00Wise Solutions\x00" + b"\x01" * 100 + b"\x00Inno Setup\x00")
        assert detect_installer_type(path) is InstallerType.WISE

    def test_no_signature(self, tmp_path):
        path = make_installer(tmp_path / "plain.exe", "This program cannot be run in DOS mode")
        assert detect_installer_type(path) is InstallerType.UNKNOWN

    def test_empty_exe_is_unknown(self, tmp_path):
        path = tmp_path / "empty.exe"
        path.write_bytes(b"")
        assert detect_installer_type(path) is InstallerType.UNKNOWN

    def test_repeated_detection_is_stable(self, tmp_path):
        path = make_installer(tmp_path / "n.exe", "Nullsoft.NSIS.exehead")
        results = {detect_installer_type(path) for _ in range(3)}
        assert results == {InstallerType.NSIS}
