# PACKL v1.0 - Silent argument policy
from enum import Enum

from utils.installer_detection import InstallerType


class Action(Enum):
    """Kind of installer run; selects arguments and messages, not detection"""
    INSTALL = "install"
    UNINSTALL = "uninstall"
    INSTALL_DEPENDENCY = "install_dependency"

    @property
    def label(self):
        return _ACTION_LABELS[self]


_ACTION_LABELS = {
    Action.INSTALL: "Install",
    Action.UNINSTALL: "Uninstall",
    Action.INSTALL_DEPENDENCY: "Dependency install",
}

# MSI public properties that installers commonly use for the target folder
MSI_DIR_PROPERTIES = ('INSTALLDIR', 'TARGETDIR', 'INSTALL_ROOT', 'INSTALLLOCATION', 'APPDIR')

# installer type -> (silent flag, directory flag template or None)
SILENT_ARGUMENTS = {
    InstallerType.MSI: ('/quiet', None),
    InstallerType.INNO_SETUP: ('/VERYSILENT', '/DIR={target}'),
    InstallerType.NSIS: ('/S', '/D={target}'),
    InstallerType.INSTALL_SHIELD: ('/silent', '/D={target}'),
    InstallerType.WISE: ('/s', '/d={target}'),
    # Most unrecognised Windows installers follow the NSIS convention
    InstallerType.UNKNOWN: ('/S', '/D={target}'),
}

# NSIS reads /D= as the last argument up to end of line and rejects quotes
_UNQUOTED_DIR = (InstallerType.NSIS, InstallerType.UNKNOWN)


def _quote(value):
    value = str(value)
    if any(c.isspace() for c in value) and not value.startswith('"'):
        return f'"{value}"'
    return value


def get_silent_arguments(installer_type, action, target_dir=None):
    '''Return the silent command-line arguments for an installer run.
    Directory flags are only added for Action.INSTALL.
    MSI callers prepend /i or /x themselves.
    '''
    silent_flag, dir_template = SILENT_ARGUMENTS[installer_type]

    if action is not Action.INSTALL:
        return silent_flag

    if not target_dir:
        raise ValueError("Install arguments need a target directory")

    if installer_type is InstallerType.MSI:
        target = _quote(target_dir)
        properties = ' '.join(f"{name}={target}" for name in MSI_DIR_PROPERTIES)
        return f"{silent_flag} {properties}"

    target = str(target_dir) if installer_type in _UNQUOTED_DIR else _quote(target_dir)
    return f"{silent_flag} {dir_template.format(target=target)}"


def _flag_name(arg):
    '''"/DIR=C:\\x" -> "/dir"; used to spot flags that are already set'''
    return arg.split('=', 1)[0].lower()


def merge_arguments(policy_args, extra_args):
    '''Append manifest-provided installer args not already covered by the policy'''
    if not extra_args:
        return policy_args

    present = {_flag_name(arg) for arg in policy_args.split()}
    added = []
    for arg in extra_args:
        arg = arg.strip()
        if not arg or _flag_name(arg) in present:
            continue
        present.add(_flag_name(arg))
        added.append(arg)

    if not added:
        return policy_args

    # The /D= directory flag must stay last
    idx = policy_args.lower().find(' /d=')
    if idx == -1:
        return ' '.join([policy_args] + added)
    return ' '.join([policy_args[:idx]] + added + [policy_args[idx + 1:]])
