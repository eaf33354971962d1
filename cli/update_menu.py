from cli.ui import show_panel, show_step_final, show_error, show_warning
from utils.errors import PacklError


def run_update(manager, package_name, interactive=False):
    '''Reinstall a package from its current manifest. Returns a process exit code.'''
    if interactive:
        show_panel(f"Update {package_name}", "Uninstall, then install the latest version")

    try:
        result = manager.update(package_name)
    except PacklError as e:
        show_step_final(f"Update of {package_name} failed", success=False)
        show_error(str(e))
        return 1

    if result.uninstall_error is not None:
        show_warning(f"Previous version may not have been removed cleanly: {result.uninstall_error}")

    show_step_final(f"{package_name} updated to {result.install.version or 'latest'}")
    return 0
