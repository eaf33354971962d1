from cli.ui import show_panel, show_step_final, show_error, show_success
from utils.errors import PacklError


def run_uninstall(manager, package_name, interactive=False):
    '''Uninstall a package and report the outcome. Returns a process exit code.'''
    if interactive:
        show_panel(f"Uninstall {package_name}", "Remove the application and its files")

    try:
        result = manager.uninstall(package_name)
    except PacklError as e:
        show_step_final(f"Uninstall of {package_name} failed", success=False)
        show_error(str(e))
        return 1

    if result.method == 'not_installed':
        return 0

    show_step_final(f"{package_name} uninstalled")
    if result.method == 'uninstaller':
        show_success(f"Removed with the registered uninstaller of {result.program.display_name or package_name}")
    else:
        show_success("No uninstaller registered, app folder removed")
    return 0
