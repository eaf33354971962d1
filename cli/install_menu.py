from cli.ui import show_panel, show_step_final, show_result_panel, show_error
from utils.errors import PacklError


def run_install(manager, package_name, interactive=False):
    '''Install a package and report the outcome. Returns a process exit code.'''
    if interactive:
        show_panel(f"Install {package_name}", "Download, verify and install")

    try:
        result = manager.install(package_name)
    except PacklError as e:
        show_step_final(f"Install of {package_name} failed", success=False)
        show_error(str(e))
        return 1

    show_step_final(f"{package_name} installed")

    lines = [f"Package:  {result.package} {result.version or ''}".rstrip(),
             f"Folder:   {result.app_folder}"]
    if result.dependencies:
        lines.append(f"Deps:     {', '.join(result.dependencies)}")
    if result.alias:
        lines.append(f"Command:  {result.package}")
    show_result_panel('\n'.join(lines), title="Installed")
    return 0
