import sys

from cli.ui import console, print_packl_header, show_error, show_warning

USAGE = "Usage: python main.py [install|uninstall|update] <package>"


def check_admin():
    '''Warn when not elevated (MSI installs inherit the caller's privileges)'''
    from utils.system import is_windows, is_admin

    if not is_windows():
        show_warning("PACKL installs Windows programs; installers will not run on this platform")
        return

    if not is_admin():
        show_warning("Not running as Administrator: MSI packages may fail to install")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    import config
    from utils.logging_utils import configure_logging
    from apps.package_manager import PackageManager
    from cli.install_menu import run_install
    from cli.uninstall_menu import run_uninstall
    from cli.update_menu import run_update
    from utils.validation import validate_package_name

    commands = {
        'install': run_install,
        'uninstall': run_uninstall,
        'update': run_update,
    }

    if argv and (argv[0] not in commands or len(argv) != 2):
        console.print(USAGE)
        return 2

    config.ensure_dirs()
    configure_logging()

    print_packl_header()
    check_admin()

    manager = PackageManager()

    if not argv:
        from cli.main_menu import run_main_loop
        run_main_loop(manager)
        return 0

    command, package_name = argv
    try:
        package_name = validate_package_name(package_name)
    except ValueError as e:
        show_error(str(e))
        return 2

    return commands[command](manager, package_name)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        show_error("Cancelled")
        sys.exit(130)
