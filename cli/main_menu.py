from cli.install_menu import run_install
from cli.uninstall_menu import run_uninstall
from cli.update_menu import run_update
from cli.ui import select_from_list, show_panel, show_error, step_input
from utils.validation import validate_package_name

ACTIONS = {
    "📦 Install package": run_install,
    "🗑️  Uninstall package": run_uninstall,
    "🔄 Update package": run_update,
}


def run_main_loop(manager):
    '''Interactive menu used when no command is given'''

    while True:
        show_panel("PACKL", "Install, uninstall and update Windows applications")

        choice = select_from_list("What would you like to do?", list(ACTIONS) + ["❌ Exit"])
        if choice is None or "Exit" in choice:
            break

        try:
            package_name = validate_package_name(step_input("Package name: "))
        except ValueError as e:
            show_error(str(e))
            input("Press Enter...")
            continue

        ACTIONS[choice](manager, package_name, interactive=True)
        input("\nPress Enter to continue...")
