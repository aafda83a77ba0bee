"""
ConfigCommand — Configuration display and updates
"""

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate


class ConfigCommand(BaseCommand):
    """Command for configuration management."""

    def show_config(self) -> int:
        template = OutputTemplate(symbols=self.symbols)
        template.header("LOREMAP CONFIG", "Current Configuration")
        template.section("SETTINGS", self.config_manager.display())
        safe_print(template.render(command="config"))
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope)

        template = OutputTemplate(symbols=symbols)

        if error:
            template.header("LOREMAP CONFIG", "Error")
            template.section("ERROR", error)
            safe_print(template.render(command="config"))
            return 1

        template.header("LOREMAP CONFIG", "Configuration Updated")
        template.section("SETTING", f"Set {key} = {self.config_manager.get(key)}")
        if scope == "project":
            template.section("SAVED TO", str(self.config_manager.project_config_path))
        else:
            template.section("SAVED TO", str(self.config_manager.user_config_path))
        template.footer(f"{symbols.check_pass} Configuration saved")
        safe_print(template.render(command="config"))
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', metavar='KEY=VALUE',
                   help='Set config value (e.g., resolver.ancestry_depth=4)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        if '=' not in args.set:
            safe_print("Error: Use format KEY=VALUE (e.g., paths.lore_dir=../wiki)")
            return 1
        key, value = args.set.split('=', 1)
        scope = "user" if args.user else "project"
        return cli._config_cmd.set_config(key, value, scope)
    return cli._config_cmd.show_config()
