# Import all command modules to ensure commands are registered.

import keepc.commands.store_commands  # noqa: F401
