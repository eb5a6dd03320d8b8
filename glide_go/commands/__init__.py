"""Go command catalogue and the executor that runs its entries.

Public API:
    GO_COMMANDS, CommandDefinition, CATEGORIES
    execute_command(catalogue, name, args, work_dir, env) -> ExecuteResult
"""

from glide_go.commands.catalogue import (
    CATEGORIES,
    GO_COMMANDS,
    CommandDefinition,
    catalogue_snapshot,
)
from glide_go.commands.executor import ExecuteResult, execute_command, run_command

__all__ = [
    "CATEGORIES",
    "GO_COMMANDS",
    "CommandDefinition",
    "ExecuteResult",
    "catalogue_snapshot",
    "execute_command",
    "run_command",
]
