"""Schema migrations for the local task store."""

from terminal_tasks.adapters.sqlite.migrations.m001_initial_schema import (
    initial_migration,
)
from terminal_tasks.adapters.sqlite.migrations.runner import (
    Migration,
    MigrationRunner,
)

ALL_MIGRATIONS: list[Migration] = [initial_migration]

__all__ = ["ALL_MIGRATIONS", "Migration", "MigrationRunner", "initial_migration"]
