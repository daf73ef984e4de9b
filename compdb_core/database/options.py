"""Database options: inclusion and duplicate policies."""

from enum import StrEnum

from pydantic_settings import BaseSettings, SettingsConfigDict

from compdb_core.compilation.models import CompilerPhase


class DuplicatePolicy(StrEnum):
    """How repeated (source, directory) pairs are resolved."""

    LAST_WINS = "last_wins"
    KEEP_ALL = "keep_all"


class DatabaseOptions(BaseSettings):
    """Policy settings for building the compilation database.

    Attributes:
        include_phases: Phases kept in the database. Preprocessing-only and
                        link steps are not analyzable compile units.
        duplicate_policy: LAST_WINS keeps the entry of the latest trace for
                          each (source, directory); KEEP_ALL keeps every one.
        command_style: Emit a shell-quoted ``command`` string instead of
                       the ``arguments`` list.
    """

    model_config = SettingsConfigDict(env_prefix="COMPDB_", extra="ignore", frozen=True)

    include_phases: frozenset[CompilerPhase] = frozenset({CompilerPhase.COMPILATION, CompilerPhase.ASSEMBLY})
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.LAST_WINS
    command_style: bool = False


__all__ = ["DatabaseOptions", "DuplicatePolicy"]
