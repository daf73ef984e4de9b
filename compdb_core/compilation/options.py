"""Classifier options with environment overrides."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOURCE_SUFFIXES: frozenset[str] = frozenset({
    # C / C++
    ".c", ".i", ".cc", ".cp", ".cpp", ".cxx", ".c++", ".C", ".ii",
    # Objective-C
    ".m", ".mi", ".mm", ".M", ".mii",
    # Assembly
    ".s", ".S", ".sx", ".asm",
    # CUDA
    ".cu",
    # Fortran
    ".f", ".for", ".ftn", ".F", ".FOR", ".f90", ".F90", ".f95", ".F95", ".f03", ".f08",
})


class ClassifierOptions(BaseSettings):
    """Recognition settings for the command classifier.

    Suffixes are matched case-sensitively (``.C`` is C++, ``.c`` is C).
    Extra compiler names extend the built-in name patterns of each flag
    dialect; they are compared against the program basename.

    Environment variables use the ``COMPDB_`` prefix and JSON for
    collections, e.g. ``COMPDB_EXTRA_GCC_COMPILERS='["mycc"]'``.
    """

    model_config = SettingsConfigDict(env_prefix="COMPDB_", extra="ignore", frozen=True)

    source_suffixes: frozenset[str] = DEFAULT_SOURCE_SUFFIXES
    extra_gcc_compilers: tuple[str, ...] = ()
    extra_msvc_compilers: tuple[str, ...] = ()
    extra_linkers: tuple[str, ...] = ()


__all__ = ["DEFAULT_SOURCE_SUFFIXES", "ClassifierOptions"]
