"""Interception settings propagated to every traced process.

@public

The interception point is installed into descendant processes through their
environment. InterceptSettings is the explicit form of that configuration:
the parent builds it once, exports it with ``to_environ()``, and every
capture call inside a child reads it back from its own environment. Capture
is therefore a pure function of these settings and local process state.

Environment variables:
    COMPDB_TARGET: Directory that receives one trace file per invocation
    COMPDB_ENABLED: Capture toggle (true/false, default true)
    COMPDB_WRAPPER_DIR: Directory holding compiler shims, skipped when the
        wrapper resolves the real compiler on PATH

Example:
    >>> from compdb_core.settings import InterceptSettings
    >>> settings = InterceptSettings(target=Path("/tmp/traces"))
    >>> env = {**os.environ, **settings.to_environ()}
    >>> subprocess.run(["make"], env=env)
"""

import os
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from compdb_core.logging import get_compdb_logger

logger = get_compdb_logger(__name__)

ENV_PREFIX = "COMPDB_"


class InterceptSettings(BaseSettings):
    """Environment-propagated capture configuration.

    @public

    Attributes:
        target: Shared trace directory. Capture is a no-op when unset.
        enabled: Global capture toggle. A disabled child still runs normally.
        wrapper_dir: Directory of compiler shims installed by the wrapper
                     mechanism. Excluded from PATH lookups of the real tool.

    Note:
        Settings are frozen after construction. Children always construct
        a fresh instance from their own environment.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        frozen=True,
    )

    target: Path | None = None
    enabled: bool = True
    wrapper_dir: Path | None = None

    @property
    def active(self) -> bool:
        """True when a child process should record its invocation."""
        return self.enabled and self.target is not None

    def to_environ(self) -> dict[str, str]:
        """Render the settings as environment variables for child processes."""
        env = {f"{ENV_PREFIX}ENABLED": "true" if self.enabled else "false"}
        if self.target is not None:
            env[f"{ENV_PREFIX}TARGET"] = str(self.target)
        if self.wrapper_dir is not None:
            env[f"{ENV_PREFIX}WRAPPER_DIR"] = str(self.wrapper_dir)
        return env


def load_intercept_settings() -> InterceptSettings:
    """Read InterceptSettings from the environment without raising.

    A traced child inherits whatever its parent exported. A malformed value
    disables capture for that child; the wrapper directory is still honored
    so the real tool can be found.
    """
    try:
        return InterceptSettings()
    except ValidationError as e:
        fields = ", ".join(f"{ENV_PREFIX}{error['loc'][0]}".upper() for error in e.errors() if error["loc"])
        logger.warning(f"Invalid interception environment ({fields}), capture disabled")
        wrapper_dir = os.environ.get(f"{ENV_PREFIX}WRAPPER_DIR")
        return InterceptSettings.model_construct(enabled=False, wrapper_dir=Path(wrapper_dir) if wrapper_dir else None)


__all__ = ["ENV_PREFIX", "InterceptSettings", "load_intercept_settings"]
