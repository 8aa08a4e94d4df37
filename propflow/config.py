"""Configuration loading.

Config lives in ``propflow.json`` at the workspace root (or any path given on
the command line). Keys are camelCase::

    {
        "maxTraceDepth": 20,
        "traceTimeout": 30000,
        "maxSearchFiles": 200,
        "extensions": [".tsx", ".jsx", ".ts", ".js"],
        "excludeDirs": ["node_modules", ".git"],
        "search": "text"
    }

Every key is optional.
"""

import logging
from pathlib import Path
from typing import Annotated, Literal, Optional

import msgspec

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "propflow.json"

DEFAULT_EXTENSIONS = [".tsx", ".jsx", ".ts", ".js"]
DEFAULT_EXCLUDE_DIRS = ["node_modules", ".git", "dist", "build", "out", "coverage", ".next"]


class PropFlowConfig(msgspec.Struct, rename="camel", forbid_unknown_fields=True):
    """Settings recognised by the trace engine and workspace search."""

    max_trace_depth: Annotated[int, msgspec.Meta(ge=1)] = 20
    trace_timeout: Optional[Annotated[int, msgspec.Meta(ge=0)]] = 30000  # milliseconds, None/0 disables
    max_search_files: Annotated[int, msgspec.Meta(ge=1)] = 200
    extensions: list[str] = msgspec.field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_dirs: list[str] = msgspec.field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    search: Literal["text", "syntax"] = "text"

    @property
    def timeout_seconds(self) -> Optional[float]:
        """Trace budget in seconds, or None when disabled."""
        if not self.trace_timeout:
            return None
        return self.trace_timeout / 1000.0


_decoder = msgspec.json.Decoder(PropFlowConfig)


def load_config(path: str | Path) -> PropFlowConfig:
    """Load config from a JSON file.

    Args:
        path: Path to the config file.

    Returns:
        Parsed PropFlowConfig.

    Raises:
        ConfigError: If the file cannot be read or does not validate.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        return _decoder.decode(raw)
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def find_config(root: str | Path) -> PropFlowConfig:
    """Load ``propflow.json`` from a workspace root, or return defaults."""
    candidate = Path(root) / CONFIG_FILENAME
    if candidate.is_file():
        logger.debug(f"Loading config from {candidate}")
        return load_config(candidate)
    return PropFlowConfig()


def with_overrides(
    config: PropFlowConfig,
    max_trace_depth: Optional[int] = None,
    trace_timeout: Optional[int] = None,
    search: Optional[str] = None,
) -> PropFlowConfig:
    """Return a copy of config with the given (non-None) values replaced.

    Values go through msgspec validation again so CLI flags obey the same
    bounds as the file.
    """
    data = msgspec.to_builtins(config)
    if max_trace_depth is not None:
        data["maxTraceDepth"] = max_trace_depth
    if trace_timeout is not None:
        data["traceTimeout"] = trace_timeout
    if search is not None:
        data["search"] = search
    try:
        return msgspec.convert(data, PropFlowConfig)
    except msgspec.ValidationError as e:
        raise ConfigError(str(e)) from e
