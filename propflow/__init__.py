"""PropFlow - trace React prop values across component boundaries."""

from .api import build_prop_chain, list_components
from .config import PropFlowConfig, load_config
from .errors import ConfigError, PropFlowError, TraceCancelled, TraceTimeout
from .models import ComponentInfo, NodeKind, PropNode, PropTrace, PropUsage, TagLocation
from .queries import ComponentsQuery, PropUsageQuery, TagUsagesQuery, TraceQuery
from .source.workspace import Workspace

__version__ = "0.1.0"

__all__ = [
    "build_prop_chain",
    "list_components",
    "PropFlowConfig",
    "load_config",
    "ConfigError",
    "PropFlowError",
    "TraceCancelled",
    "TraceTimeout",
    "ComponentInfo",
    "NodeKind",
    "PropNode",
    "PropTrace",
    "PropUsage",
    "TagLocation",
    "ComponentsQuery",
    "PropUsageQuery",
    "TagUsagesQuery",
    "TraceQuery",
    "Workspace",
]
