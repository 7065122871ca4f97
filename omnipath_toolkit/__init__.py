"""
OmniPath Toolkit

Helpers for accessing pathway resources, and a pipeline connecting drug
targets to genes of interest in a signaling network.
"""

__version__ = "0.1.0"

from .config import PipelineConfig
from .network import DrugTargetNetworkPipeline, NetworkResult

__all__ = [
    "DrugTargetNetworkPipeline",
    "NetworkResult",
    "PipelineConfig",
    "__version__",
]
