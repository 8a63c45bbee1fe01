"""
ripM - Recursive indirect-paths modularity for interaction networks.

This package detects communities in weighted, symmetric node-interaction
matrices (gene coexpression, SNP interaction, correlation networks) and
separates direct edges from indirect-path correlation.

Modules:
    common: Shared exceptions, logging, node name mapping and validation
    network: Connectivity, spectral modularity, rip-M partitioning,
             homophily, deconvolution and module export
"""

__version__ = "0.1.0"

from .network import (
    InteractionNetwork,
    RipMSettings,
    build_connectivity,
    compute_homophily,
    compute_modularity,
    deconvolve,
    merge_small_modules,
    recursive_partition,
    refine_modules,
)

__all__ = [
    "InteractionNetwork",
    "RipMSettings",
    "build_connectivity",
    "compute_homophily",
    "compute_modularity",
    "deconvolve",
    "merge_small_modules",
    "recursive_partition",
    "refine_modules",
]
