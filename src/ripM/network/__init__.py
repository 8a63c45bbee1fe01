"""
Network analysis module.

- Connectivity matrix construction from an adjacency matrix
- Leading-eigenvector modularity bisection and refinement
- Recursive indirect-paths modularity (rip-M) with small-module merging
- Homophily of a partition
- Network deconvolution
- Node-to-module file export and NetworkIt conversion
"""

from .connectivity import ConnectivityMatrix, build_connectivity
from .spectral import bisect
from .modularity import (
    ModularityResult,
    modularity_matrix,
    refine_modules,
    compute_modularity
)
from .ripm import (
    RipMSettings,
    recursive_partition,
    merge_small_modules,
    sum_matrix_power_series,
    check_merge_results
)
from .homophily import HomophilyResult, compute_homophily
from .deconvolution import deconvolve
from .interaction import InteractionNetwork
from .export import (
    save_modules,
    load_modules,
    read_modules_file,
    to_networkit_graph,
    connectivity_to_graph,
    networkit_modularity
)
