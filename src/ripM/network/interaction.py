"""
Interaction network: node names, adjacency matrix and module assignment.

``InteractionNetwork`` owns a symmetric weighted node-interaction matrix (for
example gene coexpression or SNP interaction values) together with the
connectivity settings used to derive the connectivity matrix, and stores the
partition found by the community detection algorithms. Transforms replace the
adjacency matrix with a new one and drop everything derived from the old one.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import polars as pl

from ..common.exceptions import (
    DegenerateModuleError,
    ValidationError,
    require_positive,
    require_in_range
)
from ..common.id_mapper import IDMapper
from ..common.logging_config import get_logger, LoggingTimer
from ..common.validators import (
    validate_square_matrix,
    validate_symmetric,
    validate_node_names,
    validate_partition,
    check_finite
)
from .connectivity import (
    ConnectivityMatrix,
    DEFAULT_CONNECTIVITY_THRESHOLD,
    build_connectivity
)
from .deconvolution import DEFAULT_ALPHA, DEFAULT_BETA, DEFAULT_CONTROL, deconvolve
from .homophily import HomophilyResult, compute_homophily
from .modularity import ModularityResult, compute_modularity, refine_modules
from .ripm import (
    DEFAULT_START_MERGE_ORDER,
    DEFAULT_MAX_MERGE_ORDER,
    DEFAULT_MIN_MODULE_SIZE,
    DEFAULT_MAX_MODULE_SIZE,
    RipMSettings,
    recursive_partition
)

logger = get_logger(__name__)

DEFAULT_FISHER_CUTOFF = 0.99999
IN_MEMORY_SOURCE = "<in-memory matrix>"


class InteractionNetwork:
    """
    Symmetric interaction network with community detection.

    Parameters
    ----------
    adjacency : array-like
        Square, symmetric, finite N x N matrix
    node_names : sequence, optional
        N unique node names in matrix order. Defaults to "V1" ... "VN".
    source : str, optional
        Description of where the matrix came from, used in log output

    Raises
    ------
    ValidationError
        If the matrix is empty, not square, asymmetric, or the names do not
        match it
    ComputationError
        If the matrix contains non-finite values

    Examples
    --------
    >>> network = InteractionNetwork(matrix, ["BRCA1", "TP53", "EGFR", "MYC"])
    >>> network.set_connectivity_threshold(0.3)
    >>> modules = network.ripm(min_module_size=2, max_module_size=20)
    >>> network.module_assignments()
    """

    def __init__(
        self,
        adjacency: Any,
        node_names: Optional[Sequence[Any]] = None,
        source: str = IN_MEMORY_SOURCE
    ) -> None:
        matrix = self._validated_matrix(adjacency)
        if node_names is None:
            node_names = [f"V{i + 1}" for i in range(matrix.shape[0])]
        validate_node_names(node_names, matrix.shape[0])

        self.source = source
        self.id_mapper = IDMapper.from_names(node_names)
        self._adjacency = matrix

        self.connectivity_threshold = DEFAULT_CONNECTIVITY_THRESHOLD
        self.use_connectivity_threshold = False
        self.connectivity_threshold_abs = False
        self.use_binary_threshold = True

        self._connectivity: Optional[ConnectivityMatrix] = None
        self._modules: List[List[int]] = []
        self._q: Optional[float] = None

    @staticmethod
    def _validated_matrix(adjacency: Any) -> np.ndarray:
        matrix = validate_square_matrix(adjacency, field="adjacency").copy()
        check_finite(matrix, "adjacency")
        validate_symmetric(matrix, field="adjacency")
        return matrix

    # ------------------------------------------------------------------
    # accessors

    @property
    def num_nodes(self) -> int:
        return self._adjacency.shape[0]

    @property
    def node_names(self) -> List[Any]:
        return self.id_mapper.names

    @property
    def adjacency_matrix(self) -> np.ndarray:
        """Copy of the adjacency matrix."""
        return self._adjacency.copy()

    @property
    def connectivity(self) -> ConnectivityMatrix:
        """Connectivity matrix for the current settings, built on first use."""
        if self._connectivity is None:
            self.prepare_connectivity_matrix()
        return self._connectivity

    @property
    def connectivity_matrix(self) -> np.ndarray:
        """Copy of the connectivity matrix."""
        return self.connectivity.matrix.copy()

    @property
    def degrees(self) -> np.ndarray:
        return self.connectivity.degrees.copy()

    @property
    def num_edges(self) -> float:
        return self.connectivity.num_edges

    @property
    def modules(self) -> List[List[int]]:
        """Current partition (a copy); empty until one is computed or loaded."""
        return [list(module) for module in self._modules]

    @property
    def q(self) -> Optional[float]:
        """Modularity of the current partition, if known."""
        return self._q

    # ------------------------------------------------------------------
    # connectivity settings

    def set_connectivity_thresholding(self, flag: bool) -> None:
        self.use_connectivity_threshold = bool(flag)
        self._invalidate_connectivity()

    def set_connectivity_threshold(self, threshold: float) -> None:
        """Set the edge threshold and switch thresholding on."""
        self.connectivity_threshold = float(threshold)
        self.use_connectivity_threshold = True
        self._invalidate_connectivity()

    def set_connectivity_threshold_abs(self, flag: bool) -> None:
        self.connectivity_threshold_abs = bool(flag)
        self._invalidate_connectivity()

    def set_binary_thresholding(self, flag: bool) -> None:
        self.use_binary_threshold = bool(flag)
        self._invalidate_connectivity()

    def _invalidate_connectivity(self) -> None:
        self._connectivity = None

    def prepare_connectivity_matrix(self) -> ConnectivityMatrix:
        """Rebuild the connectivity matrix from the adjacency matrix and settings."""
        self._connectivity = build_connectivity(
            self._adjacency,
            threshold=self.connectivity_threshold,
            use_threshold=self.use_connectivity_threshold,
            use_absolute=self.connectivity_threshold_abs,
            use_binary=self.use_binary_threshold
        )
        logger.info("Connectivity matrix finalized")
        self.log_summary()
        return self._connectivity

    def summary(self) -> Dict[str, Any]:
        """Scalar description of the network for reporting."""
        connectivity = self.connectivity
        return {
            "source": self.source,
            "num_nodes": self.num_nodes,
            "num_edges": connectivity.num_edges,
            "threshold": self.connectivity_threshold if self.use_connectivity_threshold else None,
            "adjacency_min": float(self._adjacency.min()),
            "adjacency_max": float(self._adjacency.max()),
            "connectivity_min": float(connectivity.matrix.min()),
            "connectivity_max": float(connectivity.matrix.max()),
            "num_modules": len(self._modules),
            "q": self._q,
        }

    def log_summary(self) -> None:
        info = self.summary()
        logger.info("Matrix source: %s", info["source"])
        logger.info("Matrix dimensions: %d x %d", info["num_nodes"], info["num_nodes"])
        logger.info("Edges: %s", info["num_edges"])
        if info["threshold"] is not None:
            logger.info("Edge threshold: %s", info["threshold"])
        logger.info("Adjacency matrix: minimum %s, maximum %s",
                    info["adjacency_min"], info["adjacency_max"])
        logger.info("Connectivity matrix: minimum %s, maximum %s",
                    info["connectivity_min"], info["connectivity_max"])

    # ------------------------------------------------------------------
    # community detection

    def ripm(
        self,
        start_merge_order: int = DEFAULT_START_MERGE_ORDER,
        max_merge_order: int = DEFAULT_MAX_MERGE_ORDER,
        min_module_size: int = DEFAULT_MIN_MODULE_SIZE,
        max_module_size: int = DEFAULT_MAX_MODULE_SIZE
    ) -> List[List[int]]:
        """
        Partition the network with recursive indirect-paths modularity.

        Refreshes the connectivity matrix, partitions all nodes and stores the
        result as the current modules.

        Returns
        -------
        List[List[int]]
            Modules as lists of node indices
        """
        settings = RipMSettings(
            start_merge_order=start_merge_order,
            max_merge_order=max_merge_order,
            min_module_size=min_module_size,
            max_module_size=max_module_size
        )
        logger.info("RIPM: Merge start order: %d", settings.start_merge_order)
        logger.info("RIPM: Merge max order:   %d", settings.max_merge_order)
        logger.info("RIPM: Min module size:   %d", settings.min_module_size)
        logger.info("RIPM: Max module size:   %d", settings.max_module_size)

        connectivity = self.prepare_connectivity_matrix()
        modules = recursive_partition(connectivity.matrix, settings)

        self._modules = validate_partition(modules, self.num_nodes)
        self._q = self._modularity_or_none()
        for number, module in enumerate(self._modules):
            logger.info("RIPM: Module: %d size: %d", number, len(module))
        return self.modules

    def modularity_leading_eigenvector(self) -> ModularityResult:
        """
        Partition the whole network by leading-eigenvector bisection only.

        No size policy is applied. The modules and Q are stored.
        """
        connectivity = self.prepare_connectivity_matrix()
        with LoggingTimer("modularity_leading_eigenvector", {"nodes": self.num_nodes}):
            result = refine_modules(connectivity.matrix, range(self.num_nodes))
        self._modules = result.modules
        self._q = result.q
        logger.info("Leading eigenvector: Q = %.6f, %d modules", result.q, len(result.modules))
        return ModularityResult(q=result.q, modules=self.modules)

    def _modularity_or_none(self) -> Optional[float]:
        try:
            return compute_modularity(self.connectivity.matrix, self._modules)
        except DegenerateModuleError:
            return None

    def compute_q(self) -> float:
        """
        Modularity of the stored modules recomputed from the degree sequence.

        Returns 0.0 (with a warning) when only one module exists.

        Raises
        ------
        DegenerateModuleError
            If no modules exist or the network has no edges
        """
        if not self._modules:
            raise DegenerateModuleError("Cannot compute Q: no modules exist")
        if len(self._modules) < 2:
            logger.warning("Only one module detected, Q is 0")
            return 0.0
        return compute_modularity(self.connectivity.matrix, self._modules)

    def homophily(self) -> HomophilyResult:
        """
        Homophily of the stored modules, logged per module.

        Raises
        ------
        DegenerateModuleError
            If no modules exist
        """
        if not self._modules:
            raise DegenerateModuleError("Cannot compute homophily: no modules exist")
        result = compute_homophily(self.connectivity.matrix, self._modules)
        logger.info("Q from existing modules: %s", self._modularity_or_none())
        logger.info("Total homophily: %s", result.global_homophily)
        for number, value in enumerate(result.local, start=1):
            logger.info("Homophily for module %d: %s", number, value)
        return result

    # ------------------------------------------------------------------
    # module assignment

    def set_modules(self, modules: Sequence[Sequence[int]]) -> None:
        """
        Replace the current partition with an externally supplied one.

        Raises
        ------
        ValidationError
            If the modules are not a complete, disjoint partition of the nodes
        """
        self._modules = validate_partition(modules, self.num_nodes)
        self._q = self._modularity_or_none()

    def set_modules_from_assignments(self, assignments: pl.DataFrame) -> None:
        """
        Load a partition from a ``node_id`` / ``module`` DataFrame.

        Module numbers only label groups; they are renumbered in sorted order.

        Raises
        ------
        ValidationError
            If columns are missing, a node name is unknown or repeated, or
            nodes are left without a module
        """
        missing = [col for col in ("node_id", "module") if col not in assignments.columns]
        if missing:
            raise ValidationError(
                f"Missing required columns: {missing}",
                field="columns",
                details={"available_columns": assignments.columns}
            )

        lookup = {str(name): index for index, name in enumerate(self.node_names)}
        grouped: Dict[Any, List[int]] = {}
        for node_id, module in assignments.select(["node_id", "module"]).iter_rows():
            key = str(node_id)
            if key not in lookup:
                raise ValidationError(
                    f"Unknown node name '{node_id}'",
                    field="node_id"
                )
            grouped.setdefault(module, []).append(lookup[key])

        self.set_modules([grouped[number] for number in sorted(grouped)])

    def flatten_modules(self) -> List[int]:
        """Module number (0-based) of every node, in node order."""
        if not self._modules:
            logger.warning("No modules have been created")
            return []
        flat = [0] * self.num_nodes
        for number, module in enumerate(self._modules):
            for index in module:
                flat[index] = number
        return flat

    def module_assignments(self) -> pl.DataFrame:
        """
        Node-to-module table with 1-based module numbers.

        Returns
        -------
        pl.DataFrame
            Columns ``node_id``, ``node_index``, ``module``; one row per node
            grouped by module
        """
        if not self._modules:
            return pl.DataFrame(
                schema={"node_id": pl.Utf8, "node_index": pl.Int64, "module": pl.Int64}
            )
        node_indices = [index for module in self._modules for index in module]
        module_numbers = [
            number
            for number, module in enumerate(self._modules, start=1)
            for _ in module
        ]
        return pl.DataFrame({
            "node_id": self.id_mapper.get_names(node_indices),
            "node_index": node_indices,
            "module": module_numbers,
        })

    def log_modules(self) -> None:
        for number, module in enumerate(self._modules, start=1):
            logger.info("Nodes in module %d: %s", number,
                        " ".join(str(name) for name in self.id_mapper.get_names(module)))

    # ------------------------------------------------------------------
    # transforms

    def _replace_adjacency(self, matrix: np.ndarray, operation: str) -> None:
        check_finite(matrix, operation)
        validate_symmetric(matrix, field="adjacency")
        self._adjacency = matrix
        self._invalidate_connectivity()
        self._q = None

    def deconvolve(
        self,
        alpha: float = DEFAULT_ALPHA,
        beta: float = DEFAULT_BETA,
        control: int = DEFAULT_CONTROL
    ) -> np.ndarray:
        """Deconvolved copy of the adjacency matrix (the network is unchanged)."""
        return deconvolve(self._adjacency, alpha=alpha, beta=beta, control=control)

    def apply_power_transform(self, exponent: float) -> None:
        """
        Raise every adjacency entry to ``exponent``.

        Raises
        ------
        ComputationError
            If the result is not finite (e.g. a fractional power of a negative
            value); the adjacency matrix is left unchanged
        """
        with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
            transformed = np.power(self._adjacency, exponent)
        self._replace_adjacency(transformed, "apply_power_transform")

    def apply_fisher_transform(self, cutoff: float = DEFAULT_FISHER_CUTOFF) -> None:
        """
        Fisher-transform correlation values: ``log((1 + r) / (1 - r))``.

        Values are clipped to ``[-cutoff, cutoff]`` first so that perfect
        correlations stay finite.
        """
        require_in_range(cutoff, "cutoff", 0.0, 1.0, function_name="apply_fisher_transform")
        r = np.clip(self._adjacency, -cutoff, cutoff)
        self._replace_adjacency(np.log((1.0 + r) / (1.0 - r)), "apply_fisher_transform")

    def merge_network(
        self,
        other: Union["InteractionNetwork", np.ndarray],
        prior_prob_edges: float,
        alpha: float,
        omega: float,
        threshold: float
    ) -> None:
        """
        Combine this network with another over the same nodes.

        For each pair the two edge weights are turned into edge probabilities
        ``alpha * (1 - exp(-omega * w))``; their product with the prior edge
        probability ``p`` gives the posterior ``p * (1 + log(1 / p))``, which
        replaces the edge when above ``threshold`` and zeroes it otherwise.

        Raises
        ------
        ValidationError
            If the networks have different sizes
        ConfigurationError
            If a probability parameter is not positive
        """
        require_positive(prior_prob_edges, "prior_prob_edges")
        require_positive(alpha, "alpha")
        require_positive(omega, "omega")

        if isinstance(other, InteractionNetwork):
            other_matrix = other.adjacency_matrix
        else:
            other_matrix = self._validated_matrix(other)
        if other_matrix.shape != self._adjacency.shape:
            raise ValidationError(
                "Cannot merge networks of different sizes",
                field="other",
                details={"this": self.num_nodes, "other": other_matrix.shape[0]}
            )

        prob_1 = alpha * (1.0 - np.exp(-omega * self._adjacency))
        prob_2 = alpha * (1.0 - np.exp(-omega * other_matrix))
        p = prob_1 * prob_2 * prior_prob_edges
        with np.errstate(divide="ignore", invalid="ignore"):
            posterior = np.where(p > 0, p * (1.0 + np.log(1.0 / p)), 0.0)
        merged = np.where(posterior > threshold, posterior, 0.0)
        logger.info("Merged networks: %d of %d entries above threshold %s",
                    int(np.count_nonzero(merged)), merged.size, threshold)
        self._replace_adjacency(merged, "merge_network")

    def __repr__(self) -> str:
        return f"InteractionNetwork(nodes={self.num_nodes}, modules={len(self._modules)})"
