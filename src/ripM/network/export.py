"""
Module export for the ripM library.

Two outlets for a finished partition: the plain node-to-module text file
(``node_id<TAB>module``, one row per node, 1-based module numbers) and a
weighted NetworkIt graph of the connectivity matrix for downstream graph
analysis.
"""

import os
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import networkit as nk
import numpy as np
import polars as pl

from ..common.exceptions import ComputationError, DataFormatError, ValidationError
from ..common.id_mapper import IDMapper
from ..common.logging_config import get_logger
from ..common.validators import validate_square_matrix, validate_partition
from .interaction import InteractionNetwork

logger = get_logger(__name__)

MODULE_FILE_COLUMNS = ["node_id", "module"]


def save_modules(
    network: InteractionNetwork,
    output_path: Union[str, Path],
    overwrite: bool = True
) -> None:
    """
    Write the network's modules as a tab-separated node-to-module file.

    Parameters
    ----------
    network : InteractionNetwork
        Network with a computed or loaded partition
    output_path : str or Path
        Destination file
    overwrite : bool, default True
        Replace an existing file

    Raises
    ------
    ValidationError
        If the network has no modules or the file exists and overwrite is False
    ComputationError
        If the file cannot be written
    """
    if not network.modules:
        raise ValidationError("Network has no modules to save", field="modules")
    output_path = Path(output_path)
    if output_path.exists() and not overwrite:
        raise ValidationError(
            f"Output file already exists: {output_path}",
            field="output_path"
        )

    logger.info("Saving network modules to [%s]", output_path)
    table = network.module_assignments().select([
        pl.col("node_id").cast(pl.Utf8),
        pl.col("module"),
    ])
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        table.write_csv(output_path, separator="\t", include_header=False)
    except OSError as e:
        raise ComputationError(
            f"Could not write modules file: {output_path}",
            operation="save_modules",
            error_type="io",
            cause=e
        )


def read_modules_file(input_path: Union[str, Path]) -> pl.DataFrame:
    """
    Read a node-to-module file into a ``node_id`` / ``module`` DataFrame.

    Raises
    ------
    DataFormatError
        If the file is missing, malformed, or a module number is not an integer
    """
    input_path = str(input_path)
    if not os.path.exists(input_path):
        raise DataFormatError("Modules file not found", file_path=input_path)

    try:
        raw = pl.read_csv(
            input_path,
            has_header=False,
            separator="\t",
            new_columns=MODULE_FILE_COLUMNS,
            infer_schema_length=0,
        )
    except pl.exceptions.PolarsError as e:
        raise DataFormatError(
            "Could not parse modules file",
            file_path=input_path,
            details={"error": str(e)}
        )

    if raw.width != len(MODULE_FILE_COLUMNS):
        raise DataFormatError(
            f"Expected {len(MODULE_FILE_COLUMNS)} tab-separated columns, got {raw.width}",
            file_path=input_path
        )

    table = raw.filter(pl.col("node_id").is_not_null()).with_columns(
        pl.col("node_id").str.strip_chars(),
        pl.col("module").str.strip_chars().cast(pl.Int64, strict=False),
    )
    bad_rows = table.with_row_index("row").filter(pl.col("module").is_null())
    if bad_rows.height:
        raise DataFormatError(
            "Module number is not an integer",
            file_path=input_path,
            line_number=int(bad_rows["row"][0]) + 1
        )
    return table


def load_modules(network: InteractionNetwork, input_path: Union[str, Path]) -> List[List[int]]:
    """
    Replace the network's partition with one read from a node-to-module file.

    Returns
    -------
    List[List[int]]
        The loaded modules

    Raises
    ------
    DataFormatError
        If the file cannot be parsed
    ValidationError
        If it names unknown nodes or does not cover every node exactly once
    """
    table = read_modules_file(input_path)
    network.set_modules_from_assignments(table)
    logger.info("Loaded %d modules from [%s]", len(network.modules), input_path)
    return network.modules


def to_networkit_graph(network: InteractionNetwork) -> Tuple[nk.Graph, IDMapper]:
    """
    Weighted undirected NetworkIt graph of the connectivity matrix.

    Returns
    -------
    nk.Graph
        One node per network node, one edge per nonzero upper-triangle entry
    IDMapper
        Node names for the graph's node ids
    """
    return connectivity_to_graph(network.connectivity.matrix), network.id_mapper


def connectivity_to_graph(connectivity: np.ndarray) -> nk.Graph:
    """Build a weighted undirected NetworkIt graph from a square matrix."""
    connectivity = validate_square_matrix(connectivity, field="connectivity")
    n = connectivity.shape[0]
    graph = nk.Graph(n, weighted=True, directed=False)
    rows, cols = np.nonzero(np.triu(connectivity, k=1))
    for u, v in zip(rows.tolist(), cols.tolist()):
        graph.addEdge(u, v, float(connectivity[u, v]))
    return graph


def networkit_modularity(graph: nk.Graph, modules: Sequence[Sequence[int]]) -> float:
    """
    Modularity of a partition as computed by NetworkIt.

    Serves as an independent check on ``compute_modularity``.
    """
    partition_modules = validate_partition(modules, graph.numberOfNodes())
    partition = nk.structures.Partition(graph.numberOfNodes())
    partition.setUpperBound(len(partition_modules))
    for number, module in enumerate(partition_modules):
        for node in module:
            partition.addToSubset(number, node)
    return float(nk.community.Modularity().getQuality(partition, graph))
