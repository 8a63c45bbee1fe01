"""
Node name mapping for the ripM library.

Matrices address nodes by position (0, 1, 2, ...) while callers know them by
name (gene symbols, SNP identifiers). ``IDMapper`` keeps the two in step: the
order in which names are added is the row/column order of the matrix.
"""

from typing import Any, Dict, Iterable, List


class IDMapper:
    """
    Bidirectional mapping between node names and matrix indices.

    Indices are always consecutive and follow insertion order, so the mapper
    can be built straight from the header of an interaction matrix.

    Attributes
    ----------
    name_to_index : Dict[Any, int]
        Maps node names to matrix row/column indices
    index_to_name : List[Any]
        Node names in matrix order

    Examples
    --------
    >>> mapper = IDMapper.from_names(["BRCA1", "TP53", "EGFR"])
    >>> mapper.get_index("TP53")
    1
    >>> mapper.get_name(2)
    'EGFR'
    """

    def __init__(self) -> None:
        self.name_to_index: Dict[Any, int] = {}
        self.index_to_name: List[Any] = []

    @classmethod
    def from_names(cls, names: Iterable[Any]) -> 'IDMapper':
        """
        Build a mapper from an ordered collection of unique names.

        Raises
        ------
        ValueError
            If a name appears more than once
        TypeError
            If a name is not hashable
        """
        mapper = cls()
        for name in names:
            mapper.add_node(name)
        return mapper

    def add_node(self, name: Any) -> int:
        """
        Append a node and return its index.

        Raises
        ------
        ValueError
            If the name is already mapped
        TypeError
            If the name is not hashable
        """
        try:
            hash(name)
        except TypeError:
            raise TypeError(f"Node name must be hashable, got {type(name)}")

        if name in self.name_to_index:
            raise ValueError(
                f"Node name '{name}' already mapped to index {self.name_to_index[name]}"
            )

        index = len(self.index_to_name)
        self.name_to_index[name] = index
        self.index_to_name.append(name)
        return index

    def get_index(self, name: Any) -> int:
        """
        Get the matrix index of a node name.

        Raises
        ------
        KeyError
            If the name is not mapped
        """
        try:
            return self.name_to_index[name]
        except KeyError:
            raise KeyError(f"Node name '{name}' not found in mapping")

    def get_name(self, index: int) -> Any:
        """
        Get the node name stored at a matrix index.

        Raises
        ------
        TypeError
            If index is not an integer
        KeyError
            If index is outside the mapping
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Node index must be integer, got {type(index)}")
        if index < 0 or index >= len(self.index_to_name):
            raise KeyError(f"Node index {index} not found in mapping")
        return self.index_to_name[index]

    def get_indices(self, names: List[Any]) -> List[int]:
        """Batch version of ``get_index``."""
        return [self.get_index(name) for name in names]

    def get_names(self, indices: Iterable[int]) -> List[Any]:
        """Batch version of ``get_name``; accepts numpy integer indices."""
        return [self.get_name(int(index)) for index in indices]

    @property
    def names(self) -> List[Any]:
        """Node names in matrix order (a copy)."""
        return list(self.index_to_name)

    def size(self) -> int:
        """Number of mapped nodes."""
        return len(self.index_to_name)

    def is_empty(self) -> bool:
        return not self.index_to_name

    def has_name(self, name: Any) -> bool:
        try:
            return name in self.name_to_index
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self.index_to_name)

    def __contains__(self, name: Any) -> bool:
        return self.has_name(name)

    def __repr__(self) -> str:
        return f"IDMapper(size={len(self)})"

    def __str__(self) -> str:
        if self.is_empty():
            return "IDMapper(empty)"
        preview = ", ".join(str(name) for name in self.index_to_name[:3])
        if len(self) > 3:
            preview += ", ..."
        return f"IDMapper({len(self)} nodes: {preview})"
