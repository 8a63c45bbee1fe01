"""
Common utilities for the ripM library.

- Custom exception hierarchy
- Logging configuration
- Node name to matrix index mapping
- Matrix and partition validation
"""

from .exceptions import (
    NetworkAnalysisError,
    ValidationError,
    ConfigurationError,
    ComputationError,
    DegenerateModuleError,
    DataFormatError,
    validate_parameter,
    require_positive,
    require_in_range
)

from .id_mapper import IDMapper
from .validators import (
    validate_square_matrix,
    validate_symmetric,
    validate_node_names,
    validate_partition,
    validate_module_indices,
    check_finite
)

from .logging_config import (
    setup_logging,
    get_logger,
    log_function_entry,
    log_performance_metric,
    LoggingTimer,
    JSONFormatter
)
