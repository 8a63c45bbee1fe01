"""
Custom exception hierarchy for the ripM library.

Errors fall into four groups that callers handle differently:

- shape and data errors (``ValidationError``) are fatal and surface before
  any result is produced
- parameter-domain errors (``ConfigurationError``) are rejected before any
  computation begins
- numerical problems (``ComputationError``) abort the enclosing operation
- degenerate modules (``DegenerateModuleError``) are reported to the caller,
  which normally treats the module as terminal and carries on
"""

from typing import Dict, Any, Optional, List, Union
import traceback


class NetworkAnalysisError(Exception):
    """
    Base exception for all ripM errors.

    Parameters
    ----------
    message : str
        Human-readable error message describing what went wrong
    details : Dict[str, Any], optional
        Structured information about the error (matrix shapes, parameter values)
    cause : Exception, optional
        The underlying exception that caused this error
    context : Dict[str, Any], optional
        Information about the operation that failed

    Examples
    --------
    >>> raise NetworkAnalysisError("Partition failed")
    >>> raise NetworkAnalysisError(
    ...     "Invalid network size",
    ...     details={"nodes": 0}
    ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        self.message = message
        self.details = details or {}
        self.cause = cause
        self.context = context or {}

        full_message = message

        if self.details:
            detail_parts = []
            for key, value in self.details.items():
                if isinstance(value, (list, dict)) and len(str(value)) > 100:
                    detail_parts.append(f"{key}=<{type(value).__name__} with {len(value)} items>")
                else:
                    detail_parts.append(f"{key}={value}")
            full_message += f" (Details: {', '.join(detail_parts)})"

        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            full_message += f" (Context: {', '.join(context_parts)})"

        super().__init__(full_message)

        if cause is not None:
            self.__cause__ = cause

    def add_context(self, **kwargs: Any) -> 'NetworkAnalysisError':
        """
        Add context to the exception and return it for chaining.

        Examples
        --------
        >>> error = NetworkAnalysisError("Failed")
        >>> error.add_context(operation="ripm", depth=2)
        """
        self.context.update(kwargs)
        return self

    def get_debug_info(self) -> Dict[str, Any]:
        """Collect all available error information in one dictionary."""
        return {
            "exception_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "traceback": traceback.format_exc() if hasattr(self, '__traceback__') else None
        }


class ValidationError(NetworkAnalysisError):
    """
    Exception raised for invalid input data.

    Covers the shape errors of the library: empty or non-square matrices,
    node lists that do not match the matrix dimension, asymmetric matrices,
    partitions that are not complete and disjoint, and attempts to combine
    networks of different sizes.

    Parameters
    ----------
    message : str
        Descriptive error message explaining the validation failure
    field : str, optional
        Name of the argument or attribute that failed validation
    value : Any, optional
        The invalid value
    expected : str, optional
        Description of what was expected
    details : Dict[str, Any], optional
        Additional details about the failure

    Examples
    --------
    >>> raise ValidationError("Matrix must be square", field="adjacency",
    ...                       details={"shape": (3, 4)})
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected

        enhanced_details = details or {}
        if field is not None:
            enhanced_details["field"] = field
        if value is not None:
            enhanced_details["invalid_value"] = value
        if expected is not None:
            enhanced_details["expected"] = expected

        if field:
            enhanced_message = f"Validation error in field '{field}': {message}"
        else:
            enhanced_message = f"Validation error: {message}"

        super().__init__(enhanced_message, details=enhanced_details, **kwargs)


class ConfigurationError(NetworkAnalysisError):
    """
    Exception raised for parameter values outside their valid domain.

    Raised before any computation starts, e.g. a deconvolution ``alpha``
    outside (0, 1] or a merge order below one.

    Parameters
    ----------
    message : str
        Description of the configuration error
    parameter : str, optional
        Name of the problematic parameter
    value : Any, optional
        The invalid parameter value
    valid_options : List[Any], optional
        List of valid options for the parameter
    function : str, optional
        Name of the function where the error occurred

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "Invalid control value",
    ...     parameter="control",
    ...     value=2,
    ...     valid_options=[0, 1]
    ... )
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        value: Optional[Any] = None,
        valid_options: Optional[List[Any]] = None,
        function: Optional[str] = None,
        **kwargs
    ) -> None:
        self.parameter = parameter
        self.value = value
        self.valid_options = valid_options
        self.function = function

        details = kwargs.get('details', {})
        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["invalid_value"] = value
        if valid_options:
            details["valid_options"] = valid_options
        if function:
            details["function"] = function

        enhanced_message = message
        if parameter and valid_options:
            enhanced_message += f". Valid options for '{parameter}': {valid_options}"

        kwargs["details"] = details
        super().__init__(enhanced_message, **kwargs)


class ComputationError(NetworkAnalysisError):
    """
    Exception raised when a numerical operation fails.

    The typical case is a matrix that picks up NaN or infinite values during a
    transform (power series, rescaling, eigen-decomposition). Such values are
    a data-quality problem and abort the enclosing operation.

    Parameters
    ----------
    message : str
        Description of the computational error
    operation : str, optional
        The computational operation that failed
    error_type : str, optional
        Type of error (e.g. "numerical", "degenerate")
    resource_info : Dict[str, Any], optional
        Extra numeric information recorded with the error

    Examples
    --------
    >>> raise ComputationError(
    ...     "Matrix power series produced non-finite values",
    ...     operation="sum_matrix_power_series",
    ...     error_type="numerical"
    ... )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_type: Optional[str] = None,
        resource_info: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> None:
        self.operation = operation
        self.error_type = error_type
        self.resource_info = resource_info or {}

        context = {}
        if operation:
            context["operation"] = operation
        if error_type:
            context["error_type"] = error_type

        details = kwargs.get('details', {})
        details.update(self.resource_info)

        kwargs["details"] = details
        kwargs["context"] = context

        super().__init__(message, **kwargs)


class DegenerateModuleError(ComputationError):
    """
    Exception raised for modules or partitions that cannot be processed.

    A module with fewer than two nodes, or without any edge weight, has no
    modularity matrix to split; an empty partition has nothing to score.
    Callers that partition recursively catch this and keep the module as it is.

    Parameters
    ----------
    message : str
        Description of the degenerate condition
    module_size : int, optional
        Number of nodes in the offending module
    """

    def __init__(
        self,
        message: str,
        module_size: Optional[int] = None,
        **kwargs
    ) -> None:
        self.module_size = module_size

        resource_info = kwargs.pop("resource_info", None) or {}
        if module_size is not None:
            resource_info["module_size"] = module_size

        kwargs.setdefault("error_type", "degenerate")
        super().__init__(message, resource_info=resource_info, **kwargs)


class DataFormatError(ValidationError):
    """
    Exception raised for malformed node-to-module files.

    Parameters
    ----------
    message : str
        Description of the format error
    file_path : str, optional
        Path to the problematic file
    line_number : int, optional
        Line number where the error occurred
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        **kwargs
    ) -> None:
        details = kwargs.get('details', {})

        if file_path:
            details["file_path"] = file_path
        if line_number is not None:
            details["line_number"] = line_number

        kwargs["details"] = details
        super().__init__(message, **kwargs)


# Convenience functions for common error patterns

def validate_parameter(
    value: Any,
    valid_options: List[Any],
    parameter_name: str,
    function_name: Optional[str] = None
) -> None:
    """
    Validate that a parameter value is in the list of valid options.

    Raises
    ------
    ConfigurationError
        If value is not in valid_options
    """
    if value not in valid_options:
        raise ConfigurationError(
            f"Invalid value for parameter '{parameter_name}': {value}",
            parameter=parameter_name,
            value=value,
            valid_options=valid_options,
            function=function_name
        )


def require_positive(
    value: Union[int, float],
    parameter_name: str,
    allow_zero: bool = False
) -> None:
    """
    Validate that a numeric parameter is positive.

    Raises
    ------
    ConfigurationError
        If value is not positive (or non-negative if allow_zero=True)
    """
    if allow_zero and value < 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be non-negative, got {value}",
            parameter=parameter_name,
            value=value
        )
    elif not allow_zero and value <= 0:
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be positive, got {value}",
            parameter=parameter_name,
            value=value
        )


def require_in_range(
    value: Union[int, float],
    parameter_name: str,
    lower: float,
    upper: float,
    include_lower: bool = False,
    include_upper: bool = False,
    function_name: Optional[str] = None
) -> None:
    """
    Validate that a numeric parameter lies inside an interval.

    Parameters
    ----------
    value : Union[int, float]
        The numeric value to validate
    parameter_name : str
        Name of the parameter
    lower, upper : float
        Interval bounds
    include_lower, include_upper : bool, default False
        Whether the bounds themselves are valid values
    function_name : str, optional
        Name of the function being called

    Raises
    ------
    ConfigurationError
        If value falls outside the interval

    Examples
    --------
    >>> require_in_range(0.5, "alpha", 0.0, 1.0, include_upper=True)
    >>> require_in_range(0.0, "alpha", 0.0, 1.0)  # doctest: +SKIP
    ConfigurationError: Parameter 'alpha' must be in (0.0, 1.0], got 0.0
    """
    above = value >= lower if include_lower else value > lower
    below = value <= upper if include_upper else value < upper
    if not (above and below):
        interval = (
            f"{'[' if include_lower else '('}{lower}, "
            f"{upper}{']' if include_upper else ')'}"
        )
        raise ConfigurationError(
            f"Parameter '{parameter_name}' must be in {interval}, got {value}",
            parameter=parameter_name,
            value=value,
            function=function_name
        )
