class InvalidArgument(ValueError):
    """Raised when a caller hands the engine an argument it cannot use."""
