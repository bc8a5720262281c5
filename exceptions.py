class PathPlanningError(Exception):
    """Base exception for path planning."""
    pass

class ConfigurationError(PathPlanningError, ValueError):
    """Raised when a problem or solver is configured with invalid options."""
    pass
