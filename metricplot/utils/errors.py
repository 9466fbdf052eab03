# metricplot/utils/errors.py
class MetricPlotError(RuntimeError):
    """
    Base class for every error raised while building a metric trajectory.
    Any of them aborts the whole run: no partial trajectory is produced.
    """


class ConfigurationError(MetricPlotError):
    """
    Unsupported metric / dataset / iteration-window combination.
    """


class ResourceError(MetricPlotError):
    """
    Temp directory or snapshot file cannot be created, opened or read.
    """


class InvariantViolation(MetricPlotError):
    """
    Internal consistency check failed (logic bug, never corrected silently).
    """


class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided input (paths, columns, metric names).
    Should NOT print traceback.
    """
