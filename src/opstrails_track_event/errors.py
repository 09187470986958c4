"""
Exceptions raised while tracking an event. Each carries the failure message
reported to the runner.
"""


class ActionError(Exception):
    """Base class for failures that end the run."""


class ConfigError(ActionError):
    """Missing or invalid action input."""


class OpsTrailsError(ActionError):
    """Transport or protocol failure talking to the OpsTrails API."""


class OpsTrailsTimeoutError(OpsTrailsError):
    """The OpsTrails API did not answer within the request timeout."""
