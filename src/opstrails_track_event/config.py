"""
Action configuration, read once from the runner environment.
"""
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .errors import ConfigError
from .workflow import get_input

DEFAULT_API_URL = "https://api.opstrails.dev"
VALID_SEVERITIES = ("LOW", "MINOR", "MAJOR", "CRITICAL")


@dataclass(frozen=True)
class ActionConfig:
    """
    Inputs for one event submission.

    Optional inputs are empty strings when not supplied. Construction
    validates required inputs and severity, so an invalid config never
    reaches the network.
    """
    api_key: str = field(repr=False)
    type: str
    subject: str = ""
    version: str = ""
    description: str = ""
    source: str = ""
    severity: str = ""
    data: str = ""
    api_url: str = DEFAULT_API_URL
    repository: str = ""

    def __post_init__(self):
        if not self.api_key:
            raise ConfigError("Input required and not supplied: api-key")
        if not self.type:
            raise ConfigError("Input required and not supplied: type")
        if self.severity and self.severity not in VALID_SEVERITIES:
            raise ConfigError(
                f'Invalid severity "{self.severity}". '
                f"Must be one of: {', '.join(VALID_SEVERITIES)}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ActionConfig":
        """
        Build the config from action inputs and GITHUB_REPOSITORY.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Validated ActionConfig

        Raises:
            ConfigError: If a required input is missing or severity is invalid
        """
        env = os.environ if environ is None else environ
        return cls(
            api_key=get_input("api-key", env),
            type=get_input("type", env),
            subject=get_input("subject", env),
            version=get_input("version", env),
            description=get_input("description", env),
            source=get_input("source", env),
            severity=get_input("severity", env),
            data=get_input("data", env),
            api_url=get_input("api-url", env) or DEFAULT_API_URL,
            repository=env.get("GITHUB_REPOSITORY", "")
        )
