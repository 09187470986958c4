"""
GitHub Actions runner integration: inputs, outputs, secret masking and
workflow-command logging.
"""
import os
import sys
import uuid
import logging
from typing import Dict, List, Mapping, Optional, TextIO

logger = logging.getLogger(__name__)

MASK = "***"

# Secrets registered for this process, masked by SecretMaskFilter
_secrets: List[str] = []


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def issue_command(
    command: str,
    message: str = "",
    properties: Optional[Dict[str, str]] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Print a workflow command (``::command key=value::message``) to stdout.

    Args:
        command: Command name (e.g., "add-mask", "set-output")
        message: Command data
        properties: Optional command properties
        stream: Output stream (defaults to sys.stdout)
    """
    out = stream or sys.stdout
    line = f"::{command}"
    if properties:
        line += " " + ",".join(
            f"{key}={escape_property(value)}" for key, value in properties.items()
        )
    line += f"::{escape_data(message)}"
    out.write(line + "\n")
    out.flush()


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Read an action input the way the runner exposes it.

    Args:
        name: Input name as declared in action.yml (e.g., "api-key")
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Stripped input value, or "" when the input was not supplied
    """
    env = os.environ if environ is None else environ
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return env.get(key, "").strip()


def set_secret(secret: str) -> None:
    """
    Register a secret so it is masked in the job log and in our own log output.

    Args:
        secret: Value to mask
    """
    if not secret:
        return
    if secret not in _secrets:
        _secrets.append(secret)
    issue_command("add-mask", secret)


def clear_secrets() -> None:
    """Forget every registered secret."""
    _secrets.clear()


def mask_secrets(text: str) -> str:
    """Replace every registered secret in text with the mask."""
    for secret in _secrets:
        text = text.replace(secret, MASK)
    return text


def set_output(
    name: str,
    value: str,
    environ: Optional[Mapping[str, str]] = None
) -> None:
    """
    Publish a step output.

    Appends to the file named by GITHUB_OUTPUT using the runner's
    ``name<<delimiter`` block format, or falls back to the legacy
    ``::set-output`` command when no output file is configured.

    Args:
        name: Output name (e.g., "event-id")
        value: Output value
        environ: Environment mapping (defaults to os.environ)
    """
    env = os.environ if environ is None else environ
    output_path = env.get("GITHUB_OUTPUT", "")
    if not output_path:
        sys.stdout.write("\n")
        issue_command("set-output", value, {"name": name})
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError(f"Unexpected input: output value contains the delimiter {delimiter}")
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    logger.debug(f"Set output {name}")


def set_failed(message: str) -> None:
    """
    Report the run as failed.

    The caller is responsible for exiting with a non-zero status.

    Args:
        message: Human-readable failure message
    """
    logger.error(message)


def is_debug(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Whether the runner has step debug logging enabled."""
    env = os.environ if environ is None else environ
    return env.get("RUNNER_DEBUG") == "1"


class SecretMaskFilter(logging.Filter):
    """Mask registered secrets in log records before they are emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _secrets:
            record.msg = mask_secrets(record.getMessage())
            record.args = ()
        return True


class WorkflowCommandFormatter(logging.Formatter):
    """Render log records as runner workflow commands."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"::error::{escape_data(message)}"
        if record.levelno >= logging.WARNING:
            return f"::warning::{escape_data(message)}"
        if record.levelno <= logging.DEBUG:
            return f"::debug::{escape_data(message)}"
        return message


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Route logging to stdout as workflow commands with secret masking.

    Args:
        environ: Environment mapping (defaults to os.environ)
    """
    debug = is_debug(environ)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
    handler.addFilter(SecretMaskFilter())
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
        force=True
    )
    if not debug:
        # Keep transport chatter out of the job log
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
