"""Configuration module for header fan-out.

This module provides the FanoutConfig class for configuring which header is
diversified, how capacity overflow is handled, and how logs are emitted.

Example:
    Basic usage with defaults:

        >>> config = FanoutConfig()
        >>> config.target_header
        'set-cookie'

    Custom configuration:

        >>> config = FanoutConfig(
        ...     target_header="Link",
        ...     overflow_policy="raise",
        ... )

    Loading from environment:

        >>> import os
        >>> os.environ['HEADER_FANOUT_TARGET_HEADER'] = 'Set-Cookie'
        >>> os.environ['HEADER_FANOUT_OVERFLOW_POLICY'] = 'raise'
        >>> config = FanoutConfig.from_env()

    Loading from dictionary:

        >>> config = FanoutConfig.from_dict({'overflow_policy': 'raise', 'json_logs': False})
"""

import os
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

# RFC 7230 section 3.2.6 token characters
TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class FanoutConfig(BaseModel):
    """Configuration for header fan-out.

    Attributes:
        target_header: Header whose values are spread across case variants.
            Stored lowercased. Default is "set-cookie".
        overflow_policy: What to do when a response carries more values than
            the header name has case variants. "wrap" overwrites colliding
            keys and logs a warning; "raise" raises CapacityExceededError and
            leaves the headers untouched. Default is "wrap".
        enabled: When False, adapters pass responses through unchanged.
        log_level: Level used by configure_logging. Default is "INFO".
        json_logs: Emit JSON logs when True, console logs otherwise.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    target_header: str = Field(
        default="set-cookie",
        description="Header name to diversify across case variants",
    )
    overflow_policy: Literal["wrap", "raise"] = Field(
        default="wrap",
        description="Behavior when values exceed available case variants",
    )
    enabled: bool = Field(
        default=True,
        description="Whether adapters apply fan-out at all",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for structured logging",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON instead of console output",
    )

    model_config = {"frozen": True}

    @field_validator("target_header", mode="before")
    @classmethod
    def validate_target_header(cls, v: Any) -> str:
        """Validate and normalize the target header name.

        Args:
            v: Header name in any case.

        Returns:
            Lowercased, stripped header name.

        Raises:
            ValueError: If the name is empty or not a valid header token.

        Example:
            >>> FanoutConfig(target_header=" Set-Cookie ").target_header
            'set-cookie'
        """
        if not isinstance(v, str):
            raise ValueError("target_header must be a string")

        name = v.strip()
        if not name:
            raise ValueError("target_header cannot be empty")

        invalid = sorted(set(name) - TOKEN_CHARS)
        if invalid:
            raise ValueError(
                f"target_header contains invalid characters: {''.join(invalid)!r}"
            )

        return name.lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Validate and uppercase the log level.

        Raises:
            ValueError: If the level is not a standard logging level name.
        """
        if not isinstance(v, str):
            raise ValueError("log_level must be a string")

        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. "
                f"Valid levels are: {', '.join(sorted(VALID_LOG_LEVELS))}"
            )
        return level

    @classmethod
    def from_env(cls, prefix: str = "HEADER_FANOUT_") -> "FanoutConfig":
        """Create configuration from environment variables.

        Variable names are uppercase field names with the prefix, e.g.
        ``HEADER_FANOUT_OVERFLOW_POLICY``. Boolean fields accept
        1/0, true/false, yes/no and on/off.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            FanoutConfig instance populated from environment variables.

        Raises:
            ValueError: If a boolean variable holds an unrecognized value.

        Example:
            >>> import os
            >>> os.environ['HEADER_FANOUT_ENABLED'] = 'false'
            >>> FanoutConfig.from_env().enabled
            False
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "target_header": str,
            "overflow_policy": str,
            "enabled": bool,
            "log_level": str,
            "json_logs": bool,
        }

        for field_name, field_type in field_types.items():
            env_var = f"{prefix}{field_name.upper()}"
            env_value = os.environ.get(env_var)

            if env_value is None:
                continue

            if field_type is bool:
                config_dict[field_name] = _parse_bool(env_var, env_value)
            else:
                config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "FanoutConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)


def _parse_bool(env_var: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{env_var} must be a boolean, got {value!r}")
