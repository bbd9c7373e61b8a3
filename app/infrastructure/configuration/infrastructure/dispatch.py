"""Dispatch runtime settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DispatchSettings(InfrastructureSettings):
    """Runtime limits for outbound provider calls.

    Environment Variables:
        DISPATCH_REQUEST_TIMEOUT_SECONDS: Timeout applied to every provider
            HTTP call (default: 10)
    """

    DISPATCH_REQUEST_TIMEOUT_SECONDS: float = Field(
        default=10.0, alias="DISPATCH_REQUEST_TIMEOUT_SECONDS"
    )
