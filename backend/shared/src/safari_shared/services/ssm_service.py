"""Booking backend credentials from SSM Parameter Store.

The booking backend's admin endpoints take a bearer token. Deployments either
set BOOKING_API_TOKEN directly or name a SecureString parameter in
BOOKING_API_TOKEN_PARAM, which is read once per process.
"""

from functools import lru_cache

import boto3
from botocore.exceptions import ClientError

from safari_shared.config import ConfigurationError, Settings
from safari_shared.utils.logging import get_logger

logger = get_logger(__name__)

# ClientError codes that mean the deployment is misconfigured, not that AWS is down
_CONFIG_ERROR_HINTS = {
    "ParameterNotFound": "parameter does not exist",
    "AccessDeniedException": "missing ssm:GetParameter permission",
    "ParameterVersionNotFound": "parameter version does not exist",
}


class SSMServiceError(Exception):
    """Raised when an SSM parameter cannot be read."""

    def __init__(self, name: str, code: str) -> None:
        self.name = name
        self.code = code
        hint = _CONFIG_ERROR_HINTS.get(code, "request failed")
        super().__init__(f"Cannot read SSM parameter {name}: {hint} ({code})")


class SSMService:
    """Reads decrypted SecureString parameters and remembers them per name."""

    def __init__(self) -> None:
        self._client = boto3.client("ssm")
        self._values: dict[str, str] = {}

    def get_parameter(self, name: str) -> str:
        """Return the decrypted value of ``name``.

        Raises:
            SSMServiceError: If SSM refuses or fails the read
        """
        if name in self._values:
            return self._values[name]

        try:
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error("SSM read of %s failed with %s", name, code)
            raise SSMServiceError(name, code) from e

        value: str = response["Parameter"]["Value"]
        self._values[name] = value
        logger.info("Loaded SSM parameter %s", name)
        return value


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance."""
    return SSMService()


def resolve_booking_api_token(settings: Settings) -> str | None:
    """Bearer token for the booking backend, or None if none is configured.

    A token set in the environment wins over the SSM parameter.

    Raises:
        ConfigurationError: If the named SSM parameter cannot be read
    """
    if settings.booking_api_token:
        return settings.booking_api_token
    if not settings.booking_api_token_param:
        return None
    try:
        return get_ssm_service().get_parameter(settings.booking_api_token_param)
    except SSMServiceError as e:
        raise ConfigurationError(str(e)) from e
