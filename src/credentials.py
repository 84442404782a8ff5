"""
Credential lookup for the OpenAI API key.

The key lives in AWS Systems Manager Parameter Store as a SecureString and is
fetched on every call; nothing is cached.
"""

from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .error_handler import CredentialError
from .logging_config import get_logger
from .settings import settings

logger = get_logger(__name__)


class CredentialProvider(Protocol):
    """Anything that can resolve a named secret to its value."""

    def get_credential(self, name: str) -> str: ...


class SSMParameterCredentialProvider:
    """Reads decrypted parameters from SSM Parameter Store."""

    def __init__(self, region_name: str | None = None, client: Any = None) -> None:
        self.aws_region = region_name or settings.SSM_REGION
        self.ssm = client or boto3.client("ssm", region_name=self.aws_region)

    def get_credential(self, name: str) -> str:
        """
        Fetch a parameter value, asking SSM to decrypt it.

        Args:
            name: Parameter name

        Returns:
            The decrypted parameter value

        Raises:
            CredentialError: if the lookup fails; the message is the underlying
                error's description
        """
        try:
            response = self.ssm.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            logger.error(
                "Parameter lookup failed",
                parameter_name=name,
                error_code=e.response.get("Error", {}).get("Code"),
            )
            raise CredentialError(str(e), parameter_name=name) from e
        except BotoCoreError as e:
            logger.error("Parameter lookup failed", parameter_name=name, error=str(e))
            raise CredentialError(str(e), parameter_name=name) from e

        value = response.get("Parameter", {}).get("Value")
        if value is None:
            raise CredentialError(
                f"parameter {name} has no value", parameter_name=name
            )

        logger.debug("Parameter fetched", parameter_name=name)
        return str(value)
