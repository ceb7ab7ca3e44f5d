"""
Publisher configuration using Pydantic Settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class PublisherConfig(BaseSettings):
    """Global configuration for publishing pages to S3-compatible object storage."""

    access_key_id: str = Field(default="", description="Access key ID, or `ENV_VAR` to read it from the environment")
    secret_access_key: str = Field(
        default="", description="Secret access key, or `ENV_VAR` to read it from the environment"
    )
    region: str = Field(default="us-east-1", description="Bucket region")
    bucket: str = Field(default="", description="Bucket that receives published pages")
    prefix: str = Field(default="", description="Key prefix prepended to every object key")
    endpoint: str = Field(default="s3.amazonaws.com", description="S3-compatible service endpoint (host[:port])")
    secure: bool = Field(default=True, description="Use HTTPS for storage connections")
    trailing_slashes: bool = Field(
        default=False,
        description="Canonical URLs end in a slash; disables the secondary slash-redirect objects",
    )
    domain_based_caching: bool = Field(
        default=False,
        description="Resolve bucket and credentials per tenant domain instead of globally",
    )
    anonymous: bool = Field(
        default=False,
        description="Allow the global destination without credentials (public or local endpoints)",
    )

    model_config = {
        "env_prefix": "S3_PUBLISHER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }
