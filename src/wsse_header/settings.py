"""
    wsse_header.settings
    ~~~~~~~~~~~~~~~~~~~~

    Runtime settings, read from ``WSSE_*`` environment variables.

"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tunables for header building and the external signing service."""

    model_config = SettingsConfigDict(env_prefix='WSSE_')

    timestamp_ttl_seconds: int = Field(60, ge=0)
    nonce_entropy_length: int = Field(100, gt=0)
    signer_host: str = 'localhost'
    signer_port: int = 33333


@lru_cache(maxsize=1)
def get_settings():
    return Settings()
