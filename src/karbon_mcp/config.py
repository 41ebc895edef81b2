"""Karbon MCP configuration models"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://api.karbonhq.com/v3"
DEFAULT_TIMEOUT = 30.0


class KarbonAPIConfig(BaseModel):
    """Karbon REST API connection settings"""
    model_config = ConfigDict(frozen=True)

    bearer_token: str = Field(..., description="Karbon API bearer token")
    access_key: str = Field(..., description="Karbon API access key")
    base_url: str = Field(DEFAULT_BASE_URL, description="Karbon API base URL")
    timeout: float = Field(DEFAULT_TIMEOUT, description="Per-request timeout in seconds")


class KarbonConfig(BaseModel):
    """Complete Karbon MCP server configuration"""
    model_config = ConfigDict(frozen=True)

    api: KarbonAPIConfig = Field(..., description="Karbon API configuration")
    namespace: str = Field("", description="Tool namespace prefix")
    log_level: str = Field("INFO", description="Logging level")
