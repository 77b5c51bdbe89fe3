"""Configuration schema using Pydantic.

Single data model and defaults for the gateway; optionally persisted to
~/.snapshot-mcp/config.json and overridable through SNAPSHOT_MCP_* variables.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class ServerConfig(BaseModel):
    """HTTP/stdio front-end configuration."""
    host: str = "0.0.0.0"
    port: int = 3001
    server_name: str = "Snapshot MCP Server"
    protocol_version: str = "2024-11-05"
    # Upper bound for one tools/call, covering every upstream round trip it makes.
    tool_call_timeout_seconds: float = 60.0


class HubConfig(BaseModel):
    """Snapshot hub (GraphQL) and sequencer endpoints."""
    hub_url: str = "https://hub.snapshot.org"
    sequencer_url: str = "https://seq.snapshot.org"
    request_timeout_seconds: float = 30.0
    rate_limit_max_requests: int = 50
    rate_limit_window_seconds: float = 60.0

    @property
    def graphql_endpoint(self) -> str:
        return f"{self.hub_url.rstrip('/')}/graphql"


class ChainConfig(BaseModel):
    """Block-data source used to resolve the current chain head."""
    rpc_url: str = "https://ethereum-rpc.publicnode.com"
    request_timeout_seconds: float = 10.0
    # Used when the head cannot be resolved; receipts flag it as a fallback.
    fallback_block: int = 21_500_000


class ActionsConfig(BaseModel):
    """Defaults applied to signed governance actions."""
    app_name: str = "snapshot-mcp"
    proposal_duration_days: int = 7
    default_voting_type: str = "single-choice"


class Config(BaseSettings):
    """Root configuration for snapshot-mcp."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    hub: HubConfig = Field(default_factory=HubConfig)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    actions: ActionsConfig = Field(default_factory=ActionsConfig)

    model_config = ConfigDict(
        env_prefix="SNAPSHOT_MCP_",
        env_nested_delimiter="__"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment wins over values loaded from the JSON config file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings
