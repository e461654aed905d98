"""Graph export configuration."""

from src.shared.config import BaseExportSettings


class GraphExportSettings(BaseExportSettings):
    """Settings for the export service, MCP server and CLI."""

    component_name: str = "graph_export"

    # Where notes come from: "vault" (directory on disk) or "neo4j"
    source_backend: str = "vault"
    vault_path: str = ""
    vault_name: str = ""  # Display name in exports; defaults to the vault folder name

    # Defaults for requests that leave them out
    content_depth: int = 1
    title_depth: int = 2
    export_format: str = "markdown"

    # Upper bound on title_depth accepted from callers
    max_depth: int = 10

    class Config(BaseExportSettings.Config):
        env_prefix = "GRAPH_EXPORT_"
