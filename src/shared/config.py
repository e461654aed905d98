"""
Base configuration for the graph export components.

Uses Pydantic Settings for environment-based configuration.
Each component extends BaseExportSettings with its own prefix.
"""

from pydantic_settings import BaseSettings


class BaseExportSettings(BaseSettings):
    """Base settings shared by the export service, server and CLI."""

    component_name: str = "base"

    # Neo4j connection (only used by the neo4j note store backend)
    neo4j_uri: str = ""
    neo4j_username: str = "neo4j"
    neo4j_password: str = ""
    neo4j_database: str = "neo4j"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
