"""
Custom exception hierarchy for the graph export system.

All errors inherit from ExportError so they can be caught
uniformly at the service or server level.
"""


class ExportError(Exception):
    """Base exception for all graph export errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        super().__init__(f"[{component}] {message}")


class DocumentSourceError(ExportError):
    """A document source could not answer a request."""

    def __init__(self, message: str):
        super().__init__(message, component="document_source")


class NoteStoreConnectionError(DocumentSourceError):
    """Failed to connect to the Neo4j note store."""
    pass


class ExporterError(ExportError):
    """Errors raised while rendering an export tree."""

    def __init__(self, message: str):
        super().__init__(message, component="exporter")


class UnknownFormatError(ExporterError):
    """Requested export format is not registered."""
    pass


class ConfigurationError(ExportError):
    """Export configuration failed validation."""

    def __init__(self, message: str):
        super().__init__(message, component="config")
