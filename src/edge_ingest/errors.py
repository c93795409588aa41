"""
Exception hierarchy for the ingest pipeline.

Clients raise these; the orchestrator turns them into per-message outcomes.
Only ConfigError and CredentialsError are fatal (raised at startup).
"""


class EdgeIngestError(Exception):
    """Base class for all pipeline errors."""
    pass


class ConfigError(EdgeIngestError):
    """Raised when required configuration is missing or invalid."""
    pass


class CredentialsError(EdgeIngestError):
    """Raised when application default credentials cannot be obtained."""
    pass


class InvalidMessageError(EdgeIngestError):
    """Raised when a received message lacks deviceId or a usable publishTime."""
    pass


class InferenceError(EdgeIngestError):
    """Base class for prediction failures."""

    def __init__(self, project: str, model: str, detail: str):
        self.project = project
        self.model = model
        self.detail = detail
        super().__init__(f"{project}/{model} {detail}")


class InferenceTransportError(InferenceError):
    """Request failed or the response body was not a usable JSON document."""
    pass


class InferenceServiceError(InferenceError):
    """Response was well-formed but carried an error payload."""
    pass


class ConfigStoreError(EdgeIngestError):
    """Raised when reading or writing a device configuration fails."""
    pass


class MalformedConfigError(ConfigStoreError):
    """Raised when a device configuration blob is not a JSON object."""
    pass
