"""Custom exception types used across the project."""


class AzureServiceError(RuntimeError):
    """Raised when a call to an Azure service fails."""


class OpenAIConfigurationError(AzureServiceError):
    """Raised when the Azure OpenAI configuration is invalid or incomplete."""


class OpenAIServiceError(AzureServiceError):
    """Raised when a chat completion or embedding request fails."""


class SearchConfigurationError(AzureServiceError):
    """Raised when the Cognitive Search configuration is invalid or incomplete."""


class SearchServiceError(AzureServiceError):
    """Raised when a Cognitive Search query or indexing operation fails."""


class BlobStorageConfigurationError(AzureServiceError):
    """Raised when the Blob Storage configuration is invalid or incomplete."""


class BlobStorageError(AzureServiceError):
    """Raised when a Blob Storage operation fails."""


class FoundryConfigurationError(AzureServiceError):
    """Raised when the Foundry model endpoint is not configured."""


class FoundryServiceError(AzureServiceError):
    """Raised when a Foundry chat completion fails."""


class TelemetryError(AzureServiceError):
    """Raised when a telemetry operation fails or is simulated to fail."""


class RagPipelineError(AzureServiceError):
    """Raised when a retrieval augmented generation step fails."""


class ServiceValidationError(ValueError):
    """Raised when an incoming request fails validation checks."""


class ResourceMissingError(LookupError):
    """Raised when a requested document or blob does not exist."""


class OperationNotSupportedError(RuntimeError):
    """Raised when an operation is unavailable with the configured credentials."""
