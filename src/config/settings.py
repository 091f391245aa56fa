"""Application configuration management."""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


class AppSettings(BaseSettings):
    """Host-level settings shared by every route."""

    environment: str = Field(default="Development", alias="APP_ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="APP_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Optional[str]) -> str:
        if not value:
            return "INFO"
        return str(value).strip().upper()


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Cache and return the host settings."""

    return AppSettings()


class AzureOpenAISettings(BaseSettings):
    """Configuration values required for interacting with Azure OpenAI."""

    endpoint: str = Field(default="", alias="AZURE_OPENAI_ENDPOINT")
    api_key: str = Field(default="", alias="AZURE_OPENAI_API_KEY")
    deployment_name: str = Field(default="", alias="AZURE_OPENAI_DEPLOYMENT_NAME")
    embedding_deployment: str = Field(
        default="text-embedding-ada-002", alias="AZURE_OPENAI_EMBEDDING_DEPLOYMENT"
    )
    api_version: str = Field(default="2024-06-01", alias="AZURE_OPENAI_API_VERSION")
    use_managed_identity: bool = Field(default=False, alias="AZURE_OPENAI_USE_MANAGED_IDENTITY")
    system_prompt: str = Field(
        default="You are a helpful AI assistant.", alias="AZURE_OPENAI_SYSTEM_PROMPT"
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def configured(self) -> bool:
        return bool(self.endpoint)


@lru_cache(maxsize=1)
def get_openai_settings() -> AzureOpenAISettings:
    """Cache and return the Azure OpenAI configuration settings."""

    return AzureOpenAISettings()


class CognitiveSearchSettings(BaseSettings):
    """Configuration values required for interacting with Azure Cognitive Search."""

    endpoint: str = Field(default="", alias="AZURE_SEARCH_ENDPOINT")
    api_key: str = Field(default="", alias="AZURE_SEARCH_API_KEY")
    index_name: str = Field(default="", alias="AZURE_SEARCH_INDEX_NAME")
    vector_index_endpoint: Optional[str] = Field(default=None, alias="AZURE_SEARCH_VECTOR_INDEX_ENDPOINT")
    vector_index_name: str = Field(default="vector-index", alias="AZURE_SEARCH_VECTOR_INDEX_NAME")
    vector_dimensions: int = Field(default=1536, gt=0, alias="AZURE_SEARCH_VECTOR_DIMENSIONS")
    use_managed_identity: bool = Field(default=False, alias="AZURE_SEARCH_USE_MANAGED_IDENTITY")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def configured(self) -> bool:
        return bool(self.endpoint)

    def resolved_vector_endpoint(self) -> str:
        """Return the endpoint hosting the vector index, falling back to the main endpoint."""

        return self.vector_index_endpoint or self.endpoint


@lru_cache(maxsize=1)
def get_search_settings() -> CognitiveSearchSettings:
    """Cache and return the Cognitive Search configuration settings."""

    return CognitiveSearchSettings()


class BlobStorageSettings(BaseSettings):
    """Configuration values required for interacting with Azure Blob Storage."""

    connection_string: str = Field(default="", alias="AZURE_STORAGE_CONNECTION_STRING")
    account_name: str = Field(default="", alias="AZURE_STORAGE_ACCOUNT_NAME")
    container_name: str = Field(default="", alias="AZURE_STORAGE_CONTAINER_NAME")
    use_managed_identity: bool = Field(default=False, alias="AZURE_STORAGE_USE_MANAGED_IDENTITY")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def configured(self) -> bool:
        return bool(self.container_name)

    def account_url(self) -> str:
        """Return the blob service URL used with managed identity."""

        return f"https://{self.account_name}.blob.core.windows.net"


@lru_cache(maxsize=1)
def get_blob_settings() -> BlobStorageSettings:
    """Cache and return the Blob Storage configuration settings."""

    return BlobStorageSettings()


class AppInsightsSettings(BaseSettings):
    """Application Insights export settings."""

    connection_string: str = Field(default="", alias="APPLICATIONINSIGHTS_CONNECTION_STRING")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def configured(self) -> bool:
        return bool(self.connection_string)


@lru_cache(maxsize=1)
def get_app_insights_settings() -> AppInsightsSettings:
    """Cache and return the Application Insights settings."""

    return AppInsightsSettings()


class FoundrySettings(BaseSettings):
    """Configuration for models deployed through the Azure AI Foundry catalog."""

    endpoint: str = Field(default="", alias="FOUNDRY_ENDPOINT")
    api_key: str = Field(default="", alias="FOUNDRY_API_KEY")
    model_name: str = Field(default="Phi-3-mini-4k-instruct", alias="FOUNDRY_MODEL_NAME")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, alias="FOUNDRY_TEMPERATURE")
    max_tokens: int = Field(default=1000, gt=0, alias="FOUNDRY_MAX_TOKENS")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    def configured(self) -> bool:
        return bool(self.endpoint)


@lru_cache(maxsize=1)
def get_foundry_settings() -> FoundrySettings:
    """Cache and return the Foundry configuration settings."""

    return FoundrySettings()
