"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values come from TWO sources (in priority order):
#
#   1. **Environment variables** -- e.g., FLARESOLVERR_URL=http://solver:8191/v1
#   2. **.env file** -- key=value lines in the working directory
#
# Field name `playwright_ws_url` maps to env var `PLAYWRIGHT_WS_URL`.
#
# The object is frozen: build it once at process start and pass it into
# the browser provider, captcha solver and orchestrator.  Nothing else in
# the package reads os.environ.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """link_archiver settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # === Preservation ===
    disable_preservation: bool = False
    browser_timeout: float = 5  # minutes

    # === Browser ===
    # Empty string = "not configured".
    proxy: str = ""
    proxy_bypass: str = ""
    proxy_username: str = ""
    proxy_password: str = ""
    playwright_ws_url: str = ""  # remote browser (CDP endpoint)
    playwright_launch_options_executable_path: str = ""  # ignored when playwright_ws_url is set
    ignore_https_errors: bool = False

    # === Captcha solving (FlareSolverr-compatible backend) ===
    flaresolverr_url: str = ""

    # === AI tagging providers ===
    ollama_endpoint_url: str = Field(
        default="",
        validation_alias=AliasChoices(
            "ollama_endpoint_url",
            "OLLAMA_ENDPOINT_URL",
            "NEXT_PUBLIC_OLLAMA_ENDPOINT_URL",
        ),
    )
    ollama_model: str = "llama3.1"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    azure_api_key: str = ""
    azure_endpoint: str = ""
    azure_api_version: str = "2024-06-01"
    azure_deployment: str = ""
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    openrouter_api_key: str = ""
    openrouter_model: str = "openai/gpt-4o-mini"

    # === Storage ===
    storage_folder: str = "data"
    database_path: str = "data/links.db"

    # === Producers ===
    max_file_size: int = 30  # MB, applies to downloaded images/PDFs and monolith output
    monolith_custom_options: str = "-j -F -q"
    monolith_max_buffer: int = 6  # MB of monolith stdout/stderr kept in memory
    header_probe_timeout: float = 10.0  # seconds
    wayback_timeout: float = 60.0  # seconds

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def browser_timeout_seconds(self) -> float:
        return self.browser_timeout * 60

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size * 1024 * 1024

    def get_available_ai_providers(self) -> list[str]:
        """Return the AI tagging backends with credentials, in selection priority."""
        providers: list[str] = []
        if self.ollama_endpoint_url:
            providers.append("ollama")
        if self.openai_api_key:
            providers.append("openai")
        if self.azure_api_key:
            providers.append("azure")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openrouter_api_key:
            providers.append("openrouter")
        return providers

    def has_ai_provider(self) -> bool:
        """True when at least one AI tagging backend is configured."""
        return bool(self.get_available_ai_providers())
