from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_BASE_URL = "https://api.example.com"


class ConfigError(ValueError):
    """Raised when a required setting is missing."""


class Settings(BaseSettings):
    API_BASE_URL: str = PLACEHOLDER_BASE_URL
    API_TOKEN: str = ""
    X_API_TOKEN_HEADER: str = "X-API-Token"
    TEST_TIMEOUT: int = 30000

    MEDIA_ENDPOINT: str = "/api/media"
    COUPON_ENDPOINT: str = "/api/coupon"
    DEFAULT_LIMIT: int = 100
    DEFAULT_SKIP: int = 0

    TEST_MEDIA_ID: str = ""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    ENABLE_DEBUG_LOGS: bool = False

    SLACK_WEBHOOK_URL: str = ""
    WEBHOOK_TIMEOUT_SEC: float = 10.0
    GITHUB_REPOSITORY: str = "Faradayy7/endpoint-sentinel"
    GITHUB_RUN_ID: str = ""
    GITHUB_ACTOR: str = ""
    GITHUB_REF: str = ""

    TESTS_DIR: str = "tests"
    TEST_FILE_PATTERNS: str = "test_*.py,*.spec.js"
    JUNIT_REPORT_PATH: str = "test-results/junit.xml"
    HTML_REPORT_PATH: str = "test-results/report.html"
    HTML_SNIPPET_CHARS: int = 2000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def api_base_url(self) -> str:
        return str(self.API_BASE_URL or "").strip().rstrip("/")

    @property
    def request_timeout_sec(self) -> float:
        return max(self.TEST_TIMEOUT, 0) / 1000.0

    @property
    def effective_log_level(self) -> str:
        if self.ENABLE_DEBUG_LOGS:
            return "DEBUG"
        return str(self.LOG_LEVEL or "INFO").strip().upper() or "INFO"

    @property
    def log_format(self) -> str:
        value = str(self.LOG_FORMAT or "").strip().lower()
        return value if value in ("json", "console") else "json"

    @property
    def test_file_patterns(self) -> list[str]:
        return [p.strip() for p in self.TEST_FILE_PATTERNS.split(",") if p.strip()]

    @property
    def tests_dir_path(self) -> Path:
        return Path(self.TESTS_DIR).expanduser()

    @property
    def junit_report_path(self) -> Path:
        return Path(self.JUNIT_REPORT_PATH).expanduser()

    @property
    def html_report_path(self) -> Path:
        return Path(self.HTML_REPORT_PATH).expanduser()

    @property
    def repo_owner_and_name(self) -> tuple[str, str]:
        owner, _, name = str(self.GITHUB_REPOSITORY or "").partition("/")
        return owner, name

    @property
    def pages_url(self) -> str:
        owner, name = self.repo_owner_and_name
        return f"https://{owner.lower()}.github.io/{name}"

    @property
    def run_url(self) -> str:
        return f"https://github.com/{self.GITHUB_REPOSITORY}/actions/runs/{self.GITHUB_RUN_ID}"

    @property
    def branch(self) -> str:
        ref = str(self.GITHUB_REF or "").strip()
        if not ref:
            return "main"
        return ref.removeprefix("refs/heads/")

    @property
    def live_api_enabled(self) -> bool:
        return bool(self.API_TOKEN) and bool(self.api_base_url) and self.api_base_url != PLACEHOLDER_BASE_URL


def validate_config(config: Settings) -> None:
    required = {
        "API_BASE_URL": config.api_base_url,
        "API_TOKEN": config.API_TOKEN,
    }
    missing = [key for key, value in required.items() if not value]
    if missing:
        raise ConfigError(
            f"Missing required settings: {', '.join(missing)}. "
            "Copy .env.example to .env and fill in the values."
        )


settings = Settings()
