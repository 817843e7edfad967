import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
DOTENV_PATH = (Path(__file__).resolve().parent.parent.parent / ".env")
load_dotenv(dotenv_path=DOTENV_PATH)

SUPPORTED_PROVIDERS = {"ollama", "azure"}


class Settings:
    # Model provider: "ollama" (local) or "azure"
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "ollama").strip().lower()

    # Ollama Configuration
    OLLAMA_BASE_URL: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").strip().rstrip("/")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "deepseek-r1:1.5b").strip()

    # Azure OpenAI Configuration
    AZURE_OPENAI_ENDPOINT: str = os.getenv("AZURE_OPENAI_ENDPOINT", "").strip().rstrip("/")
    AZURE_OPENAI_API_KEY: str = os.getenv("AZURE_OPENAI_API_KEY", "").strip()
    AZURE_OPENAI_DEPLOYMENT: str = os.getenv("AZURE_OPENAI_DEPLOYMENT", "").strip()
    AZURE_OPENAI_API_VERSION: str = os.getenv("AZURE_OPENAI_API_VERSION", "2025-01-01-preview").strip()

    # Generation settings (shared by every provider)
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0"))
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))
    LLM_MAX_RETRIES: int = int(os.getenv("LLM_MAX_RETRIES", "3"))

    # SQL oracle (sqlfluff CLI)
    SQLFLUFF_PATH: str = os.getenv("SQLFLUFF_PATH", "sqlfluff").strip()
    SQL_DIALECT: str = os.getenv("SQL_DIALECT", "postgres").strip()
    SQLFLUFF_CONFIG: str = os.getenv("SQLFLUFF_CONFIG", "").strip()

    # Repair budget per loop (JSON and SQL repair)
    MAX_REPAIR_TRIES: int = int(os.getenv("MAX_REPAIR_TRIES", "3"))

    # App Configuration
    APP_TITLE: str = os.getenv("APP_TITLE", "SQL AutoProfiler").strip()
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    def validate(self):
        if self.LLM_PROVIDER not in SUPPORTED_PROVIDERS:
            raise RuntimeError(
                f"LLM_PROVIDER '{self.LLM_PROVIDER}' is not supported. "
                f"Use one of: {', '.join(sorted(SUPPORTED_PROVIDERS))}"
            )
        if self.MAX_REPAIR_TRIES < 1:
            raise RuntimeError("MAX_REPAIR_TRIES must be at least 1")
        if self.LLM_MAX_RETRIES < 1:
            raise RuntimeError("LLM_MAX_RETRIES must be at least 1")
        if not self.SQL_DIALECT:
            raise RuntimeError("SQL_DIALECT must not be empty")
        if self.LLM_PROVIDER == "azure" and not (
            self.AZURE_OPENAI_ENDPOINT
            and self.AZURE_OPENAI_API_KEY
            and self.AZURE_OPENAI_DEPLOYMENT
        ):
            raise RuntimeError(
                "Azure OpenAI credentials missing. Set AZURE_OPENAI_ENDPOINT, "
                "AZURE_OPENAI_API_KEY and AZURE_OPENAI_DEPLOYMENT."
            )


settings = Settings()
settings.validate()
