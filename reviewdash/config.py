"""Configuration settings for the dashboard client."""
from typing import Any, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""
    
    app_name: str = "Transaction Analyzer"
    debug: bool = False
    log_level: str = "INFO"
    
    # Backend service ("mock:" selects the in-memory gateway)
    backend_url: str = "http://localhost:8000"
    upload_path: str = "/transaction-upload/upload"
    merchant_path: str = "/transfer-normalizer/analyze"
    transaction_path: str = "/transfer-normalizer/transactions/{id}"
    pattern_path: str = "/pattern-analyzer/analyze"
    request_timeout: Optional[float] = 30.0
    
    notification_duration_ms: int = 3000
    
    # Dashboard server
    ui_host: str = "0.0.0.0"
    ui_port: int = 8003
    
    @field_validator("request_timeout", mode="before")
    @classmethod
    def parse_timeout(cls, v: Any) -> Any:
        """Empty or "none" disables the timeout (wait forever)."""
        if isinstance(v, str) and v.strip().lower() in ("", "none"):
            return None
        return v
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
