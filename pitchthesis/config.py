import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    app_env: str = os.getenv("APP_ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_origins: str = os.getenv("CORS_ORIGINS", "")

    # Completion service (xAI's OpenAI-compatible API)
    xai_api_key: str = os.getenv("XAI_API_KEY", "")
    llm_api_base: str = os.getenv("LLM_API_BASE", "https://api.x.ai/v1")
    llm_model: str = os.getenv("LLM_MODEL", "grok-2-mini")
    llm_key_prefix: str = os.getenv("LLM_KEY_PREFIX", "xai-")
    llm_timeout_seconds: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))

    # Blob storage
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    s3_bucket_name: str = os.getenv("S3_BUCKET_NAME", "")

    # Relational store
    database_url: str = os.getenv("POSTGRES_URI") or os.getenv("DATABASE_URL") or "sqlite:///./pitchthesis.db"
    postgres_ssl: bool = os.getenv("POSTGRES_SSL", "false").lower() == "true"

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "dev_secret_change_me")
    jwt_algo: str = os.getenv("JWT_ALGO", "HS256")
    jwt_ttl_seconds: int = int(os.getenv("JWT_TTL_SECONDS", str(24 * 60 * 60)))

    # Scratch space for deck extraction
    upload_dir: str = os.getenv("UPLOAD_DIR", "")

    def allowed_origins(self) -> List[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["http://localhost:3000"]  # CRA dev default

settings = Settings()
