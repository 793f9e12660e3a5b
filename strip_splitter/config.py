from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class SplitDefaults(BaseModel):
    """Split settings used when a request leaves a field out."""

    split_height: int = Field(default=1280, gt=0, description="Target segment height in pixels")
    sensitivity: int = Field(default=90, ge=0, le=100, description="Cut row sensitivity (higher = stricter)")
    scan_line_step: int = Field(default=5, ge=0, description="Row increment while searching for a cut row")
    ignorable_border: int = Field(default=5, ge=0, description="Columns ignored on each side of a row")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # Redis Settings
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0

    # Job Settings
    job_timeout: int = 3600  # 1 hour, long batches of large strips
    job_result_ttl: int = 86400  # 1 day

    # Webhook Settings
    webhook_timeout: int = 30
    webhook_max_retries: int = 3

    # Split defaults
    splitting: SplitDefaults = SplitDefaults()

    # Output naming
    output_prefix: str = "output_"
    output_format: str = "png"
    image_extensions: list[str] = ["png", "jpg", "jpeg", "webp", "bmp"]

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
