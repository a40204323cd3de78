"""Application settings using Pydantic Settings"""
from typing import List
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    
    IMPORT_BATCH_SIZE: int = 50
    PREVIEW_LIMIT: int = 5
    CSV_MAX_UPLOAD_MB: int = 10
    IMPORT_SESSION_TTL_MINUTES: int = 30
    
    STORE_TIMEOUT_SECONDS: float = 15.0
    STORE_READ_ATTEMPTS: int = 2
    
    MATCH_BAND_EXCELLENT: int = 80
    MATCH_BAND_GOOD: int = 60
    MATCH_BAND_FAIR: int = 40
    
    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = ["dev", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of: {allowed}")
        return v
    
    @field_validator("IMPORT_BATCH_SIZE", "STORE_READ_ATTEMPTS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v
    
    @model_validator(mode="after")
    def validate_match_bands(self) -> "Settings":
        if not (100 >= self.MATCH_BAND_EXCELLENT > self.MATCH_BAND_GOOD > self.MATCH_BAND_FAIR >= 0):
            raise ValueError(
                "MATCH_BAND_EXCELLENT > MATCH_BAND_GOOD > MATCH_BAND_FAIR must hold within 0-100"
            )
        return self
    
    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "prod"
    
    @property
    def max_upload_bytes(self) -> int:
        return self.CSV_MAX_UPLOAD_MB * 1024 * 1024
    
    @property
    def match_bands(self) -> List[int]:
        return [self.MATCH_BAND_EXCELLENT, self.MATCH_BAND_GOOD, self.MATCH_BAND_FAIR]
    
    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def get_settings() -> Settings:
    return settings
