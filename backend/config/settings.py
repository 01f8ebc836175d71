from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache
from typing import List
import os


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can come from:
    - docker-compose.yml environment section
    - .env file (for secrets like the JWT key)
    - System environment

    Variable names match docker-compose conventions:
    - NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD (for the graph store)
    - JWT_SECRET_KEY / SECRET_KEY (for identity tokens)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # JWT - uses SECRET_KEY from .env or generates default
    jwt_secret_key: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Neo4j (from docker-compose)
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "secret"
    neo4j_database: str = "neo4j"
    neo4j_max_pool_size: int = 50
    neo4j_acquisition_timeout: float = 30.0

    # HTTP
    cors_origins: List[str] = ["*"]
    moment_list_max_limit: int = 100

    @field_validator('jwt_secret_key', mode='before')
    @classmethod
    def get_jwt_secret(cls, v):
        """Use SECRET_KEY from env if JWT_SECRET_KEY not set"""
        if v and v != "dev-secret-key-change-in-production":
            return v
        # Fall back to SECRET_KEY (used in .env)
        return os.getenv('SECRET_KEY', v or 'dev-secret-key-change-in-production')

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        return str(v or "INFO").upper()

    @field_validator('neo4j_max_pool_size', 'moment_list_max_limit')
    @classmethod
    def require_positive(cls, v):
        if v <= 0:
            raise ValueError("must be > 0")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
