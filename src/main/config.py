from functools import lru_cache
import json
import os
from typing import Any, Literal

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BroadcastingConfig(BaseModel):
    EMAIL_SERVER: str
    EMAIL_PORT: int
    EMAIL_PASSWORD: str
    EMAIL_USER: str
    EMAIL_FROM_NAME: str
    EMAIL_USE_TLS: bool
    EMAIL_STARTTLS: bool
    VALIDATE_CERTS: bool

    model_config = ConfigDict(extra="ignore")


class RedisConfig(BaseModel):
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""
    REDIS_DATABASE: str = "0"

    model_config = ConfigDict(extra="ignore")

    @property
    def dsn(self) -> str:
        return (
            f"redis://:"
            f"{self.REDIS_PASSWORD}@"
            f"{self.REDIS_HOST}:"
            f"{self.REDIS_PORT}/"
            f"{self.REDIS_DATABASE}"
        )


class SentryConfig(BaseModel):
    SENTRY_DSN: str | None = None
    SENTRY_ENV: str = "development"
    SENTRY_ENABLED: bool = False

    model_config = ConfigDict(extra="ignore")


class JWTConfig(BaseModel):
    JWT_SECRET_KEY: str = Field(min_length=1)
    ALGORITHM: str = "HS256"

    SESSION_TOKEN_EXPIRE_DAYS: int = Field(7, gt=0)
    SESSION_INACTIVITY_TIMEOUT_SECONDS: int = Field(86_400, gt=0)

    model_config = ConfigDict(extra="ignore")

    @property
    def session_token_max_age_seconds(self) -> int:
        return self.SESSION_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


class SessionCookieConfig(BaseModel):
    AUTH_COOKIE_NAME: str = "auth_token"
    AUTH_COOKIE_SECURE: bool = True
    AUTH_COOKIE_HTTPONLY: bool = False
    AUTH_COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "strict"

    model_config = ConfigDict(extra="ignore")


class OTPConfig(BaseModel):
    OTP_LENGTH: int = Field(6, gt=0)
    OTP_EXPIRE_MINUTES: int = Field(10, gt=0)
    OTP_RESEND_THROTTLE_SECONDS: int = Field(60, ge=0)

    model_config = ConfigDict(extra="ignore")


class CacheConfig(BaseModel):
    CACHE_BACKEND: Literal["memory", "redis"] = "memory"
    TOKEN_VERIFICATION_CACHE_TTL_SECONDS: int = Field(60, gt=0)
    DATA_CACHE_TTL_SECONDS: int = Field(60, gt=0)
    CACHE_KEY_PREFIX: str = "colocshare"

    model_config = ConfigDict(extra="ignore")


class PostgresConfig(BaseModel):
    DB_ECHO: bool

    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_HOST: str
    POSTGRES_PORT: int
    POSTGRES_DB: str

    model_config = ConfigDict(extra="ignore")

    @property
    def dsn_async(self) -> str:
        return (
            f"postgresql+asyncpg://"
            f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )


class AppConfig(BaseModel):
    VERSION: str
    DEBUG: bool = False
    TESTING: bool = False

    LOG_LEVEL: str
    LOG_LEVEL_FILE: str

    CORS_ALLOWED_ORIGINS: list[str] = Field(["*"])
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOWED_METHODS: list[str] = Field(["*"])
    CORS_ALLOWED_HEADERS: list[str] = Field(["*"])
    CORS_EXPOSE_HEADERS: list[str] = Field(["*"])

    PROJECT_NAME: str

    model_config = ConfigDict(extra="ignore")

    @field_validator(
        "CORS_ALLOWED_ORIGINS",
        "CORS_ALLOWED_METHODS",
        "CORS_ALLOWED_HEADERS",
        "CORS_EXPOSE_HEADERS",
        mode="before",
    )
    @classmethod
    def parse_cors_list(cls, v: Any) -> list[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip().startswith("[") and v.strip().endswith("]"):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except json.JSONDecodeError:
                pass
        sep = "," if "," in v else ";"
        return [item.strip() for item in v.split(sep) if item.strip()]


class Config(BaseModel):
    app: AppConfig
    jwt: JWTConfig
    otp: OTPConfig
    cache: CacheConfig
    cookie: SessionCookieConfig
    redis: RedisConfig
    sentry: SentryConfig
    postgres: PostgresConfig
    broadcasting: BroadcastingConfig

    model_config = ConfigDict(extra="ignore")


@lru_cache
def get_settings() -> Config:
    """
    Cached settings factory. Override in tests via monkeypatching or dependency overrides.

    A missing JWT_SECRET_KEY fails here with a pydantic ValidationError, so the
    application never starts without a signing key.
    """
    env_filename = ".env.test" if os.getenv("TESTING") == "true" else ".env"
    env_file_values = dotenv_values(env_filename)
    merged_env: dict[str, Any] = {
        k: v
        for k, v in {**env_file_values, **dict(os.environ)}.items()
        if v is not None
    }

    return Config(
        app=AppConfig(**merged_env),
        jwt=JWTConfig(**merged_env),
        otp=OTPConfig(**merged_env),
        cache=CacheConfig(**merged_env),
        cookie=SessionCookieConfig(**merged_env),
        redis=RedisConfig(**merged_env),
        sentry=SentryConfig(**merged_env),
        postgres=PostgresConfig(**merged_env),
        broadcasting=BroadcastingConfig(**merged_env),
    )


config = get_settings()

