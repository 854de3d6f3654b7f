# src/lazyhydration/config.py

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Settings for the default database binding and logging (Pydantic v2).

    - Keys are read from the environment (or .env) with the
      LAZYHYDRATION_ prefix, e.g. LAZYHYDRATION_DATABASE_URL.
    - DATABASE_* only matter when an iterator is built without a session.
    - LOG_LEVEL / JSON_LOGS are the defaults of configure_logging().
    """

    # ------------------------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------------------------
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=True)

    # ------------------------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------------------------
    DATABASE_URL: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="Sync SQLAlchemy URL used by the default session factory",
    )
    DATABASE_ECHO: bool = Field(default=False)
    DATABASE_POOL_PRE_PING: bool = Field(default=True)

    model_config = {
        "env_prefix": "LAZYHYDRATION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
