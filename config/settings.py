"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./data/login.db"
    create_tables: bool = True          # run create_all on startup

    # ── Uploads ──────────────────────────────────────────────────────────
    data_dir: str = "./data"            # photo paths in the DB are relative to this

    # ── Security ─────────────────────────────────────────────────────────
    bcrypt_rounds: int = 12
    report_duplicate_username: bool = False   # 409 instead of a generic 500

    # ── Server ───────────────────────────────────────────────────────────
    api_prefix: str = "/api"
    port: int = 7001
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
