from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "fleet-dev-secret-change-in-production-32+"


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/db.sqlite3"
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_issuer: str = "FleetCarAPI"
    jwt_audience: str = "FleetCarClient"
    jwt_expire_minutes: int = 60
    upload_dir: str = "./data/uploads"
    max_image_size_bytes: int = 5 * 1024 * 1024  # 5MB
    cors_origins: list[str] = ["http://localhost:5173"]
    seed_demo_data: bool = True
    admin_username: str = "admin"
    admin_password: str = "admin123"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
