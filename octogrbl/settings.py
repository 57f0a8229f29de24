# octogrbl/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import DEFAULT_UPLOAD_URL


class Settings(BaseSettings):
    # OctoPrint file-upload resource
    upload_url: str = DEFAULT_UPLOAD_URL
    api_key: str = ""
    autoplay: bool = True

    # Laser bed in millimetres
    bed_width: float = 250.0
    bed_height: float = 280.0
    flip_x: bool = False
    flip_y: bool = False

    # Seconds before an upload is given up
    upload_timeout: float = 30.0
    log_level: str = "INFO"

    # Values can also come from a .env file, e.g. OCTOGRBL_API_KEY=...
    model_config = SettingsConfigDict(env_prefix="OCTOGRBL_", env_file=".env", env_file_encoding="utf-8")


settings = Settings()
