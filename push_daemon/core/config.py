from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings

USER_UNIT_DIR = Path.home() / ".config" / "systemd" / "user"
SYSTEM_UNIT_DIR = Path("/etc/systemd/system")


class Settings(BaseSettings):
    PROJECT_NAME: str = "push-daemon"
    SERVICE_NAME: str = "push-daemon"
    SERVICE_DESCRIPTION: str = "Push notification forwarding daemon"
    SERVICE_USER_MODE: bool = True
    UNIT_DIR: Path | None = None
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    FIREBASE_CREDENTIALS_PATH: str = "auth.json"
    PID_FILE: Path = Path("/tmp/push-daemon.pid")
    LOG_LEVEL: str = "INFO"

    # systemctl only looks for units where its mode expects them
    @model_validator(mode="after")
    def default_unit_dir(self) -> "Settings":
        if self.UNIT_DIR is None:
            self.UNIT_DIR = USER_UNIT_DIR if self.SERVICE_USER_MODE else SYSTEM_UNIT_DIR
        return self

    class Config:
        env_file = ".env"


settings = Settings()
