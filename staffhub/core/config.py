from dataclasses import dataclass
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    app_name: str = "StaffHub Access & Leave Engine"
    api_version: str = "v1"
    secret_key: str = os.getenv("STAFFHUB_SECRET_KEY", "change-me-for-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))
    jurisdiction: str = os.getenv("STAFFHUB_JURISDICTION", "PT")
    leave_notice_days: int = int(os.getenv("STAFFHUB_LEAVE_NOTICE_DAYS", "15"))
    default_leave_days: int = int(os.getenv("STAFFHUB_DEFAULT_LEAVE_DAYS", "22"))
    # Longest inclusive date range, in calendar days, accepted for counting.
    max_range_days: int = int(os.getenv("STAFFHUB_MAX_RANGE_DAYS", "3660"))
    log_level: str = os.getenv("STAFFHUB_LOG_LEVEL", "INFO")
    log_file: str = os.getenv("STAFFHUB_LOG_FILE", "staffhub.log")
    data_dir: Path = Path(os.getenv("STAFFHUB_DATA_DIR", Path(__file__).resolve().parents[2] / "data"))


settings = Settings()
settings.data_dir.mkdir(parents=True, exist_ok=True)
