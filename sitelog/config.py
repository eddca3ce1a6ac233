# sitelog/config.py
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# 프로젝트 루트의 .env 파일이 있으면 환경 변수로 읽어옵니다. (이미 설정된 값은 덮어쓰지 않음)
load_dotenv()


@dataclass(frozen=True)
class Settings:
    """환경 변수에서 읽어온 애플리케이션 설정값."""
    database_url: str
    session_ttl_hours: int
    log_level: str
    host: str
    port: int
    seed_admin_email: str
    seed_admin_password: str


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("SITELOG_DATABASE_URL", "sqlite:///sitelog.db"),
        session_ttl_hours=int(os.getenv("SITELOG_SESSION_TTL_HOURS", "168")),
        log_level=os.getenv("SITELOG_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("SITELOG_HOST", ""),
        port=int(os.getenv("SITELOG_PORT", "8000")),
        seed_admin_email=os.getenv("SITELOG_ADMIN_EMAIL", "admin@sitelog.local"),
        seed_admin_password=os.getenv("SITELOG_ADMIN_PASSWORD", "admin"),
    )


settings = load_settings()
