import hashlib
import logging
from datetime import datetime

from sitelog.config import settings
from sitelog.logging_config import configure_logging
from .database import engine, SessionLocal, Base
from .models import User, GlobalRole

logger = logging.getLogger(__name__)

def initialize_db():
    """
    DB와 테이블을 생성하고, 최초 관리자 계정을 삽입합니다.
    관리자 계정이 없으면 아무도 다른 사용자를 승인할 수 없기 때문에 시드 데이터가 필요합니다.
    """
    logger.info("Initializing database at %s", settings.database_url)

    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.query(User).filter(User.role_global == GlobalRole.ADMIN).first():
            logger.info("Admin account already exists. Skipping seed data.")
            return

        password_hash = hashlib.sha256(settings.seed_admin_password.encode('utf-8')).hexdigest()
        admin_user = User(
            name='Administrator',
            email=settings.seed_admin_email,
            password_hash=password_hash,
            role_global=GlobalRole.ADMIN,
            is_active=True,
            approved_at=datetime.now(),
        )
        db.add(admin_user)
        db.commit()
        logger.info("Seeded admin account '%s'.", settings.seed_admin_email)

    except Exception:
        logger.exception("Database initialization failed. Rolling back.")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == '__main__':
    configure_logging()
    initialize_db()
