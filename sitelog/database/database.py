from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from sitelog.config import settings

# 데이터베이스 연결 문자열은 SITELOG_DATABASE_URL 환경 변수에서 읽어옵니다. (기본값: SQLite)
SQLALCHEMY_DATABASE_URL = settings.database_url

# connect_args는 SQLite에서만 필요합니다. (thread-safe 설정)
connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite는 연결마다 외래 키 검사를 켜야 합니다. (기본값: 꺼짐)"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    event.listen(engine, "connect", enable_sqlite_foreign_keys)

# autocommit=False, autoflush=False로 설정하여, 명시적으로 commit을 호출해야 DB에 반영됩니다.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 모든 모델 클래스가 상속받을 Base 클래스
Base = declarative_base()
