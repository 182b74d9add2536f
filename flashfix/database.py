# flashfix/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from .config import settings

# SQLAlchemy database URL สำหรับ MySQL (ใช้ DATABASE_URL แทนได้ถ้ากำหนดไว้)
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL or (
    f"mysql+pymysql://{settings.DATABASE_USERNAME}:{settings.DATABASE_PASSWORD}@"
    f"{settings.DATABASE_HOST}:{settings.DATABASE_PORT}/{settings.DATABASE_NAME}"
)


def build_engine(url: str):
    """
    สร้าง Engine ตามชนิดฐานข้อมูล
    SQLite แบบ in-memory ต้องใช้ connection เดียวร่วมกันทุก thread
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True, pool_size=10, max_overflow=0)


# สร้าง Engine และ Session
engine = build_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# กำหนด Base สำหรับการสร้างโมเดล
Base = declarative_base()

# Dependency ที่ใช้เรียก SessionLocal ในแต่ละ request
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
