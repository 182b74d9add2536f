# -*- coding: utf-8 -*-
import os
import pymysql
from datetime import datetime
from dotenv import load_dotenv
from sqlalchemy.exc import IntegrityError
from flashfix.config import settings
from flashfix.database import Base, engine, SessionLocal, SQLALCHEMY_DATABASE_URL
from flashfix.models import User, UserRole, Service
from flashfix.services.auth import hash_password

# ✅ โหลดค่าตัวแปรจาก .env
load_dotenv()

ADMIN_NAME = os.getenv("ADMIN_NAME", "System Admin")
ADMIN_PHONE = os.getenv("ADMIN_PHONE", "13800000000")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

SERVICES_DATA = [
    {"name": "Screen Replacement", "description": "Replace cracked or unresponsive phone screens", "category": "phone", "base_price": 299.0, "estimated_duration": 60},
    {"name": "Battery Replacement", "description": "Replace worn-out phone batteries", "category": "phone", "base_price": 149.0, "estimated_duration": 45},
    {"name": "Water Damage Repair", "description": "Clean and repair liquid-damaged devices", "category": "phone", "base_price": 199.0, "estimated_duration": 120},
    {"name": "Laptop Keyboard Repair", "description": "Fix or replace laptop keyboards", "category": "laptop", "base_price": 259.0, "estimated_duration": 90},
    {"name": "System Reinstall", "description": "Operating system reinstall and data backup", "category": "laptop", "base_price": 99.0, "estimated_duration": 60},
    {"name": "Tablet Charging Port Repair", "description": "Repair or replace tablet charging ports", "category": "tablet", "base_price": 129.0, "estimated_duration": 60},
]


def create_database():
    """
    ✅ เชื่อมต่อ MySQL และสร้าง database ถ้ายังไม่มี (ข้ามถ้าใช้ DATABASE_URL อื่น)
    """
    if settings.DATABASE_URL:
        return
    connection = pymysql.connect(
        host=settings.DATABASE_HOST,
        user=settings.DATABASE_USERNAME,
        password=settings.DATABASE_PASSWORD,
        port=int(settings.DATABASE_PORT),
    )
    try:
        with connection.cursor() as cursor:
            cursor.execute(
                f"CREATE DATABASE IF NOT EXISTS `{settings.DATABASE_NAME}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
    finally:
        connection.close()

def init_db():
    # ✅ สร้างตารางทั้งหมดใน database
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # ✅ เพิ่มบัญชีแอดมินเริ่มต้น
        admin = db.query(User).filter(User.phone == ADMIN_PHONE).first()
        if not admin:
            db.add(User(
                name=ADMIN_NAME,
                phone=ADMIN_PHONE,
                role=UserRole.ADMIN.value,
                password_hash=hash_password(ADMIN_PASSWORD),
                created_at=datetime.utcnow(),
            ))
            print(f"➕ เพิ่มแอดมิน: {ADMIN_PHONE}")
        db.commit()

        # ✅ เพิ่มรายการบริการ (Services)
        for service_data in SERVICES_DATA:
            service = db.query(Service).filter(
                Service.name == service_data["name"],
                Service.category == service_data["category"],
            ).first()
            if not service:
                db.add(Service(**service_data, is_active=True, created_at=datetime.utcnow()))
                print(f"➕ เพิ่มบริการ: {service_data['name']}")
        db.commit()

    except IntegrityError as e:
        db.rollback()
        print(f"❌ เกิดข้อผิดพลาด Integrity Error: {str(e)}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_database()
    init_db()
    print(f"✅ Database `{SQLALCHEMY_DATABASE_URL.rsplit('/', 1)[-1]}` and Tables created successfully!")
