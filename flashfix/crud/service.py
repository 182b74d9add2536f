# flashfix/crud/service.py

from sqlalchemy.orm import Session
from sqlalchemy import or_, func
from flashfix.models.service import Service
from flashfix.models.order import Order
from flashfix.schemas.service import ServiceCreate
from datetime import datetime
from typing import Optional


def get_services(
    db: Session,
    page: int = 1,
    limit: int = 20,
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
):
    """
    ดึงรายการบริการแบบแบ่งหน้า คืนค่า (services, total)
    """
    query = db.query(Service)
    if category:
        query = query.filter(Service.category == category)
    if is_active is not None:
        query = query.filter(Service.is_active == is_active)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Service.name.ilike(pattern), Service.description.ilike(pattern)))

    total = query.count()
    services = (
        query.order_by(Service.created_at.desc(), Service.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return services, total

def get_service_by_id(db: Session, service_id: int):
    return db.query(Service).filter(Service.id == service_id).first()

def get_active_service(db: Session, service_id: int):
    return db.query(Service).filter(Service.id == service_id, Service.is_active.is_(True)).first()

def create_service(db: Session, service: ServiceCreate):
    db_service = Service(**service.model_dump(), created_at=datetime.utcnow())
    db.add(db_service)
    db.commit()
    db.refresh(db_service)
    return db_service

def update_service(db: Session, db_service: Service, fields: dict):
    for key, value in fields.items():
        setattr(db_service, key, value)
    db_service.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(db_service)
    return db_service

def service_has_orders(db: Session, service_id: int) -> bool:
    return db.query(Order.id).filter(Order.service_id == service_id).first() is not None

def delete_service(db: Session, db_service: Service):
    db.delete(db_service)
    db.commit()
    return db_service

# หมวดหมู่ของบริการที่เปิดใช้งานอยู่
def get_categories(db: Session):
    rows = db.query(Service.category).filter(Service.is_active.is_(True)).distinct().all()
    return sorted(category for category, in rows)

def get_popular_services(db: Session, limit: int = 10):
    """
    บริการที่มีออเดอร์มากที่สุด คืนค่า list ของ (service, order_count)
    """
    order_count = func.count(Order.id).label("order_count")
    return (
        db.query(Service, order_count)
        .outerjoin(Order, Order.service_id == Service.id)
        .filter(Service.is_active.is_(True))
        .group_by(Service.id)
        .order_by(order_count.desc(), Service.created_at.desc(), Service.id.desc())
        .limit(limit)
        .all()
    )
