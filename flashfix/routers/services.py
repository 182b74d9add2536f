# flashfix/routers/services.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional

from flashfix.database import get_db
from flashfix.models.role import UserRole
from flashfix.models.user import User
from flashfix.schemas.service import ServiceCreate, ServiceUpdate, ServiceOut, PopularServiceOut
from flashfix.crud import service as service_crud
from flashfix.services.auth import require_roles
from flashfix.utils.response import success_response, paginated_response

router = APIRouter(prefix="/services", tags=["Services"])

admin_only = require_roles(UserRole.ADMIN)

# ---------------------------------------------------------------------
# PUBLIC
# ---------------------------------------------------------------------
@router.get("")
def get_services(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[str] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    services, total = service_crud.get_services(
        db, page=page, limit=limit, category=category, is_active=is_active, search=search
    )
    data = [ServiceOut.model_validate(service) for service in services]
    return paginated_response("Services retrieved successfully", data, page, limit, total)

@router.get("/categories")
def get_service_categories(db: Session = Depends(get_db)):
    return success_response("Service categories retrieved successfully", service_crud.get_categories(db))

@router.get("/popular")
def get_popular_services(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    rows = service_crud.get_popular_services(db, limit=limit)
    data = [
        PopularServiceOut(**ServiceOut.model_validate(service).model_dump(), order_count=order_count)
        for service, order_count in rows
    ]
    return success_response("Popular services retrieved successfully", data)

@router.get("/{service_id}")
def get_service(service_id: int, db: Session = Depends(get_db)):
    service = service_crud.get_service_by_id(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return success_response("Service retrieved successfully", ServiceOut.model_validate(service))

# ---------------------------------------------------------------------
# ADMIN ONLY
# ---------------------------------------------------------------------
@router.post("")
def create_service(
    payload: ServiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    service = service_crud.create_service(db, payload)
    return success_response("Service created successfully", ServiceOut.model_validate(service), status_code=201)

@router.put("/{service_id}")
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    service = service_crud.get_service_by_id(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")

    fields = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
    service = service_crud.update_service(db, service, fields)
    return success_response("Service updated successfully", ServiceOut.model_validate(service))

@router.delete("/{service_id}")
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    service = service_crud.get_service_by_id(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    if service_crud.service_has_orders(db, service_id):
        raise HTTPException(status_code=400, detail="Cannot delete service with existing orders")

    service_crud.delete_service(db, service)
    return success_response("Service deleted successfully")
