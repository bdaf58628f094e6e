"""Service catalog router - bookable services."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from agenda.core.deps import get_current_principal, get_db, require_csrf_header
from agenda.schemas.catalog import ServiceCreate, ServiceRead
from agenda.services import catalog_service

router = APIRouter()


@router.get("", response_model=list[ServiceRead])
def list_services(db: Session = Depends(get_db)):
    """List active services."""
    return catalog_service.list_services(db)


@router.get("/{service_id}", response_model=ServiceRead)
def get_service(service_id: UUID, db: Session = Depends(get_db)):
    service = catalog_service.get_service(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post(
    "",
    response_model=ServiceRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_service(
    data: ServiceCreate,
    principal: str = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create a service."""
    return catalog_service.create_service(
        db,
        name=data.name,
        description=data.description,
        duration_minutes=data.duration_minutes,
        cost=data.cost,
    )
