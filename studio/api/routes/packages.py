from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session
from typing import List

from studio.db.session import get_db
from studio.db.models import Admin
from studio.api.deps import get_current_admin, get_package_service
from studio.schemas.packages import PackageCreate, PackageImageOut, PackageOut, PackageUpdate
from studio.services.packages import PackageService
from studio.services.storage import save_package_image
from studio.services.audit import log_action

router = APIRouter(
    prefix="/packages",
    tags=["Packages"],
)


"""
PACKAGE ROUTES => STUDIO SESSIONS ON OFFER

Listing is public, every write is admin-only and audited.
"""


@router.get("", response_model=List[PackageOut])
def list_packages(
    active: bool = Query(False),
    service: PackageService = Depends(get_package_service),
):
    return service.list(active_only=active)


@router.get("/{package_id}", response_model=PackageOut)
def get_package(
    package_id: str,
    service: PackageService = Depends(get_package_service),
):
    return service.get(package_id)


@router.post("", response_model=PackageOut, status_code=201)
def create_package(
    payload: PackageCreate,
    service: PackageService = Depends(get_package_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    package = service.create(
        name=payload.name,
        description=payload.description,
        image=payload.image,
        price=payload.price,
        duration=payload.duration,
        is_active=payload.is_active,
        created_by=admin.email,
    )

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="package.created",
        details=f"package_id={package.id}",
    )

    return package


@router.put("/{package_id}", response_model=PackageOut)
def update_package(
    package_id: str,
    payload: PackageUpdate,
    service: PackageService = Depends(get_package_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    package = service.update(
        package_id,
        name=payload.name,
        description=payload.description,
        image=payload.image,
        price=payload.price,
        duration=payload.duration,
        is_active=payload.is_active,
    )

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="package.updated",
        details=f"package_id={package.id}",
    )

    return package


@router.delete("/{package_id}", response_model=dict)
def delete_package(
    package_id: str,
    service: PackageService = Depends(get_package_service),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    service.delete(package_id)

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="package.deleted",
        details=f"package_id={package_id}",
    )

    return {"message": "Package deleted successfully"}


#Store an uploaded image and return the URL to put on a package
@router.post("/images", response_model=PackageImageOut, status_code=201)
def upload_package_image(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    url = save_package_image(file.content_type, file.file.read())

    log_action(
        db=db,
        actor_type="admin",
        actor_id=admin.id,
        action="package.image_uploaded",
        details=f"url={url}",
    )

    return {"url": url}
