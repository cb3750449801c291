from typing import List, Optional

from studio.core.errors import NotFoundError, ValidationError
from studio.core.logger import logger
from studio.db.models import Package
from studio.repositories.base import PackageRepository
from studio.services.storage import delete_package_image


class PackageService:
    """
    Package CRUD. Stored images are removed through the storage
    collaborator on delete and when an update swaps the image; that call
    is best effort and not tied to the database write.
    """

    def __init__(self, packages: PackageRepository, delete_image=None):
        self.packages = packages
        self.delete_image = delete_image or delete_package_image

    def list(self, active_only: bool = False) -> List[Package]:
        return self.packages.list(active_only=active_only)

    def get(self, package_id: str) -> Package:
        package = self.packages.get(package_id)
        if not package:
            raise NotFoundError("Package not found")
        return package

    def create(
        self,
        *,
        name: str,
        price: float,
        duration: float,
        description: Optional[str] = None,
        image: Optional[str] = None,
        is_active: bool = True,
        created_by: Optional[str] = None,
    ) -> Package:
        _validate_package(name, price, duration)

        package = self.packages.add(
            Package(
                name=name.strip(),
                description=description,
                image=image,
                price=price,
                duration=duration,
                is_active=is_active,
                created_by=created_by,
            )
        )
        logger.info(f"Package {package.id} created: {package.name}")
        return package

    def update(
        self,
        package_id: str,
        *,
        name: str,
        price: float,
        duration: float,
        description: Optional[str] = None,
        image: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Package:
        package = self.get(package_id)
        _validate_package(name, price, duration)

        old_image = package.image
        if old_image and old_image != image:
            self.delete_image(old_image)

        package.name = name.strip()
        package.description = description
        package.image = image
        package.price = price
        package.duration = duration
        if is_active is not None:
            package.is_active = is_active

        return self.packages.save(package)

    def delete(self, package_id: str) -> None:
        package = self.get(package_id)

        if package.image and not self.delete_image(package.image):
            logger.warning(f"Image for package {package_id} was not deleted: {package.image}")

        self.packages.delete(package)
        logger.info(f"Package {package_id} deleted")


def _validate_package(name: str, price: float, duration: float):
    if not name or not name.strip():
        raise ValidationError("Package name is required")

    if price is None or price < 0:
        raise ValidationError("Price must not be negative")

    if duration is None or duration <= 0:
        raise ValidationError("Duration must be greater than zero")
