# storefront/services/product_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.storage_utils import (
    delete_public_url,
    generate_filename,
    upload_to_storage,
)
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductUpdate


# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - catalog listing / search
      - admin create / update / delete / stock
      - image upload/delete orchestration with Supabase Storage
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _validate_and_get_ext(content_type: str, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
            )

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="Image too large (max 5MB).",
            )

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        return self.repo.list_products(
            session, skip=skip, limit=limit, category=category, search=search
        )

    def list_low_stock(
        self, session: Session, threshold: int = 10, limit: int = 50
    ) -> list[Product]:
        return self.repo.list_low_stock(session, threshold=threshold, limit=limit)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(**payload.model_dump())
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product.

        Cart totals re-read products, so a price or discount change is
        visible on the next cart read; nothing is locked meanwhile.
        """
        product = self.get_product(session, product_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(product, field, value)

        return self.repo.update(session, product)

    def update_stock(
        self, session: Session, product_id: uuid.UUID, stock: int
    ) -> Product:
        product = self.get_product(session, product_id)
        product.stock = stock
        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product and clean up its image in Storage.
        """
        product = self.get_product(session, product_id)

        if product.image_url:
            delete_public_url(product.image_url)

        self.repo.delete(session, product)

    # ----- Image -----

    def set_image(
        self,
        session: Session,
        product_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> Product:
        """
        Upload or replace the product image.

        Path pattern:
            products/<product_id>/<uuid>.<ext>
        """
        product = self.get_product(session, product_id)
        ext = self._validate_and_get_ext(content_type, file_bytes)

        if product.image_url:
            delete_public_url(product.image_url)

        path = f"products/{product.id}/{generate_filename(ext)}"
        product.image_url = upload_to_storage(path, file_bytes, content_type)

        return self.repo.update(session, product)
