from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from uuid import UUID
import logging

from app.modules.inventory.models import Product, InventoryMovement, MovementType
from app.modules.inventory.schemas import (
    ProductCreate, ProductUpdate, ProductOut, ProductList, StockAdjustment
)

logger = logging.getLogger(__name__)

MIN_BARCODE_LENGTH = 4


class InventoryService:
    def __init__(self, db: Session):
        self.db = db

    def _base_query(self, tenant_id: UUID):
        return self.db.query(Product).filter(
            Product.tenant_id == tenant_id,
            Product.deleted_at.is_(None)
        )

    def _check_unique(self, tenant_id: UUID, sku: Optional[str], barcode: Optional[str],
                      exclude_id: Optional[UUID] = None):
        for field, value, label in ((Product.sku, sku, "SKU"), (Product.barcode, barcode, "código de barras")):
            if not value:
                continue
            query = self._base_query(tenant_id).filter(field == value)
            if exclude_id:
                query = query.filter(Product.id != exclude_id)
            if query.first():
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Ya existe un producto con {label} '{value}'"
                )

    def create_product(self, data: ProductCreate, tenant_id: UUID, user_id: Optional[UUID] = None) -> Product:
        self._check_unique(tenant_id, data.sku, data.barcode)
        product = Product(tenant_id=tenant_id, **data.model_dump())
        try:
            self.db.add(product)
            self.db.flush()
            if product.quantity_in_stock:
                self.db.add(InventoryMovement(
                    tenant_id=tenant_id,
                    product_id=product.id,
                    quantity=product.quantity_in_stock,
                    movement_type=MovementType.IN.value,
                    notes="Initial stock",
                    created_by=user_id
                ))
            self.db.commit()
            self.db.refresh(product)
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="SKU o código de barras duplicado")
        return product

    def get_product(self, product_id: UUID, tenant_id: UUID) -> Product:
        product = self._base_query(tenant_id).filter(Product.id == product_id).first()
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    def list_products(
        self,
        tenant_id: UUID,
        search: Optional[str] = None,
        in_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0
    ) -> ProductList:
        """Listar productos; `search` busca por nombre o SKU sin distinguir mayúsculas"""
        query = self._base_query(tenant_id)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))
        if in_stock_only:
            query = query.filter(Product.quantity_in_stock > 0)

        total = query.count()
        products = query.order_by(func.lower(Product.name)).offset(offset).limit(limit).all()
        return ProductList(
            products=[ProductOut.model_validate(p) for p in products],
            total=total,
            limit=limit,
            offset=offset
        )

    def get_by_barcode(self, barcode: str, tenant_id: UUID) -> Product:
        """Búsqueda exacta para lectores de código de barras"""
        barcode = (barcode or "").strip()
        if len(barcode) < MIN_BARCODE_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"El código de barras debe tener al menos {MIN_BARCODE_LENGTH} caracteres"
            )
        product = self._base_query(tenant_id).filter(Product.barcode == barcode).first()
        if not product:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        return product

    def update_product(self, product_id: UUID, data: ProductUpdate, tenant_id: UUID) -> Product:
        product = self.get_product(product_id, tenant_id)
        changes = data.model_dump(exclude_unset=True)
        self._check_unique(tenant_id, changes.get("sku"), changes.get("barcode"), exclude_id=product.id)

        for field, value in changes.items():
            if field in ("name", "price") and value is None:
                continue
            setattr(product, field, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product_id: UUID, tenant_id: UUID) -> None:
        product = self.get_product(product_id, tenant_id)
        self.db.delete(product)
        self.db.commit()

    def apply_stock_change(self, product: Product, delta: int, movement_type: MovementType,
                           reference: Optional[str] = None, notes: Optional[str] = None,
                           user_id: Optional[UUID] = None) -> InventoryMovement:
        """Cambiar stock y registrar el movimiento sin confirmar la sesión"""
        new_quantity = product.quantity_in_stock + delta
        if new_quantity < 0:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Stock insuficiente para '{product.name}': disponible {product.quantity_in_stock}"
            )
        product.quantity_in_stock = new_quantity
        movement = InventoryMovement(
            tenant_id=product.tenant_id,
            product_id=product.id,
            quantity=delta,
            movement_type=movement_type.value,
            reference=reference,
            notes=notes,
            created_by=user_id
        )
        self.db.add(movement)
        return movement

    def adjust_stock(self, product_id: UUID, adjustment: StockAdjustment, tenant_id: UUID,
                     user_id: Optional[UUID] = None) -> Product:
        """Manually adjust stock quantity by a delta."""
        product = self.get_product(product_id, tenant_id)
        self.apply_stock_change(product, adjustment.delta, MovementType.ADJ, notes=adjustment.notes, user_id=user_id)
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Stock adjusted for product {product.id}: {adjustment.delta:+d} -> {product.quantity_in_stock}")
        return product

    def get_low_stock(self, tenant_id: UUID, threshold: int = 10) -> List[Product]:
        return self._base_query(tenant_id).filter(
            Product.quantity_in_stock <= threshold
        ).order_by(Product.quantity_in_stock, func.lower(Product.name)).all()

    def get_movements(self, product_id: UUID, tenant_id: UUID, limit: int = 50) -> List[InventoryMovement]:
        product = self.get_product(product_id, tenant_id)
        return self.db.query(InventoryMovement).filter(
            InventoryMovement.tenant_id == tenant_id,
            InventoryMovement.product_id == product.id
        ).order_by(InventoryMovement.created_at.desc()).limit(limit).all()
