from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.database.database import get_db
from app.modules.inventory.service import InventoryService
from app.modules.inventory.schemas import (
    ProductCreate, ProductUpdate, ProductOut, ProductList, StockAdjustment, InventoryMovementOut
)

products_router = APIRouter(prefix="/products", tags=["Inventory"])


@products_router.post("/", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_writer())
):
    """Create a product. SKU and barcode must be unique per tenant."""
    return InventoryService(db).create_product(data, auth_context.tenant_id, auth_context.user_id)


@products_router.get("/", response_model=ProductList)
def list_products(
    search: Optional[str] = Query(None, description="Buscar por nombre o SKU"),
    in_stock_only: bool = Query(False, description="Solo productos con stock"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    return InventoryService(db).list_products(auth_context.tenant_id, search, in_stock_only, limit, offset)


@products_router.get("/low-stock", response_model=List[ProductOut])
def get_low_stock_products(
    threshold: int = Query(10, ge=0, description="Stock máximo para considerarse bajo"),
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    return InventoryService(db).get_low_stock(auth_context.tenant_id, threshold)


@products_router.get("/barcode/{barcode}", response_model=ProductOut)
def get_product_by_barcode(
    barcode: str,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    """Lookup used by barcode scanners (minimum 4 characters)."""
    return InventoryService(db).get_by_barcode(barcode, auth_context.tenant_id)


@products_router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    return InventoryService(db).get_product(product_id, auth_context.tenant_id)


@products_router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: UUID,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_writer())
):
    return InventoryService(db).update_product(product_id, data, auth_context.tenant_id)


@products_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_owner_or_admin())
):
    InventoryService(db).delete_product(product_id, auth_context.tenant_id)


@products_router.post("/{product_id}/adjust-stock", response_model=ProductOut)
def adjust_stock(
    product_id: UUID,
    adjustment: StockAdjustment,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_writer())
):
    """Manually adjust stock by a delta; stock can never go negative."""
    return InventoryService(db).adjust_stock(product_id, adjustment, auth_context.tenant_id, auth_context.user_id)


@products_router.get("/{product_id}/movements", response_model=List[InventoryMovementOut])
def get_product_movements(
    product_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    return InventoryService(db).get_movements(product_id, auth_context.tenant_id, limit)
