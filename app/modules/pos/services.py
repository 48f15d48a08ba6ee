"""
Servicios del módulo POS

- PosSessionService: apertura/cierre del turno de caja
- PosSaleService: procesamiento atómico de ventas (stock, libro y venta)
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload
from typing import Dict, Iterable, List, Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal
import logging

from app.modules.pos.models import PosSession, PosSessionStatus, Sale, SaleLineItem
from app.modules.pos.schemas import (
    PosSessionOpen, PosSessionClose, PosSessionOut, PosSessionList,
    SaleCreate, CartItem, SaleOut, SaleList, SalesSummary
)
from app.modules.inventory.models import Product, MovementType
from app.modules.inventory.service import InventoryService
from app.modules.transactions.models import TransactionType
from app.modules.transactions.service import TransactionService
from app.modules.accounts.models import AccountType
from app.modules.accounts.service import AccountService
from app.common.utils import to_money, utcnow, as_utc
from app.core.config import settings

logger = logging.getLogger(__name__)

SALES_REVENUE_ACCOUNT = "Sales Revenue"


class PosSessionService:
    """Servicio para sesiones de caja"""

    def __init__(self, db: Session):
        self.db = db

    def get_current_session(self, tenant_id: UUID) -> Optional[PosSession]:
        """Sesión abierta del tenant, o None"""
        return self.db.query(PosSession).filter(
            PosSession.tenant_id == tenant_id,
            PosSession.status == PosSessionStatus.OPEN
        ).first()

    def open_session(self, data: PosSessionOpen, tenant_id: UUID, user_id: UUID) -> PosSession:
        if self.get_current_session(tenant_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ya existe una sesión de caja abierta"
            )

        session = PosSession(
            tenant_id=tenant_id,
            status=PosSessionStatus.OPEN,
            opened_by=user_id,
            opened_at=utcnow(),
            opening_notes=data.opening_notes
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"POS session {session.id} opened for tenant {tenant_id}")
        return session

    def close_session(self, data: PosSessionClose, tenant_id: UUID, user_id: UUID) -> PosSession:
        session = self.get_current_session(tenant_id)
        if not session:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No hay una sesión de caja abierta"
            )

        session.status = PosSessionStatus.CLOSED
        session.closed_by = user_id
        session.closed_at = utcnow()
        session.closing_notes = data.closing_notes
        self.db.commit()
        self.db.refresh(session)
        logger.info(f"POS session {session.id} closed")
        return session

    def list_sessions(self, tenant_id: UUID, limit: int = 50, offset: int = 0) -> PosSessionList:
        query = self.db.query(PosSession).filter(PosSession.tenant_id == tenant_id)
        total = query.count()
        sessions = query.order_by(PosSession.opened_at.desc()).offset(offset).limit(limit).all()
        return PosSessionList(sessions=[PosSessionOut.model_validate(s) for s in sessions], total=total)


def merge_cart(items: Iterable[CartItem]) -> Dict[UUID, int]:
    """Agrupar líneas repetidas del carrito por producto, conservando el orden"""
    merged: Dict[UUID, int] = {}
    for item in items:
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return merged


def summarize_sales(sales: Iterable[Sale]) -> SalesSummary:
    total_sales = Decimal("0")
    total_tax = Decimal("0")
    count = 0
    items_sold = 0
    for sale in sales:
        total_sales += Decimal(sale.total)
        total_tax += Decimal(sale.tax)
        count += 1
        items_sold += sum(li.quantity for li in sale.line_items)
    return SalesSummary(
        total_sales=to_money(total_sales),
        total_tax=to_money(total_tax),
        total_transactions=count,
        items_sold=items_sold
    )


class PosSaleService:
    """Servicio para ventas POS integradas con inventario y libro"""

    def __init__(self, db: Session):
        self.db = db

    def process_sale(self, sale_data: SaleCreate, tenant_id: UUID, user_id: UUID) -> Sale:
        """
        Procesar una venta POS.

        Todo ocurre en una sola transacción de base de datos: se descuenta
        el stock, se registra el ingreso en 'Sales Revenue' y se guarda la venta.
        Si algún producto no existe o no tiene stock suficiente no se modifica nada.
        """
        cart = merge_cart(sale_data.items)

        products = {
            p.id: p for p in self.db.query(Product).filter(
                Product.tenant_id == tenant_id,
                Product.id.in_(list(cart.keys())),
                Product.deleted_at.is_(None)
            ).with_for_update().all()
        }

        for product_id, quantity in cart.items():
            product = products.get(product_id)
            if not product:
                self.db.rollback()
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Producto no encontrado: {product_id}"
                )
            if product.quantity_in_stock < quantity:
                self.db.rollback()
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Stock insuficiente para el producto '{product.name}'. "
                           f"Disponible: {product.quantity_in_stock}, Solicitado: {quantity}"
                )

        line_items = []
        subtotal = Decimal("0")
        for product_id, quantity in cart.items():
            product = products[product_id]
            line_total = to_money(Decimal(product.price) * quantity)
            subtotal += line_total
            line_items.append(SaleLineItem(
                product_id=product.id,
                name=product.name,
                unit_price=product.price,
                quantity=quantity,
                line_total=line_total
            ))

        tax_rate = Decimal(str(settings.POS_TAX_RATE))
        subtotal = to_money(subtotal)
        tax = to_money(subtotal * tax_rate)
        total = to_money(subtotal + tax)
        now = utcnow()

        try:
            session = PosSessionService(self.db).get_current_session(tenant_id)
            sale = Sale(
                tenant_id=tenant_id,
                session_id=session.id if session else None,
                created_by=user_id,
                date=now,
                subtotal=subtotal,
                tax_rate=tax_rate,
                tax=tax,
                total=total,
                line_items=line_items
            )
            self.db.add(sale)
            self.db.flush()

            inventory = InventoryService(self.db)
            for product_id, quantity in cart.items():
                inventory.apply_stock_change(
                    products[product_id], -quantity, MovementType.SALE,
                    reference=f"SALE-{sale.id}", user_id=user_id
                )

            AccountService(self.db).ensure_account(SALES_REVENUE_ACCOUNT, AccountType.INCOME, tenant_id)
            transaction = TransactionService(self.db).record(
                tenant_id=tenant_id,
                description=f"POS Sale - {now.isoformat()}",
                amount=total,
                transaction_type=TransactionType.INCOME,
                account=SALES_REVENUE_ACCOUNT,
                date=now
            )
            sale.transaction_id = transaction.id

            self.db.commit()
            self.db.refresh(sale)

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error processing POS sale for tenant {tenant_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error procesando la venta"
            )

        logger.info(f"POS sale {sale.id} processed: total={total} items={sum(cart.values())}")
        return sale

    def get_sale(self, sale_id: UUID, tenant_id: UUID) -> Sale:
        sale = self.db.query(Sale).options(selectinload(Sale.line_items)).filter(
            Sale.id == sale_id,
            Sale.tenant_id == tenant_id
        ).first()
        if not sale:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")
        return sale

    def query_sales(self, tenant_id: UUID, start: Optional[datetime] = None, end: Optional[datetime] = None,
                    session_id: Optional[UUID] = None):
        query = self.db.query(Sale).options(selectinload(Sale.line_items)).filter(Sale.tenant_id == tenant_id)
        if start:
            query = query.filter(Sale.date >= as_utc(start))
        if end:
            query = query.filter(Sale.date <= as_utc(end))
        if session_id:
            query = query.filter(Sale.session_id == session_id)
        return query

    def list_sales(self, tenant_id: UUID, start: Optional[datetime] = None, end: Optional[datetime] = None,
                   session_id: Optional[UUID] = None, limit: int = 50, offset: int = 0) -> SaleList:
        query = self.query_sales(tenant_id, start, end, session_id)
        total = query.count()
        sales: List[Sale] = query.order_by(Sale.date.desc()).offset(offset).limit(limit).all()
        return SaleList(
            sales=[SaleOut.model_validate(s) for s in sales],
            total=total,
            limit=limit,
            offset=offset
        )
