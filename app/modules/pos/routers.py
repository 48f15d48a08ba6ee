"""
Routers FastAPI para el módulo POS (Point of Sale)

- Sesiones: apertura/cierre del turno de caja
- Ventas: procesar venta, listar y consultar recibo
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import datetime

from app.database.database import get_db
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.pos.services import PosSessionService, PosSaleService
from app.modules.pos.schemas import (
    PosSessionOpen, PosSessionClose, PosSessionOut, PosSessionList,
    SaleCreate, SaleOut, SaleList
)

pos_router = APIRouter(prefix="/pos", tags=["POS"])


# ===== SESSIONS =====

@pos_router.post("/sessions/open", response_model=PosSessionOut, status_code=status.HTTP_201_CREATED)
def open_session(
    data: PosSessionOpen,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_writer())
):
    """Abrir turno de caja (solo uno abierto por tenant)"""
    return PosSessionService(db).open_session(data, auth_context.tenant_id, auth_context.user_id)


@pos_router.post("/sessions/close", response_model=PosSessionOut)
def close_session(
    data: PosSessionClose,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_writer())
):
    """Cerrar el turno de caja abierto"""
    return PosSessionService(db).close_session(data, auth_context.tenant_id, auth_context.user_id)


@pos_router.get("/sessions/current", response_model=Optional[PosSessionOut])
def get_current_session(
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    """Sesión abierta actual; null si no hay ninguna"""
    return PosSessionService(db).get_current_session(auth_context.tenant_id)


@pos_router.get("/sessions", response_model=PosSessionList)
def list_sessions(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    return PosSessionService(db).list_sessions(auth_context.tenant_id, limit, offset)


# ===== SALES =====

@pos_router.post("/sales", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def process_sale(
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_writer())
):
    """
    Procesar venta POS

    - **items**: carrito de (product_id, quantity); líneas repetidas se agrupan
    - Stock insuficiente → 409 sin modificar nada
    - Impuesto = subtotal × POS_TAX_RATE
    """
    return PosSaleService(db).process_sale(sale_data, auth_context.tenant_id, auth_context.user_id)


@pos_router.get("/sales", response_model=SaleList)
def list_sales(
    start: Optional[datetime] = Query(None, description="Desde (inclusive)"),
    end: Optional[datetime] = Query(None, description="Hasta (inclusive)"),
    session_id: Optional[UUID] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    return PosSaleService(db).list_sales(auth_context.tenant_id, start, end, session_id, limit, offset)


@pos_router.get("/sales/{sale_id}", response_model=SaleOut)
def get_sale(
    sale_id: UUID,
    db: Session = Depends(get_db),
    auth_context: AuthContext = Depends(AuthDependencies.require_any_role())
):
    """Datos del recibo de una venta"""
    return PosSaleService(db).get_sale(sale_id, auth_context.tenant_id)
