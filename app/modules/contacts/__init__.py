"""
Módulo de Contactos - clientes y proveedores

Una sola entidad Contact con tipo customer o vendor:
- Los clientes requieren email; los proveedores no
- Soft delete para que las facturas conserven la referencia al cliente
- Búsqueda por nombre, email o teléfono

Componentes:
- models.py: modelo SQLAlchemy
- schemas.py: esquemas Pydantic
- crud.py: acceso a datos
- service.py: reglas de negocio
- router.py: routers /customers y /vendors
- tests.py: pruebas
"""
