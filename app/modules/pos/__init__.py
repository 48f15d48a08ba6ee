"""
Módulo POS (Point of Sale)

ENTIDADES PRINCIPALES:
- PosSession: turno de caja con apertura/cierre (una abierta por tenant)
- Sale: venta con líneas, subtotal, impuesto (POS_TAX_RATE) y total

FUNCIONALIDADES:
- Carrito con líneas agrupadas por producto
- Validación de stock antes de vender
- Descuento de stock, ingreso en 'Sales Revenue' y venta en una sola transacción
- Recibo de venta y listado con filtros

Los reportes X y Z se calculan en el módulo de reportes.
"""
