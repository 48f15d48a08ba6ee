"""
Reports Module

Reportes financieros calculados sobre las transacciones y ventas POS del tenant:
- Dashboard del mes con variación frente al mes anterior
- Gráfico diario del mes
- Estado de resultados, balance general y flujo de caja
- Reportes X (sesión POS) y Z (cierre del día)
- Historial de reportes guardados

Architecture Pattern: Service Layer
- routers/ -> Endpoints FastAPI con validaciones
- services/ -> Consultas y agregaciones
- schemas/ -> Modelos Pydantic de respuesta
- utils/ -> Rangos de fechas y exportación CSV
"""
