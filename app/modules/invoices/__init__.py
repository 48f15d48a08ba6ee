"""
Módulo de Facturas de venta

- Numeración INV-0001 por tenant desde una fila de secuencia
- Ciclo de vida: draft -> sent -> paid, overdue por barrido periódico, void
- Al marcar pagada se registra el ingreso en el libro
"""
