"""
Helpers compartidos: dinero y fechas en UTC
"""
from datetime import date, datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

CENTS = Decimal("0.01")


def to_money(value: Union[Decimal, float, int, str, None]) -> Decimal:
    """Convertir a Decimal redondeado a centavos (half-up)."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalizar un datetime a UTC; los naive se asumen UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def percent_change(current: Decimal, previous: Decimal) -> Optional[float]:
    """Cambio porcentual; None cuando el periodo anterior es cero."""
    if not previous:
        return None
    return round(float((current - previous) / abs(previous) * 100), 2)
