"""
Información estática sobre impuestos de Kenia.

Se usa como herramienta del asistente (`getKenyanTaxInfo`) y en el
endpoint de consulta directa.
"""
from typing import Optional, Tuple

KENYAN_TAX_TOPICS = {
    "vat": (
        "Value Added Tax (VAT) in Kenya is currently 16%. It is applicable on most goods and "
        "services. Businesses with a turnover of KES 5 million or more are required to register for VAT."
    ),
    "income tax": (
        "Corporate income tax for resident companies is 30%. For individual residents, income tax "
        "is on a graduated scale from 10% to 30%. Non-resident companies pay 37.5%."
    ),
    "withholding tax": (
        "Withholding tax rates in Kenya vary depending on the nature of the payment. For example, "
        "the rate for dividends paid to residents is 5%, while for royalties it is 5%. For "
        "professional fees paid to residents, the rate is 5%."
    ),
}

UNKNOWN_TAX_TOPIC = (
    "I do not have specific information on that Kenyan tax topic. "
    "Please ask about VAT, Income Tax, or Withholding Tax for details."
)


def get_kenyan_tax_info(topic: str) -> Tuple[Optional[str], str]:
    """
    Buscar un tema: primero coincidencia exacta (sin mayúsculas), luego
    el primer tema contenido en el texto. Devuelve (tema, información).
    """
    normalized = (topic or "").strip().lower()
    if normalized in KENYAN_TAX_TOPICS:
        return normalized, KENYAN_TAX_TOPICS[normalized]

    for key, information in KENYAN_TAX_TOPICS.items():
        if key in normalized:
            return key, information

    return None, UNKNOWN_TAX_TOPIC
