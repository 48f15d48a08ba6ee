"""
Flujos de IA de un solo paso: lectura de recibos, categorización y
preguntas sobre un contexto de datos financieros.
"""
import base64
import logging
import re
from typing import List, Optional

from pydantic import ValidationError

from app.modules.assistant.client import AIClient, AIServiceError
from app.modules.assistant.schemas import ReceiptData, CategoryExample, CategorizationResult
from app.modules.assistant import prompts

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def to_data_uri(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def is_image_data_uri(value: str) -> bool:
    match = DATA_URI_RE.match(value or "")
    return bool(match and match.group("mime").startswith("image/"))


def analyze_receipt(client: AIClient, image_data_uri: str) -> ReceiptData:
    """Extraer vendedor, fecha, descripción y total de la foto de un recibo"""
    content = [
        {"type": "text", "text": "Analyze this receipt."},
        {"type": "image_url", "image_url": {"url": image_data_uri}},
    ]
    data = client.complete_json(prompts.ANALYZE_RECEIPT_PROMPT, content, model=client.vision_model)
    try:
        return ReceiptData.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Receipt extraction returned unexpected data: {e.errors()}")
        raise AIServiceError("No se pudo extraer la información del recibo")


def categorize_transaction(
    client: AIClient,
    description: str,
    examples: List[CategoryExample],
    available_categories: Optional[List[str]] = None,
) -> CategorizationResult:
    """Sugerir categoría usando transacciones ya categorizadas como ejemplos"""
    lines = ["Previous categories:"]
    lines += [f"Description: {e.description}, Category: {e.category}" for e in examples] or ["(none)"]
    if available_categories:
        lines.append(f"Available accounts: {', '.join(available_categories)}")
    lines.append(f"Transaction Description: {description}")

    data = client.complete_json(prompts.CATEGORIZE_TRANSACTION_PROMPT, "\n".join(lines))
    try:
        return CategorizationResult.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Categorization returned unexpected data: {e.errors()}")
        raise AIServiceError("No se pudo categorizar la transacción")


def query_financial_data(client: AIClient, query: str, financial_data: Optional[str]) -> str:
    context = financial_data.strip() if financial_data and financial_data.strip() else prompts.NO_FINANCIAL_DATA
    response = client.chat([
        {"role": "system", "content": prompts.QUERY_FINANCIAL_DATA_PROMPT},
        {"role": "user", "content": f"Financial data:\n{context}\n\nQuestion: {query}"},
    ])
    return response.content.strip()
