"""Transaction extraction from statement files using Gemini."""
import json
from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import TypeAdapter, ValidationError

from finflow.ledger.models import Category
from finflow.utils.logger import get_logger
from finflow.utils.exceptions import LLMError
from .insights import DEFAULT_MODEL
from .schemas import EXTRACTION_RESPONSE_SCHEMA, ExtractedRecord, ExtractedRecords, clean_json_text

logger = get_logger()

_RECORDS = TypeAdapter(List[ExtractedRecord])


class ExtractionGateway:
    """Reads transactions out of bank statements, receipts and spreadsheets."""

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL, client: Optional[genai.Client] = None):
        self.client = client or genai.Client(api_key=api_key)
        self.model_name = model_name

    def extract(self, data: bytes, mime_type: str) -> List[ExtractedRecord]:
        """
        Extract transactions from file content.

        Args:
            data: Raw file bytes
            mime_type: MIME type of the file

        Returns:
            Partial records in document order; empty if the response is unusable

        Raises:
            LLMError: If the request itself fails
        """
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=[
                    types.Part.from_bytes(data=data, mime_type=mime_type),
                    self._build_prompt(),
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=EXTRACTION_RESPONSE_SCHEMA,
                )
            )
        except Exception as e:
            logger.error(f"Extraction request failed: {e}")
            raise LLMError(f"Failed to extract transactions: {e}")

        records = self._parse_response(response.text or "")
        logger.info(f"Extracted {len(records)} records")
        return records

    def _parse_response(self, response_text: str) -> List[ExtractedRecord]:
        """Parse a JSON array of records; a {"transactions": [...]} wrapper is accepted."""
        try:
            data = json.loads(clean_json_text(response_text) or "[]")
            if isinstance(data, dict):
                return ExtractedRecords.model_validate(data).transactions
            return _RECORDS.validate_python(data)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing file extraction: {e}")
            logger.debug(f"Response text: {response_text[:500]}")
            return []
        except ValidationError as e:
            logger.error(f"Extraction response does not match expected schema: {e}")
            return []

    @staticmethod
    def _build_prompt() -> str:
        categories = ", ".join(c.value for c in Category)
        return (
            "Extrae todas las transacciones financieras que encuentres en este archivo.\n"
            "Para cada transacción, identifica:\n"
            "1. Descripción del gasto o ingreso.\n"
            "2. Importe numérico (sin símbolos de moneda).\n"
            "3. Tipo (debe ser 'expense' para gastos o 'income' para ingresos).\n"
            f"4. Categoría (debe ser una de estas exactamente: {categories}).\n"
            "5. Fecha (en formato YYYY-MM-DD, si no existe usa la fecha actual).\n\n"
            "Responde exclusivamente en formato JSON como un array de objetos."
        )
