"""Spending insights from Gemini."""
from decimal import Decimal
from typing import Iterable, Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from finflow.ledger.models import Transaction
from finflow.utils.logger import get_logger
from finflow.utils.exceptions import LLMError
from .schemas import FALLBACK_INSIGHT, INSIGHT_RESPONSE_SCHEMA, InsightReport, clean_json_text

logger = get_logger()

DEFAULT_MODEL = "gemini-3-flash-preview"

SYSTEM_INSTRUCTION = (
    "Eres un experto asesor financiero personal. Analizas gastos, identificas "
    "patrones innecesarios y ofreces consejos prácticos. Responde siempre en "
    "formato JSON estructurado."
)


def format_amount(amount: Decimal) -> str:
    """Plain decimal text without exponent or trailing zeros."""
    return format(amount.normalize(), "f")


def describe_transaction(txn: Transaction) -> str:
    """One prompt line per transaction."""
    sign = "-" if txn.is_expense else "+"
    return (
        f"{txn.date.isoformat()}: {txn.description} ({txn.category.value}) - "
        f"{sign}{format_amount(txn.amount)}€"
    )


class InsightGateway:
    """Asks Gemini for a spending analysis of the transaction list."""

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL, client: Optional[genai.Client] = None):
        """
        Initialize insight gateway.

        Args:
            api_key: Google AI API key
            model_name: Gemini model
            client: Preconfigured client, mainly for tests
        """
        self.client = client or genai.Client(api_key=api_key)
        self.model_name = model_name

    def analyze(self, transactions: Iterable[Transaction]) -> InsightReport:
        """
        Request insights for the given transactions.

        Args:
            transactions: Transactions in display order

        Returns:
            InsightReport, or the fallback report if the response is unusable

        Raises:
            LLMError: If the request itself fails
        """
        prompt = self._build_prompt(transactions)

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION,
                    response_mime_type="application/json",
                    response_schema=INSIGHT_RESPONSE_SCHEMA,
                )
            )
        except Exception as e:
            logger.error(f"Insight request failed: {e}")
            raise LLMError(f"Failed to get financial insights: {e}")

        return self._parse_response(response.text or "")

    def _parse_response(self, response_text: str) -> InsightReport:
        """Parse the JSON report, falling back on anything malformed."""
        try:
            return InsightReport.model_validate_json(clean_json_text(response_text) or "{}")
        except ValidationError as e:
            logger.error(f"Error parsing Gemini response: {e}")
            logger.debug(f"Response text: {response_text[:500]}")
            return FALLBACK_INSIGHT.model_copy(deep=True)

    @staticmethod
    def _build_prompt(transactions: Iterable[Transaction]) -> str:
        context = "\n".join(describe_transaction(t) for t in transactions)
        return (
            "Analiza los siguientes movimientos financieros del mes y proporciona "
            "consejos personalizados para ahorrar y una breve evaluación de la salud "
            f"financiera del usuario. Los datos son:\n{context}"
        )
