"""Pydantic schemas for Gemini responses."""
import re
from typing import List, Optional

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field


class InsightReport(BaseModel):
    """Spending analysis returned by the insight gateway."""
    model_config = ConfigDict(populate_by_name=True)

    summary: str = Field(description="Executive summary of spending behaviour")
    recommendations: List[str] = Field(description="Specific saving recommendations")
    savings_potential: str = Field(
        alias="savingsPotential",
        description="Human-readable estimate of achievable savings"
    )


class ExtractedRecord(BaseModel):
    """Partially populated transaction read from a statement file."""
    description: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None


class ExtractedRecords(BaseModel):
    """Wrapper some responses use instead of a bare array."""
    transactions: List[ExtractedRecord]


FALLBACK_INSIGHT = InsightReport(
    summary="No pudimos analizar tus datos en este momento.",
    recommendations=["Sigue registrando tus gastos para obtener mejores consejos."],
    savings_potential="0€",
)


INSIGHT_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": types.Schema(
            type=types.Type.STRING,
            description="Un resumen ejecutivo del comportamiento de gasto del usuario."
        ),
        "recommendations": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="Lista de al menos 3 recomendaciones específicas para ahorrar dinero basadas en los datos."
        ),
        "savingsPotential": types.Schema(
            type=types.Type.STRING,
            description="Una estimación de cuánto podría ahorrar el usuario siguiendo los consejos."
        ),
    },
    required=["summary", "recommendations", "savingsPotential"],
)


EXTRACTION_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "description": types.Schema(type=types.Type.STRING),
            "amount": types.Schema(type=types.Type.NUMBER),
            "category": types.Schema(type=types.Type.STRING),
            "type": types.Schema(type=types.Type.STRING),
            "date": types.Schema(type=types.Type.STRING),
        },
        required=["description", "amount", "category", "type", "date"],
    ),
)


def clean_json_text(text: str) -> str:
    """Strip markdown fences around a JSON payload."""
    cleaned = text.strip()

    if cleaned.startswith("```"):
        cleaned = re.sub(r"^```(json)?", "", cleaned).strip()
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3].strip()

    return cleaned
