"""
Esquemas Pydantic para la MedBox
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class WeightUpdate(BaseModel):
    """Nueva lectura de la báscula"""
    weight: float = Field(..., ge=0, description="Peso actual en gramos")


class MedBoxResponse(BaseModel):
    id: int
    current_weight_grams: float
    last_weight_grams: float
    status: str
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True
