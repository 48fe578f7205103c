"""
SurgiEval — Схеми студента та режиму станції

Pydantic моделі для:
- Student: ПІБ та документ студента
- ExamMode: клінічний випадок або процедура
"""

from enum import Enum
from pydantic import BaseModel, Field, field_validator


class ExamMode(str, Enum):
    """Тип станції"""
    CASE = "CASE"             # клінічне мислення, діагностика, ведення
    PROCEDURE = "PROCEDURE"   # технічна навичка, асептика, безпека

    @property
    def is_procedure(self) -> bool:
        return self is ExamMode.PROCEDURE


class Student(BaseModel):
    """
    Студент, що складає станцію.

    Приклад:
        student = Student(name="Ana María Pérez", id="1098765432")
    """
    name: str = Field(..., description="ПІБ студента")
    id: str = Field(..., description="Номер документа (cédula)")

    @field_validator("name", "id")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    @property
    def is_complete(self) -> bool:
        """Обидва поля заповнені"""
        return bool(self.name) and bool(self.id)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Ana María Pérez",
                "id": "1098765432"
            }
        }
