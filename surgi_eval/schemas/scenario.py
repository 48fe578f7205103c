"""
SurgiEval — Схеми сценарію станції

Pydantic моделі для:
- ChecklistItem: пункт чек-листа (id — ключ для відповідей та оцінки)
- SimulatedPatientScript: сценарій для стандартизованого пацієнта
- CaseScenario / ProcedureScenario: варіанти сценарію за режимом
- Scenario: tagged union за полем mode

Формат на дроті — camelCase (як повертає генеративна модель):
    {"title": ..., "chiefComplaint": ..., "vitalsAndLabs": ..., "checklist": [...]}
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from .student import ExamMode


class ChecklistItem(BaseModel):
    """
    Пункт чек-листа.

    Приклад:
        item = ChecklistItem(id="c1", category="Bioseguridad", text="Realiza lavado de manos")
    """
    id: str = Field(..., min_length=1)
    category: str = Field(..., description="Напр. 'Habilidad comunicativa', 'Examen físico'")
    text: str

    @property
    def label(self) -> str:
        """Рядок для звіту: '[категорія] текст'"""
        return f"[{self.category}] {self.text}"

    class Config:
        frozen = True


class SimulatedPatientScript(BaseModel):
    """Інструкції для стандартизованого пацієнта"""
    attitude: str
    gestures: str
    phrases: List[str] = Field(default_factory=list)
    allowed_info: str
    limitations: str

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class ScenarioBase(BaseModel):
    """
    Спільні поля сценарію.

    Створюється зовнішнім викликом генерації, після цього незмінний.
    """
    title: str
    topic: str = ""
    description: str = Field(..., description="Коротке резюме для попереднього перегляду")
    chief_complaint: str = Field(..., description="Скарга або показання до процедури")
    current_illness: str = Field(..., description="Анамнез захворювання або клінічне обґрунтування")
    student_instructions: str = Field(..., description="Текст, що зачитується студенту")
    objectives: List[str] = Field(default_factory=list)
    history: str = Field(..., description="Повний анамнез або контекст процедури")
    red_flags: List[str] = Field(default_factory=list)
    simulated_patient_script: Optional[SimulatedPatientScript] = None
    checklist: List[ChecklistItem] = Field(..., min_length=1)

    @field_validator("checklist")
    @classmethod
    def unique_item_ids(cls, v: List[ChecklistItem]) -> List[ChecklistItem]:
        seen = set()
        for item in v:
            if item.id in seen:
                raise ValueError(f"Duplicate checklist item id: {item.id}")
            seen.add(item.id)
        return v

    @property
    def item_ids(self) -> List[str]:
        return [item.id for item in self.checklist]

    def get_item(self, item_id: str) -> Optional[ChecklistItem]:
        for item in self.checklist:
            if item.id == item_id:
                return item
        return None

    def with_topic(self, topic: str) -> "ScenarioBase":
        """Копія сценарію з проставленою темою"""
        return self.model_copy(update={"topic": topic})

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class CaseScenario(ScenarioBase):
    """Клінічний випадок: діагностика та ведення"""
    mode: Literal["CASE"] = "CASE"
    vitals_and_labs: str = Field(default="", description="Вітальні показники та лабораторія")


class ProcedureScenario(ScenarioBase):
    """Процедура: техніка, біобезпека, безпека пацієнта"""
    mode: Literal["PROCEDURE"] = "PROCEDURE"
    supplies: str = Field(default="", description="Перелік інструментів та матеріалів")


Scenario = Annotated[Union[CaseScenario, ProcedureScenario], Field(discriminator="mode")]

_scenario_adapter = TypeAdapter(Scenario)


def parse_scenario(data: Dict[str, Any], mode: ExamMode) -> Union[CaseScenario, ProcedureScenario]:
    """
    Валідувати відповідь генератора як сценарій заданого режиму.

    Поле mode завжди береться з режиму сесії, а не з відповіді моделі.

    Raises:
        pydantic.ValidationError: відповідь не відповідає схемі
    """
    payload = dict(data)
    payload["mode"] = ExamMode(mode).value
    return _scenario_adapter.validate_python(payload)
