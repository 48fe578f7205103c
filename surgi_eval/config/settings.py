"""
SurgiEval — Налаштування системи

Всі параметри системи зібрані в dataclass-и для:
- Типізації
- Легкого доступу через config.timer.station_duration_seconds
- Серіалізації в YAML/JSON
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
import os


# =============================================================================
# TIMER CONFIGURATION
# =============================================================================

@dataclass
class TimerConfig:
    """Параметри таймера станції"""

    station_duration_seconds: int = 480   # 8 хвилин
    warning_seconds: int = 60             # останню хвилину: зворотний зв'язок
    tick_interval_seconds: float = 1.0


# =============================================================================
# GENERATION CONFIGURATION
# =============================================================================

@dataclass
class GenerationConfig:
    """Параметри генеративного AI"""

    model: str = "gemini-2.5-flash"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env: str = "GEMINI_API_KEY"
    api_key: Optional[str] = None

    # Температура
    scenario_temperature: float = 0.6
    feedback_temperature: float = 0.5

    timeout_seconds: int = 60

    def resolve_api_key(self) -> str:
        """API ключ: явний або з environment"""
        if self.api_key:
            return self.api_key
        return (os.getenv(self.api_key_env) or "").strip()

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Створити конфігурацію з environment variables"""
        return cls(
            model=os.getenv("SURGI_EVAL_MODEL", "gemini-2.5-flash"),
            api_key=os.getenv("GEMINI_API_KEY"),
            timeout_seconds=int(os.getenv("SURGI_EVAL_TIMEOUT", "60")),
        )


# =============================================================================
# SCORING CONFIGURATION
# =============================================================================

@dataclass
class ScoringConfig:
    """Шкала оцінювання; max_score не більше 5.0 (шкала FeedbackRecord)"""
    max_score: float = 5.0

    def __post_init__(self):
        if not 0.0 < self.max_score <= 5.0:
            raise ValueError(f"max_score must be within (0, 5.0], got {self.max_score}")


# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

@dataclass
class ReportConfig:
    """Геометрія та тексти PDF звіту (одиниці — мм)"""

    # Сторінка A4
    page_width: float = 210.0
    page_height: float = 297.0
    margin: float = 15.0
    top: float = 20.0

    # Блоки
    header_height: float = 30.0
    info_box_height: float = 35.0
    bullet_line_height: float = 5.0
    row_line_height: float = 4.5
    row_padding: float = 6.0
    table_header_height: float = 8.0
    status_column_width: float = 32.0

    # Тексти
    title: str = "Reporte de Evaluación ECOE - Cirugía"
    role_caption: str = "Docente Cirugía / Evaluador ECOE"
    footer_brand: str = "SurgiEval"

    output_dir: str = "reports"

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        """Нижня межа області друку"""
        return self.page_height - self.margin

    @property
    def page_size(self) -> Tuple[float, float]:
        return (self.page_width, self.page_height)


# =============================================================================
# MAIN CONFIGURATION
# =============================================================================

@dataclass
class SurgiEvalConfig:
    """
    Головна конфігурація SurgiEval

    Приклад використання:
        config = SurgiEvalConfig()
        print(config.timer.station_duration_seconds)  # 480
        print(config.generation.model)  # gemini-2.5-flash
    """

    # Метадані
    version: str = "1.0.0"
    project_name: str = "SurgiEval"

    # Компоненти
    timer: TimerConfig = field(default_factory=TimerConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    # Логування
    logs_dir: str = "logs"
    log_level: str = "INFO"


# =============================================================================
# DEFAULT CONFIG INSTANCE
# =============================================================================

def get_default_config() -> SurgiEvalConfig:
    """Конфігурація за замовчуванням (ключ API з environment)"""
    return SurgiEvalConfig(generation=GenerationConfig.from_env())
