"""
SurgiEval — Винятки

Ієрархія помилок системи. Все, що може піднятися з ядра,
успадковується від SurgiEvalError.
"""


class SurgiEvalError(Exception):
    """Базова помилка SurgiEval"""


class InvalidTransitionError(SurgiEvalError):
    """Подія недопустима на поточному етапі сесії"""

    def __init__(self, stage, event):
        self.stage = stage
        self.event = event
        stage_name = getattr(stage, "value", stage)
        super().__init__(
            f"Event {type(event).__name__} is not allowed in stage {stage_name}"
        )


class IncompleteSessionError(SurgiEvalError):
    """Сесія ще не має сценарію або зворотного зв'язку"""


class EmptyChecklistError(SurgiEvalError):
    """Оцінка порожнього чек-листа не визначена"""


class UnknownChecklistItemError(SurgiEvalError):
    """Пункту з таким id немає в чек-листі сценарію"""


class ScoreOverrideError(SurgiEvalError):
    """Підсумкова оцінка поза шкалою"""


class GenerationError(SurgiEvalError):
    """Зовнішній виклик генерації не вдався"""


class ReportError(SurgiEvalError):
    """Звіт не може бути сформований"""


class MissingEvaluatorError(ReportError):
    """Не вказано ім'я викладача-екзаменатора"""
