"""
SurgiEval — Sessions Routes

Endpoints для проведення станції (один ExamController на сесію):
- Створення / стан / видалення сесії
- Реєстрація студента, вибір режиму та теми
- Проведення станції: відповіді чек-листа, нотатки, завершення
- Результати: підсумкова оцінка, обґрунтування, екзаменатор, PDF звіт

Помилки ядра (InvalidTransitionError тощо) перетворюються на HTTP
статуси обробниками в app.py.

Ендпоінти синхронні (def): виклики генерації виконуються в threadpool.
"""

from datetime import datetime
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from ..dependencies import (
    get_client, get_controller, get_sessions,
    SessionManager,
)
from ..models import (
    LoginRequest,
    ModeRequest,
    NotesRequest,
    ResponseRequest,
    ResultsRequest,
    SessionState,
    TopicRequest,
)
from surgi_eval.generation import GenerationClient
from surgi_eval.report import report_filename

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def _state(controller) -> SessionState:
    return SessionState.from_session(controller.session)


# ============================================================
# Lifecycle
# ============================================================

@router.post("", response_model=SessionState)
def create_session(
    sessions: SessionManager = Depends(get_sessions),
    client: GenerationClient = Depends(get_client),
) -> SessionState:
    """Створити нову сесію (етап LOGIN)"""
    controller = sessions.create_session(client)
    return _state(controller)


@router.get("/{session_id}", response_model=SessionState)
def get_session(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Отримати стан сесії"""
    return _state(get_controller(session_id, sessions))


@router.delete("/{session_id}")
def delete_session(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
):
    """Видалити сесію"""
    get_controller(session_id, sessions)
    sessions.delete_session(session_id)
    return {"status": "deleted", "session_id": session_id}


# ============================================================
# Login / selection
# ============================================================

@router.post("/{session_id}/login", response_model=SessionState)
def login(
    session_id: str,
    request: LoginRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """
    Реєстрація студента.

    Якщо ім'я або документ порожні, етап не змінюється.
    """
    controller = get_controller(session_id, sessions)
    controller.login(request.name, request.id)
    return _state(controller)


@router.post("/{session_id}/mode", response_model=SessionState)
def select_mode(
    session_id: str,
    request: ModeRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Вибір режиму: CASE або PROCEDURE"""
    controller = get_controller(session_id, sessions)
    controller.select_mode(request.mode)
    return _state(controller)


@router.post("/{session_id}/back", response_model=SessionState)
def back_to_modes(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Повернутися до вибору режиму"""
    controller = get_controller(session_id, sessions)
    controller.back_to_modes()
    return _state(controller)


@router.post("/{session_id}/topic", response_model=SessionState)
def select_topic(
    session_id: str,
    request: TopicRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """
    Вибір теми та генерація сценарію.

    Запит триває, доки модель не поверне сценарій. Успіх — етап PREVIEW;
    помилка — TOPIC_SELECTION з повідомленням у полі error.
    """
    controller = get_controller(session_id, sessions)
    controller.select_topic(request.topic, request.include_simulated_patient)
    return _state(controller)


# ============================================================
# Station
# ============================================================

@router.post("/{session_id}/start", response_model=SessionState)
def start_exam(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Почати станцію (таймер 08:00, чек-лист порожній)"""
    controller = get_controller(session_id, sessions)
    controller.start_exam()
    return _state(controller)


@router.post("/{session_id}/cancel", response_model=SessionState)
def cancel_preview(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Відхилити сценарій і повернутися до вибору теми"""
    controller = get_controller(session_id, sessions)
    controller.cancel_preview()
    return _state(controller)


@router.post("/{session_id}/responses", response_model=SessionState)
def record_response(
    session_id: str,
    request: ResponseRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Позначити пункт чек-листа"""
    controller = get_controller(session_id, sessions)
    controller.record_response(request.item_id, request.status)
    return _state(controller)


@router.put("/{session_id}/notes", response_model=SessionState)
def update_notes(
    session_id: str,
    request: NotesRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Оновити нотатки екзаменатора"""
    controller = get_controller(session_id, sessions)
    controller.update_notes(request.notes)
    return _state(controller)


@router.post("/{session_id}/finish", response_model=SessionState)
def finish_exam(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """
    Завершити станцію.

    Оцінка рахується локально, зворотний зв'язок запитується в моделі.
    Якщо модель недоступна — локальна оцінка та заглушки. Етап — RESULTS.
    """
    controller = get_controller(session_id, sessions)
    controller.finish_exam()
    return _state(controller)


# ============================================================
# Results
# ============================================================

@router.put("/{session_id}/results", response_model=SessionState)
def update_results(
    session_id: str,
    request: ResultsRequest,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """
    Оновити поля результатів.

    - **final_score**: підсумкова оцінка 0.0–5.0 (округлюється до 0.1)
    - **justification**: обґрунтування зміни оцінки
    - **evaluator_name**: ім'я екзаменатора (обов'язкове для звіту)
    """
    controller = get_controller(session_id, sessions)

    if request.final_score is not None:
        controller.set_final_score(request.final_score)
    if request.justification is not None:
        controller.set_justification(request.justification)
    if request.evaluator_name is not None:
        controller.set_evaluator_name(request.evaluator_name)

    return _state(controller)


@router.get("/{session_id}/report")
def download_report(
    session_id: str,
    save: bool = False,
    sessions: SessionManager = Depends(get_sessions)
) -> Response:
    """
    PDF звіт.

    save=true — також зберегти файл у каталозі звітів сервера (REPORTS_DIR).
    400 — сесія не на етапі RESULTS або не вказано ім'я екзаменатора.
    """
    controller = get_controller(session_id, sessions)
    generated_at = datetime.now()
    pdf_bytes = controller.report_bytes(generated_at=generated_at)

    filename = report_filename(controller.session.student)
    headers = {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}

    if save:
        path = controller.save_report(generated_at=generated_at)
        headers["X-Report-Saved"] = quote(path.name)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers=headers,
    )


@router.post("/{session_id}/reset", response_model=SessionState)
def reset_session(
    session_id: str,
    sessions: SessionManager = Depends(get_sessions)
) -> SessionState:
    """Нова оцінка: повне очищення сесії, етап LOGIN"""
    controller = get_controller(session_id, sessions)
    controller.reset()
    return _state(controller)
