"""
Тести для модуля api

Запуск: pytest tests/test_api.py -v
Або демо: python tests/test_api.py
"""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeClient


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def client(fake_client):
    """TestClient з фейковим клієнтом генерації"""
    from surgi_eval.api import app
    from surgi_eval.api.dependencies import get_client, session_manager

    app.dependency_overrides[get_client] = lambda: fake_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    session_manager.close_all()


def _new_session(client) -> str:
    response = client.post("/api/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


def _to_exam(client, session_id: str, mode: str = "CASE") -> dict:
    client.post(f"/api/sessions/{session_id}/login", json={"name": "Ana María Pérez", "id": "1098765432"})
    client.post(f"/api/sessions/{session_id}/mode", json={"mode": mode})
    client.post(f"/api/sessions/{session_id}/topic", json={"topic": "Apendicitis aguda"})
    response = client.post(f"/api/sessions/{session_id}/start")
    assert response.status_code == 200
    return response.json()


# ============================================================
# Health / topics
# ============================================================

def test_root(client):
    data = client.get("/").json()

    assert data["name"] == "SurgiEval API"
    assert data["docs"] == "/docs"

    print(f"✓ Root: {data['name']} {data['version']}")


def test_health(client, monkeypatch):
    from surgi_eval.api.dependencies import session_manager

    monkeypatch.setattr(session_manager.app_config.generation, "api_key", None)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    data = client.get("/health").json()
    assert data["status"] == "degraded"
    assert data["api_key_configured"] is False

    monkeypatch.setattr(session_manager.app_config.generation, "api_key", "k")
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert data["model"] == session_manager.app_config.generation.model

    print(f"✓ Health: {data['status']}")


def test_topics(client):
    cases = client.get("/api/topics").json()
    assert cases["mode"] == "CASE"
    assert cases["total"] == 19
    assert "Apendicitis aguda" in cases["topics"]

    procedures = client.get("/api/topics", params={"mode": "PROCEDURE"}).json()
    assert procedures["total"] == 6

    assert client.get("/api/topics", params={"mode": "OTHER"}).status_code == 422

    print(f"✓ Topics: {cases['total']} + {procedures['total']}")


# ============================================================
# Session flow
# ============================================================

def test_full_flow(client, fake_client):
    """Повний прохід станції через REST"""
    session_id = _new_session(client)

    state = client.get(f"/api/sessions/{session_id}").json()
    assert state["stage"] == "LOGIN"

    # Порожні дані: етап не змінюється
    state = client.post(f"/api/sessions/{session_id}/login", json={"name": "", "id": "1"}).json()
    assert state["stage"] == "LOGIN"

    state = client.post(f"/api/sessions/{session_id}/login",
                        json={"name": "Ana María Pérez", "id": "1098765432"}).json()
    assert state["stage"] == "MODE_SELECTION"
    assert state["student"] == {"name": "Ana María Pérez", "id": "1098765432"}

    state = client.post(f"/api/sessions/{session_id}/mode", json={"mode": "CASE"}).json()
    assert state["stage"] == "TOPIC_SELECTION"

    state = client.post(f"/api/sessions/{session_id}/topic",
                        json={"topic": "Apendicitis aguda", "include_simulated_patient": True}).json()
    assert state["stage"] == "PREVIEW"
    assert state["scenario"]["topic"] == "Apendicitis aguda"
    assert state["scenario"]["mode"] == "CASE"
    assert "chiefComplaint" in state["scenario"]
    assert state["scenario"]["simulatedPatientScript"]["attitude"] == "Ansioso"

    state = client.post(f"/api/sessions/{session_id}/start").json()
    assert state["stage"] == "EXAM_RUNNING"
    assert state["time_display"] == "08:00"
    assert state["timer_active"] is True

    for item_id, status in [("c1", "CORRECT"), ("c2", "CORRECT"), ("c3", "PARTIAL")]:
        response = client.post(f"/api/sessions/{session_id}/responses",
                               json={"item_id": item_id, "status": status})
        assert response.status_code == 200

    state = client.put(f"/api/sessions/{session_id}/notes", json={"notes": "Buen abordaje"}).json()
    assert state["evaluator_notes"] == "Buen abordaje"
    assert state["responses"] == {"c1": "CORRECT", "c2": "CORRECT", "c3": "PARTIAL"}

    state = client.post(f"/api/sessions/{session_id}/finish").json()
    assert state["stage"] == "RESULTS"
    assert state["feedback"]["calculatedScore"] == pytest.approx(3.125)
    assert state["final_score"] == 3.1
    assert state["score_band"] == "Aceptable"
    assert state["can_download_report"] is False

    state = client.put(f"/api/sessions/{session_id}/results", json={"final_score": 4.0}).json()
    assert state["final_score"] == 4.0
    assert state["needs_justification"] is True

    state = client.put(f"/api/sessions/{session_id}/results", json={
        "justification": "Manejo de vía aérea adecuado",
        "evaluator_name": "Dr. Gómez",
    }).json()
    assert state["needs_justification"] is False
    assert state["can_download_report"] is True

    response = client.get(f"/api/sessions/{session_id}/report")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "Ana_Mar%C3%ADa_P%C3%A9rez_1098765432.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")

    state = client.post(f"/api/sessions/{session_id}/reset").json()
    assert state["stage"] == "LOGIN"
    assert state["session_id"] == session_id
    assert state["student"] is None

    assert len(fake_client.feedback_calls) == 1

    print("✓ Full flow")


def test_scenario_failure(client, fake_client):
    """Помилка генерації — TOPIC_SELECTION з повідомленням"""
    fake_client.fail_scenario = True
    session_id = _new_session(client)
    client.post(f"/api/sessions/{session_id}/login", json={"name": "Ana", "id": "1"})
    client.post(f"/api/sessions/{session_id}/mode", json={"mode": "PROCEDURE"})

    state = client.post(f"/api/sessions/{session_id}/topic", json={"topic": "Sutura de herida"}).json()

    assert state["stage"] == "TOPIC_SELECTION"
    assert state["error"]
    assert state["scenario"] is None

    state = client.post(f"/api/sessions/{session_id}/back").json()
    assert state["stage"] == "MODE_SELECTION"

    print(f"✓ Scenario failure: {state['stage']}")


def test_cancel_preview(client):
    session_id = _new_session(client)
    client.post(f"/api/sessions/{session_id}/login", json={"name": "Ana", "id": "1"})
    client.post(f"/api/sessions/{session_id}/mode", json={"mode": "CASE"})
    client.post(f"/api/sessions/{session_id}/topic", json={"topic": "Colelitiasis"})

    state = client.post(f"/api/sessions/{session_id}/cancel").json()

    assert state["stage"] == "TOPIC_SELECTION"
    assert state["scenario"] is None

    print("✓ Preview cancelled")


# ============================================================
# Errors
# ============================================================

def test_unknown_session(client):
    assert client.get("/api/sessions/nope").status_code == 404
    assert client.post("/api/sessions/nope/start").status_code == 404
    assert client.delete("/api/sessions/nope").status_code == 404

    print("✓ 404")


def test_invalid_transition(client):
    """Подія поза етапом — 409"""
    session_id = _new_session(client)

    response = client.post(f"/api/sessions/{session_id}/start")
    assert response.status_code == 409
    assert response.json()["error"] == "InvalidTransitionError"

    response = client.post(f"/api/sessions/{session_id}/finish")
    assert response.status_code == 409

    print("✓ 409")


def test_validation_errors(client):
    """Невалідні дані — 422"""
    session_id = _new_session(client)
    _to_exam(client, session_id)

    response = client.post(f"/api/sessions/{session_id}/responses", json={"item_id": "zz", "status": "CORRECT"})
    assert response.status_code == 422
    assert response.json()["error"] == "UnknownChecklistItemError"

    response = client.post(f"/api/sessions/{session_id}/responses", json={"item_id": "c1", "status": "MAYBE"})
    assert response.status_code == 422

    client.post(f"/api/sessions/{session_id}/finish")
    response = client.put(f"/api/sessions/{session_id}/results", json={"final_score": 5.5})
    assert response.status_code == 422

    response = client.post(f"/api/sessions/{session_id}/topic", json={"topic": ""})
    assert response.status_code == 422

    print("✓ 422")


def test_report_requires_evaluator(client):
    """Звіт без імені екзаменатора або до RESULTS — 400"""
    session_id = _new_session(client)
    _to_exam(client, session_id)

    response = client.get(f"/api/sessions/{session_id}/report")
    assert response.status_code == 400

    client.post(f"/api/sessions/{session_id}/finish")
    response = client.get(f"/api/sessions/{session_id}/report")
    assert response.status_code == 400
    assert response.json()["error"] == "MissingEvaluatorError"

    print("✓ 400")


def test_report_saved_to_reports_dir(client, monkeypatch, tmp_path):
    """save=true — копія звіту в каталозі звітів сервера"""
    from surgi_eval.api.config import config
    from surgi_eval.api.dependencies import session_manager

    assert session_manager.app_config.report.output_dir == config.reports_dir
    monkeypatch.setattr(session_manager.app_config.report, "output_dir", str(tmp_path / "reports"))

    session_id = _new_session(client)
    _to_exam(client, session_id)
    client.post(f"/api/sessions/{session_id}/finish")
    client.put(f"/api/sessions/{session_id}/results", json={"evaluator_name": "Dr. Gómez"})

    response = client.get(f"/api/sessions/{session_id}/report")
    assert response.status_code == 200
    assert "x-report-saved" not in response.headers
    assert not (tmp_path / "reports").exists()

    response = client.get(f"/api/sessions/{session_id}/report", params={"save": "true"})
    assert response.status_code == 200

    saved = tmp_path / "reports" / "Ana_María_Pérez_1098765432.pdf"
    assert response.headers["x-report-saved"] == "Ana_Mar%C3%ADa_P%C3%A9rez_1098765432.pdf"
    assert saved.read_bytes() == response.content

    print(f"✓ Report saved: {saved.name}")


def test_feedback_fallback(client, fake_client):
    """Модель недоступна — локальна оцінка"""
    fake_client.fail_feedback = True
    session_id = _new_session(client)
    _to_exam(client, session_id)
    client.post(f"/api/sessions/{session_id}/responses", json={"item_id": "c1", "status": "CORRECT"})

    state = client.post(f"/api/sessions/{session_id}/finish").json()

    assert state["stage"] == "RESULTS"
    assert state["feedback"]["calculatedScore"] == pytest.approx(1.25)
    assert state["feedback"]["strengths"] == ["No se pudo generar análisis AI."]
    assert state["final_score"] == 1.2

    print(f"✓ Fallback: {state['final_score']}")


def test_delete_session(client):
    from surgi_eval.api.dependencies import session_manager

    session_id = _new_session(client)
    assert session_manager.get_session(session_id) is not None

    response = client.delete(f"/api/sessions/{session_id}")
    assert response.json() == {"status": "deleted", "session_id": session_id}
    assert session_manager.get_session(session_id) is None

    print("✓ Session deleted")


def demo():
    print("=" * 60)
    print("SurgiEval — Тест API")
    print("=" * 60)

    from surgi_eval.api import app
    from surgi_eval.api.dependencies import get_client

    fake_client = FakeClient()
    app.dependency_overrides[get_client] = lambda: fake_client
    with TestClient(app) as client:
        test_root(client)
        test_topics(client)
        test_full_flow(client, fake_client)
        test_unknown_session(client)
        test_invalid_transition(client)
        test_report_requires_evaluator(client)
    app.dependency_overrides.clear()

    print("=" * 60)
    print("✅ Всі тести пройдено!")


if __name__ == "__main__":
    demo()
