"""
SurgiEval — Web UI (Streamlit)

Інтерфейс станції ОСКІ: один екран на кожен етап ExamSession.
ExamController живе в st.session_state; таймер станції — його
CountdownTimer, а фрагмент лише перемальовує залишок часу щосекунди.

Запуск:
    streamlit run surgi_eval/web_ui/app.py

    або:

    python scripts/run_web.py
"""

import streamlit as st
import sys
from pathlib import Path

# Додаємо корінь проекту
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from surgi_eval.config import get_default_config, setup_logging
from surgi_eval.exam_engine import ExamController, Stage
from surgi_eval.generation import GeminiClient
from surgi_eval.report import STATUS_LABELS, report_filename
from surgi_eval.schemas import ExamMode, PerformanceStatus, topics_for
from surgi_eval.scoring import score_band


STATUS_OPTIONS = [
    PerformanceStatus.CORRECT,
    PerformanceStatus.PARTIAL,
    PerformanceStatus.INCORRECT,
    PerformanceStatus.NOT_DONE,
]

STATUS_BUTTONS = {
    PerformanceStatus.CORRECT: "✅ Correcto",
    PerformanceStatus.PARTIAL: "🟡 Parcial",
    PerformanceStatus.INCORRECT: "❌ Error",
    PerformanceStatus.NOT_DONE: "⚪ No Hizo",
}


def get_controller() -> ExamController:
    """Контролер сесії браузера"""
    if "controller" not in st.session_state:
        config = get_default_config()
        setup_logging(config.log_level, logs_dir=config.logs_dir)
        st.session_state.controller = ExamController(GeminiClient(config.generation), config=config)
    return st.session_state.controller


# ============================================================
# LOGIN
# ============================================================

def render_login(controller: ExamController):
    st.title("🏥 SurgiEval AI")
    st.caption("Evaluación ECOE de Cirugía")

    with st.form("login"):
        name = st.text_input("Nombre del Estudiante", placeholder="Ej: Ana María Pérez")
        student_id = st.text_input("Cédula de Ciudadanía / Documento", placeholder="Ej: 1098...")
        submitted = st.form_submit_button("Ingresar", type="primary", use_container_width=True)

    if submitted:
        session = controller.login(name, student_id)
        if session.stage is Stage.LOGIN:
            st.warning("Ingrese nombre y documento del estudiante")
        else:
            st.rerun()


# ============================================================
# MODE / TOPIC
# ============================================================

def render_mode_selection(controller: ExamController):
    student = controller.session.student
    st.title("Seleccione el Tipo de Estación")
    st.caption(f"{student.name} ({student.id})")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🩺 Generar Caso Clínico", use_container_width=True):
            controller.select_mode(ExamMode.CASE)
            st.rerun()
    with col2:
        if st.button("✂️ Generar Procedimiento", use_container_width=True):
            controller.select_mode(ExamMode.PROCEDURE)
            st.rerun()


def render_topic_selection(controller: ExamController):
    session = controller.session

    if st.button("← Volver"):
        controller.back_to_modes()
        st.rerun()

    st.title("Seleccionar " + ("Procedimiento a Evaluar" if session.is_procedure else "Tema Clínico"))

    if session.error:
        st.error(session.error)

    include_patient = False
    if not session.is_procedure:
        include_patient = st.toggle(
            "Paciente Simulado: ¿incluir guion con expresiones locales?",
            value=session.include_simulated_patient,
        )

    topics = topics_for(session.mode)
    cols = st.columns(3)
    for i, topic in enumerate(topics):
        if cols[i % 3].button(topic, key=f"topic_{i}", use_container_width=True):
            with st.spinner(f"Generando {topic}... Consultando literatura médica y GPC Colombianas"):
                controller.select_topic(topic, include_patient)
            st.rerun()


# ============================================================
# PREVIEW
# ============================================================

def render_preview(controller: ExamController):
    session = controller.session
    scenario = session.scenario
    is_procedure = session.is_procedure

    st.header(f"Previsualización del {'Procedimiento' if is_procedure else 'Caso'} (Solo Docente)")

    if scenario.student_instructions:
        st.info(f"📣 **Leer al Estudiante (Entrada)**\n\n\"{scenario.student_instructions}\"")

    st.caption("TEMA DE LA ESTACIÓN")
    st.subheader(scenario.title)

    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"**{'Indicación / Procedimiento' if is_procedure else 'Motivo de Consulta'}**")
        st.write(scenario.chief_complaint or "No especificado")
    with col2:
        st.markdown(f"**{'Justificación Breve' if is_procedure else 'Resumen del Caso'}**")
        st.write(scenario.description)

    if is_procedure:
        if scenario.supplies:
            st.markdown("**🧰 Insumos / Equipo Requerido**")
            st.text(scenario.supplies)
    else:
        st.markdown("**Enfermedad Actual**")
        st.write(scenario.current_illness or scenario.history)

    st.markdown("**🎯 Objetivos de Aprendizaje**")
    objectives = scenario.objectives or ["Evaluar competencia técnica y seguridad."]
    st.markdown("\n".join(f"- {obj}" for obj in objectives))

    script = scenario.simulated_patient_script
    if script is not None and not is_procedure:
        with st.expander("👤 Guion Paciente Simulado", expanded=True):
            st.markdown(f"**Actitud:** {script.attitude}")
            st.markdown(f"**Gestos:** {script.gestures}")
            st.markdown("**Frases Obligatorias (Jerga Local):**")
            st.markdown("\n".join(f"- {p}" for p in script.phrases))

    st.divider()
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Cancelar / Nuevo Caso", use_container_width=True):
            controller.cancel_preview()
            st.rerun()
    with col2:
        minutes = controller.config.timer.station_duration_seconds // 60
        if st.button(f"▶️ Iniciar ({minutes - 1} min Ejecución + 1 min Feedback)", type="primary",
                     use_container_width=True):
            controller.start_exam()
            st.rerun()


# ============================================================
# EXAM
# ============================================================

@st.fragment(run_every=1)
def render_timer(controller: ExamController):
    session = controller.session
    if session.stage is not Stage.EXAM_RUNNING:
        # Час вичерпано: перемальовуємо весь екран
        st.rerun()

    warning = session.time_remaining <= controller.config.timer.warning_seconds
    if warning:
        st.error(f"⏰ **{session.time_display}** — ÚLTIMO MINUTO: RETROALIMENTACIÓN")
    else:
        st.markdown(f"### ⏱️ {session.time_display}")


def render_exam(controller: ExamController):
    session = controller.session
    scenario = session.scenario
    is_procedure = session.is_procedure

    col_title, col_timer = st.columns([3, 1])
    with col_title:
        st.markdown("**ECOE/OSCE SURGERY**")
    with col_timer:
        render_timer(controller)

    left, right = st.columns([1, 2])

    with left:
        if scenario.student_instructions:
            st.info(f"📣 *\"{scenario.student_instructions}\"*")
        st.subheader(scenario.title)
        st.caption(f"{session.student.name} ({session.student.id})")

        st.markdown(f"**{'Contexto / Indicación' if is_procedure else 'Historia Clínica'}**")
        st.write(scenario.history)

        if is_procedure:
            if scenario.supplies:
                st.markdown("**Materiales / Insumos**")
                st.text(scenario.supplies)
        else:
            st.markdown("**Hallazgos / Paraclínicos**")
            st.write(scenario.vitals_and_labs)
            if scenario.red_flags:
                st.markdown("**🚩 Red Flags (Evaluador)**")
                st.markdown("\n".join(f"- {flag}" for flag in scenario.red_flags))

        script = scenario.simulated_patient_script
        if script is not None and not is_procedure:
            st.markdown("**Info Paciente Simulado**")
            st.caption(f"Permitido: {script.allowed_info}")
            st.caption(f"Límite: {script.limitations}")

    with right:
        st.subheader("Lista de Chequeo Técnica" if is_procedure else "Lista de Chequeo Clínica")

        for item in scenario.checklist:
            current = session.responses.get(item.id)
            st.caption(item.category.upper())
            choice = st.radio(
                item.text,
                options=STATUS_OPTIONS,
                index=STATUS_OPTIONS.index(current) if current is not None else None,
                format_func=lambda status: STATUS_BUTTONS[status],
                horizontal=True,
                key=f"item_{item.id}",
            )
            if (choice is not None and choice is not current
                    and controller.session.stage is Stage.EXAM_RUNNING):
                controller.record_response(item.id, choice)

        placeholder = (
            "REGISTRE: Fallas en asepsia, técnica deficiente, temblor, inseguridad..."
            if is_procedure else
            "REGISTRE: Relación médico-paciente, orden lógico, omisiones..."
        )
        notes = st.text_area("✍️ Notas del Docente / Observaciones", value=session.evaluator_notes,
                             placeholder=placeholder, height=120)
        if notes != session.evaluator_notes and controller.session.stage is Stage.EXAM_RUNNING:
            controller.update_notes(notes)

        if st.button("💾 Finalizar Estación", type="primary", use_container_width=True):
            if controller.session.stage is Stage.EXAM_RUNNING:
                with st.spinner("Analizando desempeño..."):
                    controller.finish_exam()
            st.rerun()


@st.fragment(run_every=1)
def render_pending(controller: ExamController, text: str):
    if not controller.session.stage.is_pending:
        st.rerun()
    st.info(f"⏳ {text}")


# ============================================================
# RESULTS
# ============================================================

def render_results(controller: ExamController):
    session = controller.session
    feedback = session.feedback

    band = score_band(session.final_score)
    st.title("Resultados de Evaluación")
    st.caption(f"{session.student.name} - {session.scenario.title}")
    st.metric("Nota Final", f"{session.final_score:.1f} / 5.0", band.value, delta_color="off")

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Retroalimentación Automática")
        st.caption(f"Nota calculada: {feedback.calculated_score:.2f}")
        st.markdown("**✅ Aspectos Logrados**")
        st.markdown("\n".join(f"- {s}" for s in feedback.strengths) or "—")
        st.markdown("**⚠️ Aspectos por Mejorar**")
        st.markdown("\n".join(f"- {w}" for w in feedback.weaknesses) or "—")
        st.markdown("**🩺 Recomendaciones Clínicas**")
        st.markdown("\n".join(f"- {r}" for r in feedback.recommendations) or "—")

        with st.expander("Detalle de Lista de Chequeo"):
            for item in session.scenario.checklist:
                st.markdown(f"`{STATUS_LABELS[session.status_of(item.id)]}` {item.label}")

    with col2:
        st.subheader("Validación del Docente")

        evaluator = st.text_input("Nombre del Docente Evaluador (Requerido)",
                                  value=session.evaluator_name, placeholder="Dr./Dra. Nombre Apellido")
        if evaluator != session.evaluator_name:
            controller.set_evaluator_name(evaluator)

        new_score = st.number_input(f"Modificar Nota (0.0 - {session.max_score:.1f})", min_value=0.0,
                                    max_value=float(session.max_score),
                                    step=0.1, value=float(session.final_score), format="%.1f")
        if round(new_score, 1) != session.final_score:
            controller.set_final_score(new_score)

        justification = st.text_area("Justificación del Cambio (Obligatorio si se edita)",
                                     value=session.justification,
                                     placeholder="Explique el motivo del ajuste de nota...")
        if justification != session.justification:
            controller.set_justification(justification)

        session = controller.session
        if session.needs_justification:
            st.warning("La nota fue modificada: registre la justificación del cambio")

        if session.can_download_report:
            st.download_button(
                "⬇️ Guardar y Descargar PDF",
                data=controller.report_bytes(),
                file_name=report_filename(session.student),
                mime="application/pdf",
                type="primary",
                use_container_width=True,
                on_click=controller.save_report,
            )
        else:
            st.button("⬇️ Guardar y Descargar PDF", disabled=True, use_container_width=True)

        if st.button("🔄 Nueva Evaluación", use_container_width=True):
            controller.reset()
            st.rerun()


# ============================================================
# MAIN
# ============================================================

def main():
    # Налаштування сторінки
    st.set_page_config(
        page_title="SurgiEval — Evaluación ECOE",
        page_icon="🏥",
        layout="wide",
    )

    controller = get_controller()
    stage = controller.session.stage

    if stage is Stage.LOGIN:
        render_login(controller)
    elif stage is Stage.MODE_SELECTION:
        render_mode_selection(controller)
    elif stage is Stage.TOPIC_SELECTION:
        render_topic_selection(controller)
    elif stage is Stage.GENERATING:
        render_pending(controller, "Generando caso...")
    elif stage is Stage.PREVIEW:
        render_preview(controller)
    elif stage is Stage.EXAM_RUNNING:
        render_exam(controller)
    elif stage is Stage.FEEDBACK_GENERATION:
        render_pending(controller, "Analizando desempeño...")
    elif stage is Stage.RESULTS:
        render_results(controller)


if __name__ == "__main__":
    main()
