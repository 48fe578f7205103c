"""
SurgiEval — Промпти та схеми відповідей

Тексти промптів — іспанською (Колумбія), як і вся станція.
Схеми — у форматі responseSchema Gemini REST API.
"""

from typing import Mapping

from surgi_eval.schemas import PerformanceStatus, ScenarioBase
from surgi_eval.scoring import format_responses


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

CHECKLIST_ITEM_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "id": {"type": "STRING"},
        "category": {"type": "STRING"},
        "text": {"type": "STRING"},
    },
    "required": ["id", "category", "text"],
}

SIMULATED_PATIENT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "attitude": {"type": "STRING"},
        "gestures": {"type": "STRING"},
        "phrases": {"type": "ARRAY", "items": {"type": "STRING"}},
        "allowedInfo": {"type": "STRING"},
        "limitations": {"type": "STRING"},
    },
    "required": ["attitude", "gestures", "phrases", "allowedInfo", "limitations"],
}

SCENARIO_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "description": {"type": "STRING"},
        "chiefComplaint": {"type": "STRING", "description": "Motivo de consulta o Indicación del procedimiento"},
        "currentIllness": {"type": "STRING", "description": "Enfermedad actual o Justificación Clínica breve"},
        "studentInstructions": {"type": "STRING", "description": "Instrucciones directas para el estudiante (Rol, escenario y tiempo límite)"},
        "objectives": {"type": "ARRAY", "items": {"type": "STRING"}},
        "history": {"type": "STRING", "description": "Historia completa o Contexto del procedimiento"},
        "vitalsAndLabs": {"type": "STRING", "description": "Signos vitales/Labs (Caso) o Dejar vacío si es procedimiento"},
        "supplies": {"type": "STRING", "description": "Lista de insumos requeridos (Solo para procedimientos)"},
        "redFlags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "simulatedPatientScript": SIMULATED_PATIENT_SCHEMA,
        "checklist": {"type": "ARRAY", "items": CHECKLIST_ITEM_SCHEMA},
    },
    "required": [
        "title", "description", "chiefComplaint", "currentIllness",
        "studentInstructions", "objectives", "history", "checklist", "redFlags",
    ],
}

FEEDBACK_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "calculatedScore": {"type": "NUMBER", "description": "Score from 0.0 to 5.0"},
        "strengths": {"type": "ARRAY", "items": {"type": "STRING"}},
        "weaknesses": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["calculatedScore", "strengths", "weaknesses", "recommendations"],
}


# =============================================================================
# SCENARIO PROMPTS
# =============================================================================

CLINICAL_SYSTEM_PROMPT = """
Actúa como un experto docente de Cirugía en una facultad de medicina de Colombia.
Diseña una estación de ECOE (OSCE) de CORTE CLÍNICO (Diagnóstico y Manejo).

Contexto: Sistema de Salud Colombiano.
Objetivo: Evaluar razonamiento clínico, anamnesis, diagnóstico y plan de manejo.

La lista de chequeo debe cubrir:
- Habilidad comunicativa.
- Anamnesis y Examen físico.
- Razonamiento diagnóstico.
- Manejo médico inicial y Remisión.
"""

PROCEDURE_SYSTEM_PROMPT = """
Actúa como un experto instructor de Cirugía y Simulación Clínica en Colombia.
Diseña una estación de ECOE (OSCE) de CORTE TÉCNICO / PROCEDIMENTAL.

OBJETIVO: Evaluar EXCLUSIVAMENTE la destreza técnica, la bioseguridad y la seguridad del paciente durante el procedimiento: "{topic}".
NO generes una historia clínica compleja ni interrogatorio extenso. El foco es la MANIOBRA.

La lista de chequeo debe ser secuencial y técnica (Pasos críticos):
1. Preparación y Bioseguridad (EPP, Lavado, Técnica estéril).
2. Insumos y Anestesia (si aplica).
3. Técnica del Procedimiento (Paso a paso de la maniobra).
4. Cierre / Fijación / Comprobación.
5. Disposición de desechos.

En el campo 'supplies' lista: Guantes, suturas específicas, lidocaína, hoja de bisturí, sondas, etc.
En 'history' solo pon una justificación breve de por qué se requiere el procedimiento.
"""

PROCEDURE_FIELD_RULES = """
- 'chiefComplaint': Indicación del procedimiento (ej: "Herida en antebrazo").
- 'currentIllness': Contexto técnico breve.
- 'vitalsAndLabs': DEJA ESTE CAMPO VACÍO O CON "N/A".
- 'supplies': LISTA DETALLADA de equipos necesarios (Pinzas, suturas, jeringas, etc.).
- 'checklist': Ítems puramente técnicos (ej: "Verifica permeabilidad", "Realiza nudo cuadrado").
"""

CASE_FIELD_RULES = """
- 'chiefComplaint': Motivo de consulta (coloquial si hay paciente).
- 'vitalsAndLabs': Signos vitales y laboratorios completos.
"""

SCENARIO_USER_PROMPT = """
Tema: {topic}
Tipo: {kind}
Incluye Paciente Simulado: {patient}
Idioma: Español (Colombia).

INSTRUCCIONES ESPECÍFICAS DE CAMPOS:
- 'studentInstructions':
  * Redacta un texto claro para leerle al estudiante.
  * Estructura: "Usted se encuentra en [Escenario]. Su paciente presenta [Breve problema]. Su tarea es REALIZAR [Acción]."
  * OBLIGATORIO: Finaliza con "Cuenta con 7 minutos para realizar la atención."
  * PROHIBIDO: No menciones bibliografía en este texto.
- 'checklist': cada ítem con un 'id' único.
{field_rules}
"""


def build_scenario_prompt(topic: str, is_procedure: bool, include_simulated_patient: bool) -> str:
    """Повний промпт генерації сценарію"""
    system = PROCEDURE_SYSTEM_PROMPT.format(topic=topic) if is_procedure else CLINICAL_SYSTEM_PROMPT
    user = SCENARIO_USER_PROMPT.format(
        topic=topic,
        kind="PROCEDIMIENTO TÉCNICO" if is_procedure else "CASO CLÍNICO",
        patient="Sí (con jerga colombiana)" if include_simulated_patient else "No (Maniquí/Simulador)",
        field_rules=PROCEDURE_FIELD_RULES if is_procedure else CASE_FIELD_RULES,
    )
    return system + "\n" + user


# =============================================================================
# FEEDBACK PROMPTS
# =============================================================================

FEEDBACK_SYSTEM_PROMPT = """
Eres un docente universitario de cirugía en Colombia. Evalúa el desempeño del estudiante en la estación ECOE.

Contexto: {context}.

Rúbrica (Escala 0.0 a 5.0):
- 0.0-2.9: Insuficiente (Errores críticos de seguridad/asepsia o desconocimiento técnico).
- 3.0-3.9: Aceptable.
- 4.0-4.5: Bueno.
- 4.6-5.0: Excelente.

Genera retroalimentación:
1. Aspectos logrados.
2. Aspectos por mejorar (Sé muy específico en técnica si es procedimiento).
3. Recomendaciones (Basadas en ATLS/Técnica Quirúrgica).
"""

FEEDBACK_USER_PROMPT = """
Caso/Procedimiento: {title}
Nota Matemática: {score:.2f}

Desempeño:
{performance}

Notas del Evaluador:
{notes}
"""


def build_feedback_prompt(
    scenario: ScenarioBase,
    responses: Mapping[str, PerformanceStatus],
    notes: str,
    computed_score: float,
) -> str:
    """Повний промпт зворотного зв'язку"""
    if scenario.mode == "PROCEDURE":
        context = "PROCEDIMIENTO TÉCNICO (Destreza manual, asepsia, seguridad)"
    else:
        context = "CASO CLÍNICO (Razonamiento, diagnóstico)"

    system = FEEDBACK_SYSTEM_PROMPT.format(context=context)
    user = FEEDBACK_USER_PROMPT.format(
        title=scenario.title,
        score=computed_score,
        performance="\n".join(format_responses(scenario.checklist, responses)),
        notes=notes,
    )
    return system + "\n" + user
