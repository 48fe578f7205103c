"""SurgiEval — Каталог тем станцій"""
from typing import List

from .student import ExamMode


TOPICS_CASES = [
    "Manejo inicial del paciente politraumatizado",
    "Trauma de cuello y tórax",
    "Trauma craneoencefálico",
    "Trauma de abdomen y pelvis",
    "Trauma raquimedular",
    "Choque hipovolémico",
    "Quemaduras",
    "Abdomen agudo",
    "Apendicitis aguda",
    "Colelitiasis",
    "Colecistitis (clasificar TOKIO)",
    "Coledocolitiasis",
    "Obstrucción intestinal",
    "Hernias de pared abdominal",
    "Pancreatitis aguda de origen biliar",
    "Hemorragia de vías digestivas",
    "Síndrome aórtico agudo",
    "Enfermedad diverticular",
    "Infecciones quirúrgicas",
]

TOPICS_PROCEDURES = [
    "Intubación orotraqueal",
    "Suturas (todos los tipos)",
    "Toracostomía",
    "Sonda vesical hombre",
    "Sonda vesical mujer",
    "Sonda nasogástrica",
]


def topics_for(mode: ExamMode) -> List[str]:
    """Теми для обраного режиму"""
    if ExamMode(mode).is_procedure:
        return list(TOPICS_PROCEDURES)
    return list(TOPICS_CASES)
