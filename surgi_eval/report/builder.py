"""
SurgiEval — Формування звіту

build_report: знімок сесії -> байти PDF
write_report: те саме + запис у файл {Ім'я_Прізвище}_{id}.pdf

Без імені викладача звіт не формується (MissingEvaluatorError),
файл при цьому не створюється.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from surgi_eval.config import ReportConfig
from surgi_eval.exceptions import MissingEvaluatorError, ReportError
from surgi_eval.schemas import SessionSnapshot

from .layout import ReportAssembler, ReportDocument, report_filename
from .renderer import PdfReportRenderer

logger = logging.getLogger(__name__)


def _check_evaluator(snapshot: SessionSnapshot) -> None:
    if not snapshot.evaluator_name.strip():
        raise MissingEvaluatorError("Evaluator name is required to sign the report")


def assemble_report(
    snapshot: SessionSnapshot,
    config: Optional[ReportConfig] = None,
    generated_at: Optional[datetime] = None,
) -> ReportDocument:
    """Розкладка звіту без рендеру (для перевірки вмісту)"""
    _check_evaluator(snapshot)
    return ReportAssembler(config).assemble(snapshot, generated_at=generated_at)


def build_report(
    snapshot: SessionSnapshot,
    config: Optional[ReportConfig] = None,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """
    Сформувати PDF звіт.

    Args:
        snapshot: Знімок завершеної сесії
        config: Геометрія та тексти звіту
        generated_at: Дата в шапці (за замовчуванням — зараз)

    Raises:
        MissingEvaluatorError: порожнє ім'я викладача
    """
    document = assemble_report(snapshot, config=config, generated_at=generated_at)
    pdf_bytes = PdfReportRenderer(author=snapshot.evaluator_name.strip()).render(document)

    logger.info(
        "Report built for %s: %d page(s), %d bytes",
        snapshot.student.id, document.page_count, len(pdf_bytes),
    )
    return pdf_bytes


def write_report(
    snapshot: SessionSnapshot,
    output_dir: Union[str, Path] = "reports",
    config: Optional[ReportConfig] = None,
    generated_at: Optional[datetime] = None,
) -> Path:
    """Сформувати PDF та зберегти в output_dir; повертає шлях до файлу"""
    output_dir = Path(output_dir)
    path = output_dir / report_filename(snapshot.student)
    if path.resolve().parent != output_dir.resolve():
        raise ReportError(f"Report path escapes output directory: {path}")

    pdf_bytes = build_report(snapshot, config=config, generated_at=generated_at)

    output_dir.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)

    logger.info("Report saved: %s", path)
    return path
