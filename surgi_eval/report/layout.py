"""
SurgiEval — Розкладка PDF звіту

ReportAssembler перетворює SessionSnapshot на ReportDocument —
список сторінок з примітивами (прямокутники, текст, лінії) у мм.
Малюванням займається renderer.py; тут лише детермінована розкладка:

    y — курсор від верхнього краю сторінки (мм)
    перед блоком висоти h: якщо y + h > висота - поле → нова сторінка, y = 20

Розділи (по порядку):
    1. Шапка з назвою та датою
    2. Два інформаційні блоки: студент, тема
    3. Лінія та "Nota Final: X.X / 5.0"
    4. Обґрунтування викладача (якщо є)
    5. Aspectos Logrados / Aspectos por Mejorar / Recomendaciones Clínicas
    6. Таблиця чек-листа (шапка таблиці повторюється на кожній сторінці)
    7. Нотатки викладача (якщо є)
    8. Підпис
    9. "Página i de N" на кожній сторінці
"""

from dataclasses import dataclass, field
from datetime import datetime
import re
from typing import Dict, List, Optional, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

from surgi_eval.config import ReportConfig
from surgi_eval.schemas import PerformanceStatus, SessionSnapshot, Student


Color = Tuple[int, int, int]


# =============================================================================
# STYLE
# =============================================================================

NAVY: Color = (0, 51, 102)
WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
TEXT: Color = (30, 30, 30)
MUTED: Color = (100, 100, 100)
FOOTER_GRAY: Color = (150, 150, 150)
BOX_FILL: Color = (248, 250, 252)
BOX_BORDER: Color = (200, 200, 200)
SECTION_FILL: Color = (241, 245, 249)
TABLE_HEADER_FILL: Color = (226, 232, 240)
TABLE_HEADER_TEXT: Color = (71, 85, 105)
JUSTIFICATION_FILL: Color = (255, 255, 240)
JUSTIFICATION_BORDER: Color = (230, 230, 200)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

STATUS_LABELS: Dict[PerformanceStatus, str] = {
    PerformanceStatus.CORRECT: "CORRECTO",
    PerformanceStatus.PARTIAL: "PARCIAL",
    PerformanceStatus.INCORRECT: "ERROR",
    PerformanceStatus.NOT_DONE: "NO REALIZADO",
}

STATUS_COLORS: Dict[PerformanceStatus, Color] = {
    PerformanceStatus.CORRECT: (22, 163, 74),
    PerformanceStatus.PARTIAL: (202, 138, 4),
    PerformanceStatus.INCORRECT: (220, 38, 38),
    PerformanceStatus.NOT_DONE: (100, 116, 139),
}

# (заголовок, колір тексту, колір смуги)
FEEDBACK_BLOCKS = [
    ("Aspectos Logrados", (22, 163, 74), (220, 252, 231)),
    ("Aspectos por Mejorar", (180, 83, 9), (254, 243, 199)),
    ("Recomendaciones Clínicas", (29, 78, 216), (219, 234, 254)),
]

EMPTY_BLOCK_PLACEHOLDER = "No se registraron comentarios."
TABLE_TITLE = "Detalle de Lista de Chequeo"
TABLE_STATUS_HEADER = "ESTADO"
TABLE_ITEM_HEADER = "CRITERIO / HABILIDAD"
NOTES_TITLE = "Notas del Docente"
JUSTIFICATION_LABEL = "Justificación del Docente:"
SIGNATURE_LABEL = "Evaluado por:"


# =============================================================================
# DOCUMENT MODEL
# =============================================================================

@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    tag: str = ""


@dataclass(frozen=True)
class Text:
    """Рядок тексту; y — базова лінія"""
    x: float
    y: float
    text: str
    font: str = FONT
    size: float = 10
    color: Color = BLACK
    align: str = "left"   # left | right | center
    tag: str = ""


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color = BLACK
    width: float = 0.5
    tag: str = ""


@dataclass
class Page:
    """Одна сторінка звіту"""
    number: int
    elements: List[object] = field(default_factory=list)
    footer: Optional[Text] = None

    @property
    def texts(self) -> List[str]:
        return [el.text for el in self.elements if isinstance(el, Text)]

    def tagged(self, tag: str) -> List[object]:
        return [el for el in self.elements if el.tag == tag]

    def tags(self) -> List[str]:
        seen = []
        for el in self.elements:
            if el.tag and el.tag not in seen:
                seen.append(el.tag)
        return seen


@dataclass
class ReportDocument:
    """Результат розкладки — вхід для PdfReportRenderer"""
    title: str
    filename: str
    generated_at: datetime
    page_width: float
    page_height: float
    pages: List[Page] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def all_texts(self) -> List[str]:
        texts = []
        for page in self.pages:
            texts.extend(page.texts)
            if page.footer is not None:
                texts.append(page.footer.text)
        return texts

    def pages_with(self, text: str) -> List[int]:
        """Номери сторінок, що містять рядок"""
        return [page.number for page in self.pages if text in page.texts]


def wrap_text(text: str, width: float, font: str = FONT, size: float = 10) -> List[str]:
    """Розбити текст на рядки шириною width (мм)"""
    lines = simpleSplit(text or "", font, size, width * mm)
    return lines or [""]


def format_timestamp(moment: datetime) -> str:
    return moment.strftime("%d/%m/%Y %H:%M:%S")


_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def _filename_part(value: str, default: str) -> str:
    part = re.sub(r"\s+", "_", value.strip())
    part = _UNSAFE_FILENAME_CHARS.sub("_", part)
    # Без ведучих крапок: '..' не стає компонентом шляху
    return part.strip("._") or default


def report_filename(student: Student) -> str:
    """'Ana María Pérez' + '109' -> 'Ana_María_Pérez_109.pdf'"""
    name = _filename_part(student.name, "estudiante")
    student_id = _filename_part(student.id, "sin_id")
    return f"{name}_{student_id}.pdf"


# =============================================================================
# FLOW
# =============================================================================

class _Flow:
    """Курсор розкладки поверх списку сторінок"""

    def __init__(self, config: ReportConfig):
        self.config = config
        self.pages: List[Page] = [Page(number=1)]
        self.y = config.top

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def add(self, element) -> None:
        self.page.elements.append(element)

    def new_page(self) -> None:
        self.pages.append(Page(number=len(self.pages) + 1))
        self.y = self.config.top

    def ensure(self, height: float) -> bool:
        """Нова сторінка, якщо блок висоти height не вміщується"""
        if self.y + height > self.config.bottom_limit:
            self.new_page()
            return True
        return False


# =============================================================================
# ASSEMBLER
# =============================================================================

class ReportAssembler:
    """
    Розкладка звіту ECOE.

    Приклад:
        assembler = ReportAssembler()
        document = assembler.assemble(snapshot, generated_at=datetime(2026, 3, 1, 10, 0))
        print(document.page_count)
    """

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def assemble(self, snapshot: SessionSnapshot, generated_at: Optional[datetime] = None) -> ReportDocument:
        generated_at = generated_at or datetime.now()
        cfg = self.config
        flow = _Flow(cfg)

        self._header(flow, generated_at)
        self._info_boxes(flow, snapshot)
        self._score(flow, snapshot)
        self._feedback(flow, snapshot)
        self._checklist(flow, snapshot)
        self._notes(flow, snapshot)
        self._signature(flow, snapshot)
        self._footers(flow)

        return ReportDocument(
            title=cfg.title,
            filename=report_filename(snapshot.student),
            generated_at=generated_at,
            page_width=cfg.page_width,
            page_height=cfg.page_height,
            pages=flow.pages,
        )

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _header(self, flow: _Flow, generated_at: datetime) -> None:
        cfg = self.config
        flow.add(Rect(0, 0, cfg.page_width, cfg.header_height, fill=NAVY, tag="header"))
        flow.add(Text(cfg.margin, 20, cfg.title, FONT_BOLD, 18, WHITE, tag="header"))
        flow.add(Text(
            cfg.page_width - cfg.margin, 20, format_timestamp(generated_at),
            FONT, 10, WHITE, align="right", tag="header",
        ))
        flow.y = cfg.header_height + 10

    def _info_boxes(self, flow: _Flow, snapshot: SessionSnapshot) -> None:
        cfg = self.config
        y = flow.y
        box_h = cfg.info_box_height
        col_w = cfg.content_width / 2 - 3

        # Студент
        x = cfg.margin
        flow.add(Rect(x, y, col_w, box_h, fill=BOX_FILL, stroke=BOX_BORDER, tag="student"))
        flow.add(Text(x + 4, y + 8, "ESTUDIANTE", FONT_BOLD, 9, NAVY, tag="student"))
        flow.add(Text(x + 4, y + 18, snapshot.student.name, FONT, 11, BLACK, tag="student"))
        flow.add(Text(x + 4, y + 26, f"Documento: {snapshot.student.id}", FONT, 10, BLACK, tag="student"))

        # Тема
        x = cfg.margin + col_w + 6
        topic = snapshot.scenario.topic or snapshot.scenario.title
        flow.add(Rect(x, y, col_w, box_h, fill=BOX_FILL, stroke=BOX_BORDER, tag="topic"))
        flow.add(Text(x + 4, y + 8, "CASO CLÍNICO / PROCEDIMIENTO", FONT_BOLD, 9, NAVY, tag="topic"))
        for i, line in enumerate(wrap_text(topic, col_w - 8, FONT, 10)):
            flow.add(Text(x + 4, y + 18 + i * cfg.row_line_height, line, FONT, 10, BLACK, tag="topic"))

        flow.y = y + box_h + 12

    def _score(self, flow: _Flow, snapshot: SessionSnapshot) -> None:
        cfg = self.config
        flow.add(Line(cfg.margin, flow.y, cfg.page_width - cfg.margin, flow.y, NAVY, 0.5, tag="score"))
        flow.y += 10
        flow.add(Text(
            cfg.margin, flow.y, f"Nota Final: {snapshot.final_score:.1f} / 5.0",
            FONT_BOLD, 16, NAVY, tag="score",
        ))

        justification = snapshot.justification.strip()
        if not justification:
            flow.y += 15
            return

        flow.y += 8
        lines = wrap_text(justification, cfg.content_width - 4, FONT_ITALIC, 9)
        self._text_box(
            flow, lines, FONT_ITALIC, "justification",
            fill=JUSTIFICATION_FILL, stroke=JUSTIFICATION_BORDER, label=JUSTIFICATION_LABEL,
        )
        flow.y += 5

    def _text_box(self, flow: _Flow, lines: List[str], font: str, tag: str,
                  fill=None, stroke=None, label: Optional[str] = None) -> None:
        """
        Рамка з текстом, що переноситься між сторінками.

        На кожній сторінці — окремий сегмент рамки; мітка лише у першому.
        """
        cfg = self.config
        step = cfg.bullet_line_height
        tail = 5 if label else 4
        remaining = list(lines)
        first = True

        while remaining:
            offset = 12 if (first and label) else 6
            room = cfg.bottom_limit - flow.y - offset - tail
            fit = int(room // step) + 1 if room >= 0 else 0
            if fit < min(2, len(remaining)) and flow.y > cfg.top:
                flow.new_page()
                continue
            fit = max(fit, 1)

            chunk, remaining = remaining[:fit], remaining[fit:]
            y = flow.y
            height = offset + (len(chunk) - 1) * step + tail
            flow.add(Rect(cfg.margin, y, cfg.content_width, height, fill=fill, stroke=stroke, tag=tag))
            if first and label:
                flow.add(Text(cfg.margin + 3, y + 6, label, FONT_BOLD, 9, MUTED, tag=tag))
            for i, line in enumerate(chunk):
                flow.add(Text(cfg.margin + 3, y + offset + i * step, line, font, 9, BLACK, tag=tag))

            flow.y = y + height
            first = False
            if remaining:
                flow.new_page()

    def _feedback(self, flow: _Flow, snapshot: SessionSnapshot) -> None:
        cfg = self.config
        feedback = snapshot.feedback
        data = [feedback.strengths, feedback.weaknesses, feedback.recommendations]

        for (title, color, band), items in zip(FEEDBACK_BLOCKS, data):
            tag = title.lower()
            flow.ensure(20)
            flow.add(Rect(cfg.margin, flow.y, cfg.content_width, 8, fill=band, tag=tag))
            flow.add(Text(cfg.margin + 3, flow.y + 5.5, title.upper(), FONT_BOLD, 10, color, tag=tag))
            flow.y += 10

            if not items:
                flow.add(Text(cfg.margin + 3, flow.y, EMPTY_BLOCK_PLACEHOLDER, FONT, 9, TEXT, tag=tag))
                flow.y += 6
            else:
                for item in items:
                    lines = wrap_text(f"• {item}", cfg.content_width - 6, FONT, 9)
                    flow.ensure(len(lines) * cfg.bullet_line_height)
                    for i, line in enumerate(lines):
                        flow.add(Text(
                            cfg.margin + 3, flow.y + i * cfg.bullet_line_height, line,
                            FONT, 9, TEXT, tag=tag,
                        ))
                    flow.y += len(lines) * cfg.bullet_line_height + 2
            flow.y += 6

        flow.y += 5

    def _table_header(self, flow: _Flow) -> None:
        cfg = self.config
        y = flow.y
        flow.add(Rect(cfg.margin, y, cfg.content_width, cfg.table_header_height,
                      fill=TABLE_HEADER_FILL, tag="table-header"))
        flow.add(Text(cfg.margin + 3, y + 5, TABLE_STATUS_HEADER, FONT, 8, TABLE_HEADER_TEXT, tag="table-header"))
        flow.add(Text(
            cfg.margin + 3 + cfg.status_column_width, y + 5, TABLE_ITEM_HEADER,
            FONT, 8, TABLE_HEADER_TEXT, tag="table-header",
        ))
        flow.y += cfg.table_header_height

    def _checklist(self, flow: _Flow, snapshot: SessionSnapshot) -> None:
        cfg = self.config

        # Заголовок таблиці не лишаємо самотнім внизу сторінки
        if flow.y > cfg.page_height - 60:
            flow.new_page()

        flow.add(Text(cfg.margin, flow.y, TABLE_TITLE, FONT_BOLD, 14, NAVY, tag="table-title"))
        flow.y += 8
        self._table_header(flow)

        text_x = cfg.margin + 3 + cfg.status_column_width
        text_width = cfg.content_width - cfg.status_column_width - 8

        for index, item in enumerate(snapshot.scenario.checklist):
            status = snapshot.status_of(item.id)
            lines = wrap_text(item.label, text_width, FONT, 9)
            row_height = len(lines) * cfg.row_line_height + cfg.row_padding

            if flow.ensure(row_height):
                self._table_header(flow)

            tag = f"row:{item.id}"
            y = flow.y
            if index % 2 == 0:
                flow.add(Rect(cfg.margin, y, cfg.content_width, row_height, fill=BOX_FILL, tag=tag))
            flow.add(Text(
                cfg.margin + 3, y + 4, STATUS_LABELS[status], FONT_BOLD, 7,
                STATUS_COLORS[status], tag=tag,
            ))
            for i, line in enumerate(lines):
                flow.add(Text(text_x, y + 4 + i * cfg.row_line_height, line, FONT, 9, TEXT, tag=tag))
            flow.y += row_height

    def _notes(self, flow: _Flow, snapshot: SessionSnapshot) -> None:
        cfg = self.config
        notes = snapshot.evaluator_notes.strip()
        if not notes:
            return

        flow.y += 10
        flow.ensure(15)
        flow.add(Rect(cfg.margin, flow.y, cfg.content_width, 8, fill=SECTION_FILL, tag="notes"))
        flow.add(Text(cfg.margin + 3, flow.y + 5.5, NOTES_TITLE.upper(), FONT_BOLD, 10, BLACK, tag="notes"))
        flow.y += 12

        lines = wrap_text(notes, cfg.content_width - 6, FONT, 9)
        self._text_box(flow, lines, FONT, "notes", stroke=BOX_BORDER)

    def _signature(self, flow: _Flow, snapshot: SessionSnapshot) -> None:
        cfg = self.config
        # Лінія підпису на 30 мм нижче + три рядки під нею
        if flow.y + 30 + 16 > cfg.bottom_limit:
            flow.new_page()
            flow.y += 20
        else:
            flow.y += 30

        y = flow.y
        flow.add(Line(cfg.margin, y, cfg.margin + 80, y, BLACK, 0.5, tag="signature"))
        flow.add(Text(cfg.margin, y + 5, SIGNATURE_LABEL, FONT_BOLD, 10, BLACK, tag="signature"))
        flow.add(Text(cfg.margin, y + 10, snapshot.evaluator_name.strip(), FONT, 10, BLACK, tag="signature"))
        flow.add(Text(cfg.margin, y + 14, cfg.role_caption, FONT, 8, MUTED, tag="signature"))
        flow.y = y + 16

    def _footers(self, flow: _Flow) -> None:
        cfg = self.config
        total = len(flow.pages)
        for page in flow.pages:
            page.footer = Text(
                cfg.page_width / 2, cfg.page_height - 10,
                f"Página {page.number} de {total} | {cfg.footer_brand}",
                FONT, 8, FOOTER_GRAY, align="center", tag="footer",
            )
