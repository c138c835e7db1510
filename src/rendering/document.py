"""Renders a StudyGuide as a downloadable document."""

import io
from datetime import datetime
from pathlib import Path

from docx import Document
from docx.document import Document as DocxDocument
from docx.shared import Pt, RGBColor

from src.models.question import Question, QuestionType
from src.models.study_guide import StudyGuide

SECTION_TITLES: dict[QuestionType, str] = {
    QuestionType.THEORETICAL: "Theoretical Questions",
    QuestionType.APPLICATION: "Application-Based Questions",
    QuestionType.NUMERICAL: "Numerical Problems",
    QuestionType.MCQ: "Multiple Choice Questions",
    QuestionType.FILL_BLANKS: "Fill in the Blanks",
    QuestionType.TRUE_FALSE: "True/False Questions",
}

DOCUMENT_TITLE = "Study Guide"

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

_ANSWER_COLOR = RGBColor(0x2E, 0x7D, 0x32)
_EXPLANATION_COLOR = RGBColor(0xF5, 0x7C, 0x00)


def download_filename(guide: StudyGuide, extension: str) -> str:
    """Build the download name, e.g. ``StudyGuide-lecture1-20240101.docx``."""
    stem = Path(guide.filename).stem or "document"
    return f"StudyGuide-{stem}-{guide.created_at:%Y%m%d}.{extension.lstrip('.')}"


def _header_lines(guide: StudyGuide, generated_on: datetime | None) -> list[str]:
    date = (generated_on or guide.created_at).strftime("%B %d, %Y")
    return [
        f"Source Document: {guide.filename}",
        f"Generated on: {date}",
        f"Total Questions: {guide.total_questions}",
    ]


def _question_lines(number: int, question: Question) -> list[str]:
    lines = [f"Q{number}. {question.question}"]
    lines.extend(f"    {option}" for option in question.options or [])
    lines.append(f"Answer: {question.answer}")
    if question.explanation:
        lines.append(f"Explanation: {question.explanation}")
    return lines


def render_text(guide: StudyGuide, generated_on: datetime | None = None) -> str:
    """Render the study guide as plain text.

    Args:
        guide: The study guide to render.
        generated_on: Date shown in the header. Defaults to the guide's creation time.

    Returns:
        The formatted text.
    """
    rule = "=" * 60
    lines = [DOCUMENT_TITLE.upper(), rule, *_header_lines(guide, generated_on), ""]

    lines += ["SUMMARY", "-" * 60, guide.summary, ""]

    lines += ["QUESTION BANK", "-" * 60]
    for section in guide.sections:
        lines += ["", SECTION_TITLES[section.type], ""]
        for number, question in enumerate(section.questions, start=1):
            lines += _question_lines(number, question)
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def render_docx(guide: StudyGuide, generated_on: datetime | None = None) -> bytes:
    """Render the study guide as a Word document using python-docx.

    Args:
        guide: The study guide to render.
        generated_on: Date shown in the header. Defaults to the guide's creation time.

    Returns:
        The .docx file contents.
    """
    doc = Document()
    doc.styles["Normal"].font.size = Pt(11)

    doc.add_heading(DOCUMENT_TITLE, level=0)
    for line in _header_lines(guide, generated_on):
        label, _, value = line.partition(": ")
        p = doc.add_paragraph()
        p.add_run(f"{label}: ").bold = True
        p.add_run(value)

    doc.add_heading("Summary", level=1)
    for paragraph in guide.summary.split("\n"):
        if paragraph.strip():
            doc.add_paragraph(paragraph.strip())

    doc.add_heading("Question Bank", level=1)
    for section in guide.sections:
        doc.add_heading(SECTION_TITLES[section.type], level=2)
        for number, question in enumerate(section.questions, start=1):
            _add_question(doc, number, question)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _add_question(doc: DocxDocument, number: int, question: Question) -> None:
    p = doc.add_paragraph()
    p.add_run(f"Q{number}. {question.question}").bold = True

    for option in question.options or []:
        doc.add_paragraph(option, style="List Bullet")

    p = doc.add_paragraph()
    run = p.add_run("Answer: ")
    run.bold = True
    run.font.color.rgb = _ANSWER_COLOR
    p.add_run(question.answer)

    if question.explanation:
        p = doc.add_paragraph()
        run = p.add_run("Explanation: ")
        run.bold = True
        run.font.color.rgb = _EXPLANATION_COLOR
        p.add_run(question.explanation)
