"""Data models for the Study Guide Generator."""

from src.models.parsed import ParsedDocument
from src.models.question import OPTION_LABELS, Question, QuestionSection, QuestionType
from src.models.study_guide import StoredStudyGuide, StudyGuide

__all__ = [
    "OPTION_LABELS",
    "ParsedDocument",
    "Question",
    "QuestionSection",
    "QuestionType",
    "StoredStudyGuide",
    "StudyGuide",
]
