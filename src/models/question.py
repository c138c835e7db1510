"""Question data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    """The six supported question kinds, keyed by their request identifiers."""

    THEORETICAL = "theoretical"
    APPLICATION = "application"
    NUMERICAL = "numerical"
    MCQ = "mcq"
    FILL_BLANKS = "fillblanks"
    TRUE_FALSE = "truefalse"


OPTION_LABELS: tuple[str, ...] = ("A", "B", "C", "D")


class Question(BaseModel):
    """A single generated question with its answer."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    options: list[str] | None = None  # "A) ...", only for multiple choice
    explanation: str | None = None


class QuestionSection(BaseModel):
    """All questions generated for one requested type."""

    model_config = ConfigDict(frozen=True)

    type: QuestionType
    questions: list[Question] = Field(default_factory=list)
