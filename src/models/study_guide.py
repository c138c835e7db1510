"""Study guide data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from src.models.question import QuestionSection, QuestionType


class StudyGuide(BaseModel):
    """A generated study guide: summary plus one question section per type."""

    model_config = ConfigDict(frozen=True)

    filename: str
    summary: str
    sections: list[QuestionSection] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_questions(self) -> int:
        return sum(len(section.questions) for section in self.sections)

    @property
    def selected_types(self) -> list[QuestionType]:
        return [section.type for section in self.sections]


class StoredStudyGuide(BaseModel):
    """A study guide together with its repository identifier."""

    model_config = ConfigDict(frozen=True)

    id: int
    guide: StudyGuide
