"""Request-level operations: create a study guide from an upload, export it."""

import logging

from pydantic import BaseModel, ConfigDict

from src.config import AppConfig
from src.errors import InsufficientTextError, InvalidInputError
from src.generation.study_guide import StudyGuideBuilder
from src.ingestion.parser import DocumentParser
from src.models.study_guide import StoredStudyGuide
from src.rendering.document import (
    DOCX_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    download_filename,
    render_docx,
    render_text,
)
from src.storage.database import StudyGuideRepository

logger = logging.getLogger(__name__)


class Download(BaseModel):
    """A rendered study guide ready to be sent to the user."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    filename: str
    content_type: str


class StudyGuideService:
    """Handles upload-to-study-guide requests and downloads.

    Args:
        config: Application configuration.
        builder: Study guide builder. Built from config when omitted.
        repository: Storage for generated guides. Uses ``storage.sqlite_path`` when omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        builder: StudyGuideBuilder | None = None,
        repository: StudyGuideRepository | None = None,
    ) -> None:
        self._config = config
        self._parser = DocumentParser(
            allowed_extensions=config.upload.allowed_extensions,
            max_bytes=config.upload.max_file_mb * 1024 * 1024,
        )
        self._builder = builder or StudyGuideBuilder(config)
        self._repository = repository or StudyGuideRepository(config.storage.sqlite_path)

    def create(
        self, data: bytes | None, filename: str, question_types: list[str]
    ) -> StoredStudyGuide:
        """Extract text from an upload, generate a study guide and save it.

        Raises:
            InvalidInputError: If no file or no question types were given.
            InsufficientTextError: If the upload has too little readable text.
            StudyGuideError: Any other pipeline failure.
        """
        if not data:
            raise InvalidInputError("No PDF file uploaded")
        if not question_types:
            raise InvalidInputError("Please select at least one question type")

        document = self._parser.parse_bytes(data, filename)
        if document.char_count < self._config.summary.min_text_chars:
            raise InsufficientTextError(
                f"Only {document.char_count} characters could be extracted from {filename}"
            )

        guide = self._builder.build(document.raw_text, filename, question_types)
        return self._repository.save(guide)

    def get(self, guide_id: int) -> StoredStudyGuide | None:
        """Load a saved study guide, or None if it does not exist."""
        return self._repository.get(guide_id)

    def download(self, guide_id: int, file_format: str = "docx") -> Download:
        """Render a saved study guide.

        Args:
            guide_id: Repository id of the guide.
            file_format: "docx" or "txt".

        Raises:
            LookupError: If no guide has that id.
            InvalidInputError: If the format is unknown.
        """
        stored = self.get(guide_id)
        if stored is None:
            raise LookupError(f"Study guide not found: {guide_id}")

        guide = stored.guide
        if file_format == "docx":
            return Download(
                content=render_docx(guide),
                filename=download_filename(guide, "docx"),
                content_type=DOCX_CONTENT_TYPE,
            )
        if file_format == "txt":
            return Download(
                content=render_text(guide).encode("utf-8"),
                filename=download_filename(guide, "txt"),
                content_type=TEXT_CONTENT_TYPE,
            )
        raise InvalidInputError(f"Unsupported download format: '{file_format}'")
