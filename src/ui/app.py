"""Streamlit front end for the Study Guide Generator."""

import logging

import streamlit as st

from src.config import load_config
from src.errors import ConfigurationError, StudyGuideError, user_message
from src.models.question import QuestionType
from src.rendering.document import SECTION_TITLES
from src.service import StudyGuideService

logger = logging.getLogger(__name__)


@st.cache_resource
def get_service() -> StudyGuideService:
    return StudyGuideService(load_config())


def render_guide(guide_id: int) -> None:
    service = get_service()
    stored = service.get(guide_id)
    if stored is None:
        st.warning("Study guide not found.")
        return

    guide = stored.guide
    st.success(f"Generated {guide.total_questions} questions from {guide.filename}")

    st.header("Summary")
    st.write(guide.summary)

    st.header("Question Bank")
    for section in guide.sections:
        st.subheader(SECTION_TITLES[section.type])
        for number, question in enumerate(section.questions, start=1):
            with st.expander(f"Q{number}. {question.question}"):
                for option in question.options or []:
                    st.write(option)
                st.markdown(f"**Answer:** {question.answer}")
                if question.explanation:
                    st.markdown(f"**Explanation:** {question.explanation}")

    docx = service.download(guide_id, "docx")
    txt = service.download(guide_id, "txt")
    col1, col2 = st.columns(2)
    col1.download_button("Download .docx", docx.content, docx.filename, docx.content_type)
    col2.download_button("Download .txt", txt.content, txt.filename, txt.content_type)


def main() -> None:
    config = load_config()
    st.set_page_config(page_title=config.app.name)
    st.title(config.app.name)

    uploaded = st.file_uploader(
        f"Upload a PDF (max {config.upload.max_file_mb}MB)",
        type=[ext.lstrip(".") for ext in config.upload.allowed_extensions],
    )
    selected = st.multiselect(
        "Question types",
        options=[qtype.value for qtype in QuestionType],
        format_func=lambda value: SECTION_TITLES[QuestionType(value)],
    )

    if st.button("Generate Study Guide", type="primary"):
        with st.spinner("Generating study guide..."):
            try:
                stored = get_service().create(
                    uploaded.getvalue() if uploaded else None,
                    uploaded.name if uploaded else "",
                    selected,
                )
                st.session_state["guide_id"] = stored.id
            except ConfigurationError as exc:
                logger.error("Study guide generator is misconfigured: %s", exc)
                st.error(user_message(exc))
            except StudyGuideError as exc:
                logger.error("Study guide generation failed: %s", exc)
                st.error(user_message(exc))

    if "guide_id" in st.session_state:
        render_guide(st.session_state["guide_id"])


main()
