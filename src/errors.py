"""Exception types raised by the study guide pipeline."""


class StudyGuideError(Exception):
    """Base class for all study guide generation failures."""


class InvalidInputError(StudyGuideError):
    """The request itself is unusable: no file, wrong format, no question types."""


class InsufficientTextError(StudyGuideError):
    """The extracted document text is too short to work with."""


class SummaryUnavailableError(StudyGuideError):
    """Every chunk's condensation attempt failed."""


class UnsupportedTypeError(StudyGuideError):
    """A requested question type is not one of the supported kinds."""


class GenerationError(StudyGuideError):
    """A question generator failed as a whole."""


class ProviderUnavailableError(StudyGuideError):
    """The configured text generation provider cannot serve a request."""


class ConfigurationError(StudyGuideError):
    """The application configuration names something that does not exist."""


INVALID_INPUT_MESSAGE = "Please upload a PDF file and select at least one question type."
INSUFFICIENT_TEXT_MESSAGE = (
    "Unable to extract sufficient text from the PDF. "
    "Please ensure the PDF contains readable text."
)
RETRY_MESSAGE = "Failed to generate the study guide. This may be a temporary problem, please try again."
CONFIGURATION_MESSAGE = (
    "The study guide generator is not configured correctly. "
    "Please contact the administrator."
)


def user_message(exc: BaseException) -> str:
    """Map an exception to a message suitable for showing to the uploader.

    Args:
        exc: The exception raised while handling a request.

    Returns:
        The invalid input, insufficient text or configuration message, and
        the retry message for everything else.
    """
    if isinstance(exc, InvalidInputError | UnsupportedTypeError):
        detail = str(exc)
        return f"{INVALID_INPUT_MESSAGE} ({detail})" if detail else INVALID_INPUT_MESSAGE
    if isinstance(exc, InsufficientTextError):
        return INSUFFICIENT_TEXT_MESSAGE
    if isinstance(exc, ConfigurationError):
        return CONFIGURATION_MESSAGE
    return RETRY_MESSAGE
