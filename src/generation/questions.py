"""Template-based question generation for the six question types.

Every generator partitions the document text (word chunks or sentences),
walks the partitions cyclically until the requested count is reached, and
builds each question from fixed templates filled with phrases taken from
the partition. A failure while building one question is replaced by a
generic question for that type, so a batch never aborts part way.

Fill-in-the-blank is the only generator that can return fewer questions
than requested: it uses each eligible sentence at most once.
"""

import logging
import random
import re
from collections.abc import Callable

from src.config import ChunkingConfig, QuestionConfig
from src.errors import GenerationError, UnsupportedTypeError
from src.ingestion.chunker import chunk_text, normalize_whitespace, split_sentences
from src.models.question import OPTION_LABELS, Question, QuestionType

logger = logging.getLogger(__name__)

BLANK_TOKEN = "______"
KEY_CONCEPT_MAX_CHARS = 80
MCQ_KEY_MIN_CHARS = 20
MCQ_KEY_MAX_CHARS = 100
FILL_BLANK_MIN_WORDS = 6

NUMERICAL_SOLUTION = (
    "Step 1: Identify the given values. "
    "Step 2: Apply the appropriate formula. "
    "Step 3: Calculate the result. "
    "Step 4: Verify the answer by checking units and whether the result is reasonable."
)

MCQ_DISTRACTORS: tuple[str, ...] = (
    "The material focuses on practical applications and real-world scenarios",
    "The content primarily discusses theoretical frameworks and methodologies",
    "The information provides background context for advanced study",
)

DEFAULT_MCQ_CORRECT = "The material presents fundamental principles essential for understanding"

FALLBACK_QUESTIONS: dict[QuestionType, Question] = {
    QuestionType.THEORETICAL: Question(
        question="What are the main theoretical concepts covered in this academic material?",
        answer=(
            "The material covers important theoretical frameworks and foundational "
            "principles that are essential for understanding the subject matter."
        ),
    ),
    QuestionType.APPLICATION: Question(
        question="How can the concepts from this material be applied in real-world scenarios?",
        answer=(
            "These concepts can be applied in various practical situations, "
            "as demonstrated in the text."
        ),
    ),
    QuestionType.NUMERICAL: Question(
        question=(
            "If numerical data were given for the concepts in this material, "
            "how would you set up and solve a problem based on them?"
        ),
        answer=NUMERICAL_SOLUTION,
    ),
    QuestionType.MCQ: Question(
        question=(
            "Based on the academic content, which statement best represents "
            "the key concept discussed?"
        ),
        options=[
            f"{label}) {text}"
            for label, text in zip(OPTION_LABELS, (DEFAULT_MCQ_CORRECT, *MCQ_DISTRACTORS))
        ],
        answer="A",
        explanation="Option A correctly identifies the fundamental nature of the academic content presented.",
    ),
    QuestionType.FILL_BLANKS: Question(
        question=f"Fill in the blank: The main ideas of this material are explained in the {BLANK_TOKEN}.",
        answer="document",
    ),
    QuestionType.TRUE_FALSE: Question(
        question="True or False: The material presents concepts that are explained in the source document.",
        answer="True",
        explanation="This statement is true: the document is the source of every concept covered here.",
    ),
}

# Polarity flips tried in order; the first pattern that matches is applied once.
NEGATION_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        (r"\bis not\b", "is"),
        (r"\bare not\b", "are"),
        (r"\bis\b", "is not"),
        (r"\bare\b", "are not"),
        (r"\bcan\b", "cannot"),
        (r"\bincreases\b", "decreases"),
        (r"\bdecreases\b", "increases"),
        (r"\bhigh\b", "low"),
        (r"\blow\b", "high"),
        (r"\balways\b", "never"),
        (r"\bnever\b", "always"),
        (r"\bmore\b", "less"),
        (r"\bless\b", "more"),
    )
)

NEGATION_PREFIX = "It is not true that "

_DIGIT_RE = re.compile(r"\d")
_BLANK_PUNCTUATION = ",;:()[]\"'"


def _sentences(text: str) -> list[str]:
    return [s.strip() for s in text.split(".") if s.strip()]


def _terminate(text: str) -> str:
    text = text.strip()
    return text if text.endswith((".", "?", "!")) else text + "."


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "..."


def negate_statement(sentence: str) -> str:
    """Turn a statement into a false one by flipping its polarity.

    Applies the first matching substitution from NEGATION_SUBSTITUTIONS.
    When none matches, the sentence is prefixed with "It is not true that".

    Args:
        sentence: A sentence without its trailing period.

    Returns:
        The altered sentence.
    """
    for pattern, replacement in NEGATION_SUBSTITUTIONS:
        match = pattern.search(sentence)
        if match:
            if match.group()[0].isupper():
                replacement = replacement[0].upper() + replacement[1:]
            return sentence[: match.start()] + replacement + sentence[match.end() :]

    if not sentence:
        return NEGATION_PREFIX.strip()
    return NEGATION_PREFIX + sentence[0].lower() + sentence[1:]


class QuestionGenerator:
    """Generates question banks from document text.

    Instances hold only configuration and the random source; every
    ``generate`` call is independent.

    Args:
        chunking: Per-type chunk sizes.
        settings: True/false bias and option shuffling.
        rng: Random source for blank positions, true/false choice and
            option order. Seed it for reproducible output.
    """

    def __init__(
        self,
        chunking: ChunkingConfig | None = None,
        settings: QuestionConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._chunking = chunking or ChunkingConfig()
        self._settings = settings or QuestionConfig()
        self._rng = rng or random.Random()

        self._dispatch: dict[QuestionType, Callable[[str, int], list[Question]]] = {
            QuestionType.THEORETICAL: self._generate_theoretical,
            QuestionType.APPLICATION: self._generate_application,
            QuestionType.NUMERICAL: self._generate_numerical,
            QuestionType.MCQ: self._generate_mcq,
            QuestionType.FILL_BLANKS: self._generate_fill_blanks,
            QuestionType.TRUE_FALSE: self._generate_true_false,
        }

    @staticmethod
    def parse_type(question_type: str | QuestionType) -> QuestionType:
        """Resolve a request identifier to a QuestionType.

        Raises:
            UnsupportedTypeError: If the identifier is not a known type.
        """
        try:
            return QuestionType(question_type)
        except ValueError as exc:
            raise UnsupportedTypeError(f"Unsupported question type: {question_type}") from exc

    def generate(self, text: str, question_type: str | QuestionType, count: int) -> list[Question]:
        """Generate ``count`` questions of one type.

        Args:
            text: Document text.
            question_type: One of the QuestionType identifiers.
            count: Number of questions wanted.

        Returns:
            Exactly ``count`` questions, or fewer for fill-in-the-blank
            when the text has too few eligible sentences.

        Raises:
            UnsupportedTypeError: If the type is unknown.
            ValueError: If count is not positive.
            GenerationError: If the generator fails as a whole.
        """
        qtype = self.parse_type(question_type)
        if count <= 0:
            raise ValueError(f"Question count must be positive, got {count}")

        clean_text = normalize_whitespace(text)
        try:
            questions = self._dispatch[qtype](clean_text, count)
        except Exception as exc:
            logger.exception("Error generating %s questions", qtype.value)
            raise GenerationError(f"Failed to generate {qtype.value} questions") from exc

        logger.debug("Generated %d %s questions", len(questions), qtype.value)
        return questions

    # ── Shared loop ─────────────────────────────────────────────────────────

    def _cycle(
        self,
        qtype: QuestionType,
        partitions: list[str],
        count: int,
        build: Callable[[str, int], Question],
    ) -> list[Question]:
        """Build ``count`` questions, reusing partitions cyclically.

        Args:
            qtype: Type used to pick the per-item fallback question.
            partitions: Chunks or sentences; at least one entry.
            count: Number of questions to build.
            build: Builds one question from a partition and its index.

        Returns:
            Exactly ``count`` questions.
        """
        questions: list[Question] = []

        for i in range(count):
            index = i % len(partitions)
            try:
                questions.append(build(partitions[index], index))
            except Exception as exc:
                logger.warning("Error generating %s question %d: %s", qtype.value, i, exc)
                questions.append(FALLBACK_QUESTIONS[qtype])

        return questions

    # ── Theoretical ─────────────────────────────────────────────────────────

    def _generate_theoretical(self, text: str, count: int) -> list[Question]:
        chunks = chunk_text(text, self._chunking.theoretical_chunk_size)
        return self._cycle(QuestionType.THEORETICAL, chunks, count, self._build_theoretical)

    def _build_theoretical(self, chunk: str, index: int) -> Question:
        sentences = _sentences(chunk)
        if not sentences:
            return FALLBACK_QUESTIONS[QuestionType.THEORETICAL]

        key = _truncate(sentences[0], KEY_CONCEPT_MAX_CHARS)
        explanation = ". ".join(sentences[:3])
        return Question(
            question=f'What are the underlying principles behind the idea that "{key}"?',
            answer=(
                f"Based on the content: {explanation}. "
                "This demonstrates the key theoretical concepts that students should understand."
            ),
        )

    # ── Application ─────────────────────────────────────────────────────────

    def _generate_application(self, text: str, count: int) -> list[Question]:
        chunks = chunk_text(text, self._chunking.application_chunk_size)
        return self._cycle(QuestionType.APPLICATION, chunks, count, self._build_application)

    def _build_application(self, chunk: str, index: int) -> Question:
        sentences = _sentences(chunk)
        if not sentences:
            return FALLBACK_QUESTIONS[QuestionType.APPLICATION]

        key = _truncate(sentences[0], KEY_CONCEPT_MAX_CHARS)
        basis = ". ".join(sentences[:2])
        return Question(
            question=f'How could the idea that "{key}" be applied in a real-world situation?',
            answer=(
                f"The material explains: {basis}. "
                "In practice, this means recognizing situations where these conditions occur "
                "and using the concept to guide decisions and solve problems."
            ),
        )

    # ── Numerical ───────────────────────────────────────────────────────────

    def _generate_numerical(self, text: str, count: int) -> list[Question]:
        chunks = chunk_text(text, self._chunking.numerical_chunk_size)
        return self._cycle(QuestionType.NUMERICAL, chunks, count, self._build_numerical)

    def _build_numerical(self, chunk: str, index: int) -> Question:
        sentences = _sentences(chunk)
        if _DIGIT_RE.search(chunk):
            key = next((s for s in sentences if _DIGIT_RE.search(s)), sentences[0])
            question = (
                f'Using the figures given in "{_truncate(key, KEY_CONCEPT_MAX_CHARS)}", '
                "calculate the resulting value and show your working."
            )
        elif sentences:
            question = (
                f'If numerical data were given for the idea that '
                f'"{_truncate(sentences[0], KEY_CONCEPT_MAX_CHARS)}", '
                "how would you set up and solve a problem based on it?"
            )
        else:
            return FALLBACK_QUESTIONS[QuestionType.NUMERICAL]

        return Question(question=question, answer=NUMERICAL_SOLUTION)

    # ── Multiple choice ─────────────────────────────────────────────────────

    def _generate_mcq(self, text: str, count: int) -> list[Question]:
        chunks = chunk_text(text, self._chunking.mcq_chunk_size)
        return self._cycle(QuestionType.MCQ, chunks, count, self._build_mcq)

    def _build_mcq(self, chunk: str, index: int) -> Question:
        key_statement = next(
            (
                s.strip()
                for s in chunk.split(".")
                if MCQ_KEY_MIN_CHARS < len(s.strip()) < MCQ_KEY_MAX_CHARS
            ),
            chunk[:MCQ_KEY_MAX_CHARS].strip(),
        )
        if not key_statement:
            return FALLBACK_QUESTIONS[QuestionType.MCQ]

        choices = [_truncate(key_statement, KEY_CONCEPT_MAX_CHARS), *MCQ_DISTRACTORS]
        correct = 0
        if self._settings.shuffle_options:
            order = list(range(len(choices)))
            self._rng.shuffle(order)
            choices = [choices[i] for i in order]
            correct = order.index(0)

        answer = OPTION_LABELS[correct]
        return Question(
            question=(
                f"Which of the following best describes the concept discussed "
                f"in part {index + 1} of the material?"
            ),
            options=[f"{label}) {choice}" for label, choice in zip(OPTION_LABELS, choices)],
            answer=answer,
            explanation=(
                f"Option {answer} is correct as it directly reflects the content "
                "discussed in the source material."
            ),
        )

    # ── Fill in the blank ───────────────────────────────────────────────────

    def _generate_fill_blanks(self, text: str, count: int) -> list[Question]:
        questions: list[Question] = []

        for i, sentence in enumerate(split_sentences(text)):
            if len(questions) >= count:
                break

            words = sentence.split()
            if len(words) < FILL_BLANK_MIN_WORDS:
                continue

            try:
                questions.append(self._build_fill_blank(words))
            except Exception as exc:
                logger.warning("Error generating fillblanks question %d: %s", i, exc)
                questions.append(FALLBACK_QUESTIONS[QuestionType.FILL_BLANKS])

        return questions

    def _build_fill_blank(self, words: list[str]) -> Question:
        blank_index = len(words) // 3 + self._rng.randrange(3)
        key_word = words[blank_index]
        answer = key_word.strip(_BLANK_PUNCTUATION) or key_word

        # Punctuation around the word stays in the sentence
        start = key_word.index(answer)
        words = list(words)
        words[blank_index] = key_word[:start] + BLANK_TOKEN + key_word[start + len(answer) :]
        blanked = " ".join(words)
        return Question(question=f"Fill in the blank: {_terminate(blanked)}", answer=answer)

    # ── True / false ────────────────────────────────────────────────────────

    def _generate_true_false(self, text: str, count: int) -> list[Question]:
        sentences = split_sentences(text)
        if not sentences:
            return [FALLBACK_QUESTIONS[QuestionType.TRUE_FALSE]] * count
        return self._cycle(QuestionType.TRUE_FALSE, sentences, count, self._build_true_false)

    def _build_true_false(self, sentence: str, index: int) -> Question:
        if self._rng.random() < self._settings.true_bias:
            return Question(
                question=f"True or False: {_terminate(sentence)}",
                answer="True",
                explanation="This statement is true: it appears in the source material as written.",
            )

        return Question(
            question=f"True or False: {_terminate(negate_statement(sentence))}",
            answer="False",
            explanation=f'This statement is false. The material states: "{_terminate(sentence)}"',
        )
