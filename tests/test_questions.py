"""Tests for template-based question generation."""

import random
import re
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config import ChunkingConfig, QuestionConfig
from src.errors import GenerationError, UnsupportedTypeError
from src.generation.questions import (
    BLANK_TOKEN,
    FALLBACK_QUESTIONS,
    MCQ_DISTRACTORS,
    NEGATION_PREFIX,
    NUMERICAL_SOLUTION,
    QuestionGenerator,
    negate_statement,
)
from src.models.question import OPTION_LABELS, QuestionType

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "sample_texts"

LOREM = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua ut enim ad minim veniam quis"
)

NO_DIGITS = (
    "Plants absorb light through chlorophyll in their leaves. "
    "The absorbed energy drives the splitting of water molecules. "
    "Oxygen is released into the atmosphere as a by-product. "
    "Sugars produced by the plant provide energy for growth."
)


@pytest.fixture
def sample_text() -> str:
    return (FIXTURES_DIR / "photosynthesis.txt").read_text(encoding="utf-8")


@pytest.fixture
def generator() -> QuestionGenerator:
    return QuestionGenerator(rng=random.Random(1234))


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


# ── Dispatch ─────────────────────────────────────────────────────────────────


class TestDispatch:
    def test_unsupported_type(self, generator: QuestionGenerator) -> None:
        with pytest.raises(UnsupportedTypeError, match="essay"):
            generator.generate(LOREM, "essay", 7)

    def test_accepts_enum_and_string(self, generator: QuestionGenerator) -> None:
        assert len(generator.generate(LOREM, QuestionType.MCQ, 2)) == 2
        assert len(generator.generate(LOREM, "mcq", 2)) == 2

    def test_rejects_non_positive_count(self, generator: QuestionGenerator) -> None:
        with pytest.raises(ValueError):
            generator.generate(LOREM, "theoretical", 0)

    def test_whole_generator_failure_is_wrapped(self, generator: QuestionGenerator) -> None:
        with patch(
            "src.generation.questions.chunk_text", side_effect=RuntimeError("boom")
        ):
            with pytest.raises(GenerationError, match="theoretical") as exc_info:
                generator.generate(LOREM, "theoretical", 3)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_item_failure_uses_fallback(self, generator: QuestionGenerator) -> None:
        with patch.object(
            QuestionGenerator, "_build_application", side_effect=RuntimeError("bad item")
        ):
            questions = generator.generate(LOREM, "application", 3)
        assert questions == [FALLBACK_QUESTIONS[QuestionType.APPLICATION]] * 3

    @pytest.mark.parametrize(
        "qtype", ["theoretical", "application", "numerical", "mcq", "truefalse"]
    )
    @pytest.mark.parametrize("text", ["", "short", LOREM])
    def test_exact_count_via_cyclic_reuse(
        self, generator: QuestionGenerator, qtype: str, text: str
    ) -> None:
        assert len(generator.generate(text, qtype, 7)) == 7

    @pytest.mark.parametrize("qtype", [t.value for t in QuestionType])
    def test_records_are_well_formed(
        self, generator: QuestionGenerator, sample_text: str, qtype: str
    ) -> None:
        for q in generator.generate(sample_text, qtype, 7):
            assert q.question.strip()
            assert q.question.endswith((".", "?", "!"))
            assert q.answer.strip()

    def test_fallbacks_are_well_formed(self) -> None:
        for qtype, q in FALLBACK_QUESTIONS.items():
            assert q.question.endswith((".", "?", "!")), qtype
            assert q.answer


# ── Per type ─────────────────────────────────────────────────────────────────


class TestTheoretical:
    def test_answer_uses_first_three_sentences(self, generator: QuestionGenerator) -> None:
        q = generator.generate(NO_DIGITS, "theoretical", 1)[0]
        assert "underlying principles" in q.question
        assert "Plants absorb light through chlorophyll in their leaves" in q.question
        assert q.answer.startswith(
            "Based on the content: Plants absorb light through chlorophyll in their leaves. "
            "The absorbed energy drives the splitting of water molecules. "
            "Oxygen is released into the atmosphere as a by-product."
        )
        assert "Sugars produced" not in q.answer

    def test_empty_text_uses_fallback(self, generator: QuestionGenerator) -> None:
        questions = generator.generate("", "theoretical", 2)
        assert questions == [FALLBACK_QUESTIONS[QuestionType.THEORETICAL]] * 2


class TestApplication:
    def test_answer_uses_first_two_sentences(self, generator: QuestionGenerator) -> None:
        q = generator.generate(NO_DIGITS, "application", 1)[0]
        assert "real-world" in q.question
        assert "Plants absorb light" in q.answer
        assert "splitting of water molecules" in q.answer
        assert "Oxygen is released" not in q.answer

    def test_cycles_over_chunks(self) -> None:
        generator = QuestionGenerator(chunking=ChunkingConfig(application_chunk_size=7))
        text = "First chunk has these seven words here. Second chunk has these seven words here."
        questions = generator.generate(text, "application", 4)
        assert "First chunk" in questions[0].question
        assert "Second chunk" in questions[1].question
        assert questions[2] == questions[0]
        assert questions[3] == questions[1]


class TestNumerical:
    def test_calculate_framing_with_digits(self, generator: QuestionGenerator, sample_text: str) -> None:
        for q in generator.generate(sample_text, "numerical", 7):
            assert "calculate" in q.question
            assert q.answer == NUMERICAL_SOLUTION

    def test_key_sentence_contains_digit(self, generator: QuestionGenerator) -> None:
        text = "Light is absorbed by leaves. A leaf absorbs 80 percent of visible light."
        q = generator.generate(text, "numerical", 1)[0]
        assert "80 percent" in q.question

    @pytest.mark.parametrize("text", [NO_DIGITS, "", LOREM])
    def test_no_digits_never_calculate(self, generator: QuestionGenerator, text: str) -> None:
        for q in generator.generate(text, "numerical", 7):
            assert q.question.startswith("If numerical data were given")
            assert "calculate" not in q.question.lower()

    def test_solution_has_four_steps(self) -> None:
        assert [f"Step {n}:" in NUMERICAL_SOLUTION for n in range(1, 5)] == [True] * 4


class TestMultipleChoice:
    def test_four_labeled_options(self, generator: QuestionGenerator, sample_text: str) -> None:
        for q in generator.generate(sample_text, "mcq", 7):
            assert q.options is not None
            assert len(q.options) == 4
            assert [o[:3] for o in q.options] == ["A) ", "B) ", "C) ", "D) "]
            assert q.answer in OPTION_LABELS
            assert q.explanation

    def test_correct_option_is_key_statement(self, generator: QuestionGenerator) -> None:
        q = generator.generate(NO_DIGITS, "mcq", 1)[0]
        assert q.answer == "A"
        assert q.options[0] == "A) Plants absorb light through chlorophyll in their leaves"
        assert q.options[1:] == [f"{label}) {text}" for label, text in zip("BCD", MCQ_DISTRACTORS)]

    def test_key_statement_size_window(self, generator: QuestionGenerator) -> None:
        text = "Too short. " + "x" * 120 + ". This sentence fits inside the size window."
        q = generator.generate(text, "mcq", 1)[0]
        assert q.options[0] == "A) This sentence fits inside the size window"

    def test_long_key_truncated(self, generator: QuestionGenerator) -> None:
        q = generator.generate("y" * 150, "mcq", 1)[0]
        assert q.options[0] == "A) " + "y" * 80 + "..."

    def test_shuffle_keeps_answer_on_key_statement(self) -> None:
        generator = QuestionGenerator(
            settings=QuestionConfig(shuffle_options=True), rng=random.Random(7)
        )
        answers = set()
        for q in generator.generate(NO_DIGITS, "mcq", 20):
            correct = q.options[OPTION_LABELS.index(q.answer)]
            assert "Plants absorb light" in correct
            assert q.explanation.startswith(f"Option {q.answer} ")
            answers.add(q.answer)
        assert len(answers) > 1

    def test_empty_text_uses_default(self, generator: QuestionGenerator) -> None:
        questions = generator.generate("", "mcq", 7)
        assert questions == [FALLBACK_QUESTIONS[QuestionType.MCQ]] * 7


class TestFillBlanks:
    def test_limited_by_eligible_sentences(self, generator: QuestionGenerator) -> None:
        questions = generator.generate(NO_DIGITS, "fillblanks", 7)
        assert len(questions) == 4

    def test_caps_at_count(self, generator: QuestionGenerator, sample_text: str) -> None:
        assert len(generator.generate(sample_text, "fillblanks", 7)) == 7

    def test_empty_text_returns_nothing(self, generator: QuestionGenerator) -> None:
        assert generator.generate("", "fillblanks", 7) == []

    def test_skips_sentences_with_few_words(self, generator: QuestionGenerator) -> None:
        text = "Photosynthesis-related biochemistry. Chlorophyll absorbs red and blue light strongly."
        questions = generator.generate(text, "fillblanks", 7)
        assert len(questions) == 1

    def test_blanks_one_word_in_expected_range(self, sample_text: str) -> None:
        for seed in range(20):
            generator = QuestionGenerator(rng=random.Random(seed))
            for q in generator.generate(sample_text, "fillblanks", 7):
                body = q.question.removeprefix("Fill in the blank: ").rstrip(".")
                words = body.split()
                assert words.count(BLANK_TOKEN) == 1
                index = words.index(BLANK_TOKEN)
                assert len(words) // 3 <= index <= len(words) // 3 + 2

    def test_answer_is_blanked_word(self) -> None:
        sentence = "Chlorophyll absorbs red and blue light strongly"
        generator = QuestionGenerator(rng=random.Random(0))
        q = generator.generate(sentence + ".", "fillblanks", 1)[0]
        body = q.question.removeprefix("Fill in the blank: ").rstrip(".")
        restored = body.replace(BLANK_TOKEN, q.answer)
        assert restored == sentence

    def test_answer_strips_punctuation(self) -> None:
        rng = random.Random(0)
        rng.randrange = lambda n: 0  # type: ignore[method-assign]
        generator = QuestionGenerator(rng=rng)
        q = generator.generate("One two three, four five six seven eight.", "fillblanks", 1)[0]
        assert q.answer == "three"
        assert q.question == f"Fill in the blank: One two {BLANK_TOKEN}, four five six seven eight."


class TestTrueFalse:
    def test_answers_and_explanations(self, generator: QuestionGenerator, sample_text: str) -> None:
        for q in generator.generate(sample_text, "truefalse", 7):
            assert q.answer in ("True", "False")
            assert q.explanation
            assert q.question.startswith("True or False: ")

    def test_true_branch_keeps_sentence(self) -> None:
        generator = QuestionGenerator(rng=FixedRandom(0.0))
        q = generator.generate(NO_DIGITS, "truefalse", 1)[0]
        assert q.answer == "True"
        assert q.question == "True or False: Plants absorb light through chlorophyll in their leaves."

    def test_false_branch_flips_polarity(self) -> None:
        generator = QuestionGenerator(rng=FixedRandom(0.99))
        questions = generator.generate(NO_DIGITS, "truefalse", 4)
        assert all(q.answer == "False" for q in questions)
        assert questions[2].question == (
            "True or False: Oxygen is not released into the atmosphere as a by-product."
        )
        assert "Oxygen is released into the atmosphere" in questions[2].explanation

    def test_false_branch_prefix_when_no_pattern(self) -> None:
        generator = QuestionGenerator(rng=FixedRandom(0.99))
        q = generator.generate(NO_DIGITS, "truefalse", 1)[0]
        assert q.question == (
            "True or False: It is not true that plants absorb light through chlorophyll in their leaves."
        )

    def test_bias_threshold(self) -> None:
        settings = QuestionConfig(true_bias=0.7)
        below = QuestionGenerator(settings=settings, rng=FixedRandom(0.69))
        above = QuestionGenerator(settings=settings, rng=FixedRandom(0.7))
        assert below.generate(NO_DIGITS, "truefalse", 1)[0].answer == "True"
        assert above.generate(NO_DIGITS, "truefalse", 1)[0].answer == "False"

    def test_cycles_sentences(self) -> None:
        generator = QuestionGenerator(rng=FixedRandom(0.0))
        questions = generator.generate(NO_DIGITS, "truefalse", 6)
        assert questions[4] == questions[0]
        assert questions[5] == questions[1]

    def test_mostly_true_with_default_bias(self, sample_text: str) -> None:
        generator = QuestionGenerator(rng=random.Random(99))
        answers = [q.answer for q in generator.generate(sample_text, "truefalse", 400)]
        assert 0.6 < answers.count("True") / len(answers) < 0.8

    def test_no_sentences_uses_fallback(self, generator: QuestionGenerator) -> None:
        questions = generator.generate("", "truefalse", 7)
        assert questions == [FALLBACK_QUESTIONS[QuestionType.TRUE_FALSE]] * 7


class TestNegateStatement:
    @pytest.mark.parametrize(
        ("sentence", "expected"),
        [
            ("The sky is blue", "The sky is not blue"),
            ("The sky is not green", "The sky is green"),
            ("Leaves are green", "Leaves are not green"),
            ("The rate increases with light", "The rate decreases with light"),
            ("The rate decreases with shade", "The rate increases with shade"),
            ("Yields stay high in summer", "Yields stay low in summer"),
            ("Plants can store sugar", "Plants cannot store sugar"),
        ],
    )
    def test_substitutions(self, sentence: str, expected: str) -> None:
        assert negate_statement(sentence) == expected

    @pytest.mark.parametrize(
        ("sentence", "expected"),
        [
            ("Is light required for growth", "Is not light required for growth"),
            ("Always water the plant at dawn", "Never water the plant at dawn"),
            ("More light means more sugar", "Less light means more sugar"),
        ],
    )
    def test_keeps_capitalized_first_word(self, sentence: str, expected: str) -> None:
        assert negate_statement(sentence) == expected

    def test_only_first_match_applied(self) -> None:
        assert negate_statement("Water is split and oxygen is released") == (
            "Water is not split and oxygen is released"
        )

    def test_word_boundaries(self) -> None:
        assert negate_statement("This happens daily") == NEGATION_PREFIX + "this happens daily"

    def test_prefix_fallback(self) -> None:
        assert negate_statement("Chlorophyll absorbs light") == (
            "It is not true that chlorophyll absorbs light"
        )


def test_digit_detection_regex() -> None:
    assert re.search(r"\d", NO_DIGITS) is None
