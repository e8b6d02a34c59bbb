import asyncio
import base64
import json

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from core.exceptions import ConfigurationError, LLMError, RateLimitError, ValidationError
from generators.QuizGenerator import (
    QuizGenerator,
    TRUNCATION_MARKER,
    extract_text,
    is_rate_limit_error,
    truncate_content,
)
from schemas.quiz import QuizConfig, QuizFile

QUIZ_REPLY = json.dumps(
    {
        "title": "Cells",
        "questions": [
            {
                "type": "multiple-choice",
                "question": "Which organelle produces ATP?",
                "options": ["Nucleus", "Mitochondrion", "Ribosome", "Golgi body"],
                "correctAnswer": "Mitochondrion",
            },
            {
                "type": "true-false",
                "question": "Plant cells have a cell wall.",
                "correctAnswer": "True",
            },
            {
                "type": "short-answer",
                "question": "Name the process plants use to make glucose.",
                "options": ["ignored"],
                "correctAnswer": "Photosynthesis",
            },
        ],
    }
)


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def make_config(**overrides) -> QuizConfig:
    data = {"questionCount": 3, "types": ["multiple-choice", "true-false"], "difficulty": "easy"}
    data.update(overrides)
    return QuizConfig.model_validate(data)


class TestExtractText:
    def test_text_content_wins_over_content(self):
        files = [QuizFile(name="notes.txt", type="text/plain", content=b64("encoded"), textContent="plain")]
        assert extract_text(files) == "plain\n\n"

    def test_decodes_text_like_files(self):
        files = [
            QuizFile(name="a.MD", type="application/octet-stream", content=b64("# Heading")),
            QuizFile(name="b", type="text/csv", content=b64("x,y")),
        ]
        assert extract_text(files) == "# Heading\n\nx,y\n\n"

    def test_skips_binary_and_undecodable_files(self):
        files = [
            QuizFile(name="slides.pdf", type="application/pdf", content=b64("pdf bytes")),
            QuizFile(name="bad.txt", type="text/plain", content="!!!not base64"),
            QuizFile(name="latin.txt", type="text/plain", content=base64.b64encode(b"\xff\xfe").decode()),
        ]
        assert extract_text(files) == ""


def test_truncate_content():
    assert truncate_content("short", max_chars=10) == "short"
    assert truncate_content("x" * 12, max_chars=10) == "x" * 10 + TRUNCATION_MARKER


def test_is_rate_limit_error():
    class ApiError(Exception):
        status_code = 429

    assert is_rate_limit_error(ApiError("quota"))
    assert is_rate_limit_error(RuntimeError("Error code: 429 - Resource exhausted"))
    assert not is_rate_limit_error(RuntimeError("Error code: 500"))


def test_generate_reshapes_questions(quiz_generator_for):
    generator = quiz_generator_for(FakeListChatModel(responses=[QUIZ_REPLY]))
    files = [QuizFile(name="cells.txt", type="text/plain", textContent="Cells are the unit of life.")]

    quiz = asyncio.run(generator.generate(files, make_config()))

    assert quiz.title == "Cells"
    assert [q.id for q in quiz.questions] == ["q-1", "q-2", "q-3"]
    assert quiz.questions[0].options == ["Nucleus", "Mitochondrion", "Ribosome", "Golgi body"]
    assert quiz.questions[1].options == ["True", "False"]
    assert quiz.questions[2].options is None
    assert quiz.questions[2].correct_answer == "Photosynthesis"


def test_generate_defaults_title(quiz_generator_for):
    reply = json.dumps({"questions": [{"type": "true-false", "question": "Q?", "correctAnswer": "False"}]})
    generator = quiz_generator_for(FakeListChatModel(responses=[reply]))
    files = [QuizFile(name="n.txt", type="text/plain", textContent="text")]

    quiz = asyncio.run(generator.generate(files, make_config()))
    assert quiz.title == "Generated Quiz"


def test_generate_sends_capped_material_and_config(quiz_generator_for):
    seen = {}

    def fake_llm(prompt_value):
        seen["messages"] = prompt_value.to_messages()
        return AIMessage(content=QUIZ_REPLY)

    generator = quiz_generator_for(RunnableLambda(fake_llm), max_content_chars=100)
    files = [QuizFile(name="long.txt", type="text/plain", textContent="a" * 500)]
    asyncio.run(generator.generate(files, make_config(difficulty="hard", questionCount=7)))

    system, user = seen["messages"]
    assert "Multiple choice must have 4 plausible options" in system.content
    assert "Generate a hard quiz with 7 questions using these types: multiple-choice, true-false." in user.content
    assert "Create challenging questions requiring critical analysis." in user.content
    assert "a" * 100 + TRUNCATION_MARKER in user.content
    assert "a" * 101 not in user.content


def test_generate_rejects_empty_material(quiz_generator_for):
    generator = quiz_generator_for(FakeListChatModel(responses=[QUIZ_REPLY]))
    files = [QuizFile(name="image.png", type="image/png", content=b64("png"))]
    with pytest.raises(ValidationError):
        asyncio.run(generator.generate(files, make_config()))


def test_generate_maps_rate_limit(quiz_generator_for):
    def rate_limited(_):
        raise RuntimeError("Error code: 429 - quota exceeded")

    generator = quiz_generator_for(RunnableLambda(rate_limited))
    files = [QuizFile(name="n.txt", type="text/plain", textContent="text")]
    with pytest.raises(RateLimitError):
        asyncio.run(generator.generate(files, make_config()))


def test_generate_rejects_reply_without_questions(quiz_generator_for):
    generator = quiz_generator_for(FakeListChatModel(responses=[json.dumps({"title": "Empty"})]))
    files = [QuizFile(name="n.txt", type="text/plain", textContent="text")]
    with pytest.raises(LLMError) as exc_info:
        asyncio.run(generator.generate(files, make_config()))
    assert not isinstance(exc_info.value, RateLimitError)


class UnconfiguredLLMManager:
    def __init__(self):
        self.calls = 0

    def get_quiz_llm(self):
        self.calls += 1
        raise ConfigurationError("API key not configured")


def test_generate_checks_material_before_building_model():
    manager = UnconfiguredLLMManager()
    generator = QuizGenerator(manager)
    files = [QuizFile(name="image.png", type="image/png", content=b64("png"))]
    with pytest.raises(ValidationError):
        asyncio.run(generator.generate(files, make_config()))
    assert manager.calls == 0


def test_generate_maps_missing_model_configuration():
    generator = QuizGenerator(UnconfiguredLLMManager())
    files = [QuizFile(name="n.txt", type="text/plain", textContent="text")]
    with pytest.raises(LLMError) as exc_info:
        asyncio.run(generator.generate(files, make_config()))
    assert str(exc_info.value) == "Failed to generate quiz."
