"""Quiz generation module.

Turns uploaded study files into a quiz with a single LLM call. Text is
pulled from the files, capped, and sent with a fixed prompt that asks for
a JSON object; the reply is reshaped into the uniform question records the
quiz UI renders.
"""

import base64
import binascii
import logging
import re
from typing import Any, Iterable, List

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import ValidationError as PydanticValidationError

from config import QUIZ_MAX_CONTENT_CHARS
from core.exceptions import ConfigurationError, LLMError, RateLimitError, ValidationError
from schemas.quiz import (
    GeneratedQuiz,
    Quiz,
    QuizConfig,
    QuizFile,
    QuizQuestion,
)

logger = logging.getLogger(__name__)

TEXT_FILE_PATTERN = re.compile(r"\.(txt|md|csv|json|xml|html)$", re.IGNORECASE)
TRUNCATION_MARKER = "\n\n[Content truncated...]"
DEFAULT_QUIZ_TITLE = "Generated Quiz"
TRUE_FALSE_OPTIONS = ["True", "False"]

DIFFICULTY_INSTRUCTIONS = {
    "easy": "Create straightforward questions testing basic recall.",
    "medium": "Create questions requiring conceptual understanding.",
    "hard": "Create challenging questions requiring critical analysis.",
}


def _is_text_file(file: QuizFile) -> bool:
    return file.type.startswith("text/") or bool(TEXT_FILE_PATTERN.search(file.name))


def extract_text(files: Iterable[QuizFile]) -> str:
    """Concatenate the readable text of the uploaded files.

    ``textContent`` is used when present. Otherwise base64 ``content`` is
    decoded for text-like files; anything that fails to decode is skipped.
    """
    combined = ""
    for file in files:
        if file.text_content:
            combined += file.text_content + "\n\n"
        elif file.content and _is_text_file(file):
            try:
                decoded = base64.b64decode(file.content).decode("utf-8")
            except (binascii.Error, ValueError):
                logger.debug("Skipping undecodable file: %s", file.name)
                continue
            combined += decoded + "\n\n"
    return combined


def truncate_content(text: str, max_chars: int = QUIZ_MAX_CONTENT_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def is_rate_limit_error(exc: BaseException) -> bool:
    """True when the provider rejected the call for quota or rate limits."""
    if getattr(exc, "status_code", None) == 429:
        return True
    return "429" in str(exc)


def format_questions(generated: GeneratedQuiz) -> List[QuizQuestion]:
    """Give each question a stable id and normalize its options."""
    questions = []
    for index, q in enumerate(generated.questions, start=1):
        if q.type == "short-answer":
            options = None
        else:
            options = q.options or TRUE_FALSE_OPTIONS
        questions.append(
            QuizQuestion(
                id=f"q-{index}",
                type=q.type,
                question=q.question,
                options=options,
                correct_answer=q.correctAnswer,
            )
        )
    return questions


class QuizGenerator:
    """Generate quizzes from study materials."""

    def __init__(self, llm_manager: Any, max_content_chars: int = QUIZ_MAX_CONTENT_CHARS):
        """Initialize QuizGenerator.

        Args:
            llm_manager: Object whose ``get_quiz_llm()`` returns a chat model (or
                any runnable) answering with a JSON object. It is only called
                once there is material to send.
            max_content_chars: Characters of study material sent to the model.
        """
        self.llm_manager = llm_manager
        self.max_content_chars = max_content_chars
        self.output_parser = JsonOutputParser(pydantic_object=GeneratedQuiz)
        self.prompt = ChatPromptTemplate.from_messages(
            [
                (
                    "system",
                    "You are an expert educational quiz generator. Create a high-quality quiz.\n"
                    "CRITICAL: 1. Questions must be self-contained. "
                    "2. Multiple choice must have 4 plausible options. "
                    "3. True/False must have options [\"True\", \"False\"].\n\n"
                    "Return a single JSON object that strictly follows the format "
                    "instructions: {format_instructions}",
                ),
                (
                    "user",
                    "Generate a {difficulty} quiz with {question_count} questions "
                    "using these types: {types}.\n\n"
                    "{difficulty_instructions}\n\n"
                    "STUDY MATERIALS:\n"
                    "{materials}",
                ),
            ]
        )

    async def generate(self, files: List[QuizFile], config: QuizConfig) -> Quiz:
        """Generate a quiz.

        Args:
            files: Uploaded study files.
            config: Question count, question types and difficulty.

        Returns:
            The reshaped Quiz.

        Raises:
            ValidationError: If no text could be extracted from the files.
            RateLimitError: If the provider reports a quota or rate limit.
            LLMError: If the model is not configured or the provider call fails.
                Also raised for a malformed reply.
        """
        combined = extract_text(files)
        if not combined.strip():
            raise ValidationError("Could not extract text from the uploaded files.")

        try:
            llm = self.llm_manager.get_quiz_llm()
        except ConfigurationError as exc:
            logger.error("Quiz model unavailable: %s", exc)
            raise LLMError("Failed to generate quiz.") from exc
        chain = self.prompt | llm | self.output_parser

        materials = truncate_content(combined, self.max_content_chars)
        logger.info(
            "Generating %s quiz: %d questions, %d chars of material",
            config.difficulty,
            config.question_count,
            len(materials),
        )
        try:
            generated = await chain.ainvoke(
                {
                    "difficulty": config.difficulty,
                    "question_count": config.question_count,
                    "types": ", ".join(config.types),
                    "difficulty_instructions": DIFFICULTY_INSTRUCTIONS[config.difficulty],
                    "materials": materials,
                    "format_instructions": self.output_parser.get_format_instructions(),
                }
            )
        except Exception as exc:
            logger.error("Quiz generation call failed: %s", exc, exc_info=True)
            if is_rate_limit_error(exc):
                raise RateLimitError("Rate limit reached. Please wait a moment.") from exc
            raise LLMError("Failed to generate quiz.") from exc

        try:
            quiz_data = GeneratedQuiz.model_validate(generated)
        except PydanticValidationError as exc:
            logger.error("Invalid structure returned from AI: %s", exc)
            raise LLMError("Failed to generate quiz.") from exc

        return Quiz(
            title=quiz_data.title or DEFAULT_QUIZ_TITLE,
            questions=format_questions(quiz_data),
        )
