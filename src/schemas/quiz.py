"""Quiz generation schema definitions.

Request models mirror the payload sent by the quiz builder UI; the
``Generated*`` models describe the JSON the LLM is asked to return.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

QuestionType = Literal["multiple-choice", "true-false", "short-answer"]
Difficulty = Literal["easy", "medium", "hard"]


class QuizFile(BaseModel):
    """An uploaded study file; ``content`` is base64, ``textContent`` is plain text."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    type: str = ""
    content: Optional[str] = None
    text_content: Optional[str] = Field(default=None, alias="textContent")


class QuizConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_count: int = Field(alias="questionCount", ge=1, le=100)
    types: List[QuestionType] = Field(min_length=1)
    difficulty: Difficulty = "medium"


class GenerateQuizRequest(BaseModel):
    files: List[QuizFile]
    config: QuizConfig


# structure of the LLM output
class GeneratedQuestion(BaseModel):
    """A single question as returned by the model."""

    type: str = Field(
        description="One of 'multiple-choice', 'true-false' or 'short-answer'."
    )
    question: str = Field(description="The self-contained question text.")
    options: Optional[List[str]] = Field(
        default=None,
        description=(
            "Exactly 4 options for multiple-choice, [\"True\", \"False\"] for "
            "true-false, omitted for short-answer."
        ),
    )
    correctAnswer: Any = Field(
        default=None,
        description="The correct option text, or the model answer for short-answer.",
    )


class GeneratedQuiz(BaseModel):
    """The full quiz object as returned by the model."""

    title: Optional[str] = Field(default=None, description="A short quiz title.")
    questions: List[GeneratedQuestion] = Field(
        description="The generated questions, in order."
    )


class QuizQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    question: str
    options: Optional[List[str]] = None
    correct_answer: Any = Field(default=None, alias="correctAnswer")


class Quiz(BaseModel):
    title: str
    questions: List[QuizQuestion]


class GenerateQuizResponse(BaseModel):
    quiz: Quiz


class ModelInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    display_name: str = Field(alias="displayName")


class ModelListResponse(BaseModel):
    """All model ids of the provider plus the ones usable for quiz generation."""

    model_config = ConfigDict(populate_by_name=True)

    provider: str
    all_models: List[str] = Field(alias="allModels")
    generate_content_models: List[ModelInfo] = Field(alias="generateContentModels")
