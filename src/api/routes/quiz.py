"""AI quiz generation routes.

These endpoints are independent of the classroom routes and do not require
authentication.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from core.dependencies import LLMManagerDep
from core.exceptions import (
    ConfigurationError,
    LLMError,
    RateLimitError,
    ValidationError,
)
from generators.QuizGenerator import QuizGenerator
from schemas.quiz import (
    GenerateQuizRequest,
    GenerateQuizResponse,
    ModelInfo,
    ModelListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Quiz"])


def get_quiz_generator(llm_manager: LLMManagerDep) -> QuizGenerator:
    """Get a QuizGenerator bound to the configured quiz provider."""
    return QuizGenerator(llm_manager)


@router.post(
    "/generate-quiz",
    response_model=GenerateQuizResponse,
    response_model_exclude_none=True,
    summary="根据上传资料生成测验",
)
async def generate_quiz(
    req: GenerateQuizRequest,
    generator: QuizGenerator = Depends(get_quiz_generator),
) -> GenerateQuizResponse:
    """Generate a quiz from uploaded study files.

    Args:
        req: Files and quiz configuration.
        generator: Injected QuizGenerator instance.

    Returns:
        The generated quiz.

    Raises:
        HTTPException: 400 if no text could be extracted, 429 if the provider
            is rate limiting, 500 for any other failure.
    """
    try:
        quiz = await generator.generate(req.files, req.config)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except RateLimitError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
        )
    except LLMError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate quiz.",
        )
    return GenerateQuizResponse(quiz=quiz)


@router.get("/list-models", response_model=ModelListResponse, summary="列出可用模型")
def list_models(llm_manager: LLMManagerDep) -> ModelListResponse:
    """List the models exposed by the configured quiz provider.

    ``generateContentModels`` keeps only the models that can answer a chat
    completion, which is what the quiz generator needs.
    """
    try:
        models = llm_manager.list_models()
    except ConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e),
        )
    except Exception as e:
        logger.error("Error listing models: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list models",
        )
    return ModelListResponse(
        provider=llm_manager.provider,
        all_models=[m["name"] for m in models],
        generate_content_models=[
            ModelInfo(name=m["name"], display_name=m["display_name"])
            for m in models
            if m["chat"]
        ],
    )
