from typing import Literal

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Request
from fastapi import Response

from gitgraph.api.schemas.preview import MessageRequest
from gitgraph.api.schemas.preview import PreviewResponse
from gitgraph.rendering.validation import ValidationResult
from gitgraph.rendering.validation import validate_message
from gitgraph.services.preview_service import InvalidMessageError
from gitgraph.services.preview_service import build_graphic
from gitgraph.services.preview_service import build_preview
from gitgraph.settings import Settings


router = APIRouter()


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""

    return request.app.state.settings


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.post("/validate")
def validate(
    payload: MessageRequest, settings: Settings = Depends(get_settings)
) -> ValidationResult:
    """Report whether a message can be rendered, and why not if it can't."""

    return validate_message(
        payload.message.strip(),
        min_length=settings.message_min_length,
        max_length=settings.message_max_length,
    )


@router.post("/preview")
def preview(
    payload: MessageRequest, settings: Settings = Depends(get_settings)
) -> PreviewResponse:
    """Return the rendered grid and derived schedule for a message."""

    try:
        return PreviewResponse.model_validate(build_preview(payload.message, settings))
    except InvalidMessageError as exc:
        raise HTTPException(status_code=400, detail=exc.result.detail) from exc


@router.get("/graphic.svg")
def graphic(
    message: str = Query(max_length=200),
    theme: Literal["light", "dark"] | None = None,
    animation: Literal["wave", "spiral", "fade", "random"] | None = None,
    seed: int | None = None,
    settings: Settings = Depends(get_settings),
) -> Response:
    """Serve the animated contribution graphic for a message."""

    try:
        svg = build_graphic(
            message,
            settings,
            theme=theme,
            animation_type=animation,
            seed=seed,
        )
    except InvalidMessageError as exc:
        raise HTTPException(status_code=400, detail=exc.result.detail) from exc

    return Response(content=svg, media_type="image/svg+xml")
