from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from seenai.config.settings import Settings, get_settings
from seenai.errors import InvalidArgument
from seenai.utils import preview_renderer

router = APIRouter(prefix="/api/preview", tags=["Preview"])


@router.get(
    "",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
    summary="Renders text onto a transparent PNG preview card",
)
def render_preview(
    text: str = Query("Hello World"),
    width: int = Query(preview_renderer.DEFAULT_WIDTH),
    height: int = Query(preview_renderer.DEFAULT_HEIGHT),
    font_size: int = Query(preview_renderer.DEFAULT_FONT_SIZE),
    color: str = Query(preview_renderer.DEFAULT_COLOR),
    settings: Settings = Depends(get_settings),
):
    try:
        image = preview_renderer.render_text_image(
            text or "Hello World",
            width=width,
            height=height,
            font_size=font_size,
            color=color,
            font_path=settings.preview_font_path,
        )
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return Response(content=image, media_type="image/png")
