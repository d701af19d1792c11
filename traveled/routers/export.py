"""
지도 이미지 내보내기 API
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ..config import settings
from ..data.ratings import THEMES
from ..exceptions import ValidationFailedError
from ..services.image_export import MapExporter
from ..services.map_renderer import MapScene, build_map_scene, scene_to_svg
from ..services.visit_service import VisitService
from .visits import get_visit_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def _build_scene(service: VisitService, theme: str | None, title: str | None) -> MapScene:
    theme = theme or settings.export_default_theme
    if theme not in THEMES:
        raise ValidationFailedError(f"Unknown theme: {theme}")
    return build_map_scene(service.get_visits("japan"), theme, title or "My Travel Map")


@router.get("/map.png")
async def export_map_png(
    renderer: Literal["direct", "clone", "svg"] | None = Query(
        None, description="렌더러 지정 (없으면 direct -> clone 순으로 시도)"
    ),
    scale: float | None = Query(None, gt=0, le=4),
    theme: str | None = Query(None, description="classic | modern"),
    title: str | None = Query(None, max_length=100),
    service: VisitService = Depends(get_visit_service),
):
    scene = _build_scene(service, theme, title)
    exporter = MapExporter.with_renderer(renderer) if renderer else MapExporter()
    result = exporter.export_or_raise(scene, scale or settings.export_scale)

    logger.info(f"지도 내보내기 ({service.user_id}): renderer={result.renderer}, size={result.file_size}")
    return Response(
        content=result.png,
        media_type="image/png",
        headers={
            "Content-Disposition": 'attachment; filename="japan-travel-map.png"',
            "X-Export-Renderer": result.renderer,
        },
    )


@router.get("/map.svg")
async def export_map_svg(
    theme: str | None = Query(None, description="classic | modern"),
    title: str | None = Query(None, max_length=100),
    service: VisitService = Depends(get_visit_service),
):
    scene = _build_scene(service, theme, title)
    return Response(content=scene_to_svg(scene), media_type="image/svg+xml")
