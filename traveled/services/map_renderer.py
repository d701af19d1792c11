"""
여행 지도 렌더링

도도부현 타일 지도를 MapScene 으로 구성하고, 교체 가능한 렌더러로 PNG 를 생성합니다.

- DirectCaptureRenderer: 장면을 그대로 그림 (CSS 색상 함수는 해석하지 못함)
- CloneAndRewriteRenderer: 장면을 복제해 모든 색상을 hex 로 변환한 뒤 그림
- SvgToCanvasRenderer: SVG 로 직렬화 후 CairoSVG 로 래스터화하여 흰 캔버스에 합성
"""

import copy
import html
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from PIL import Image, ImageColor, ImageDraw, ImageFont

from ..data.japan import PREFECTURES
from ..data.ratings import RATING_LABELS, THEMES
from ..exceptions import ExportError, ExportErrorType
from ..utils.color import is_color_function, resolve_color
from .stats_service import highest_rating_by_region

logger = logging.getLogger(__name__)

CELL_SIZE = 48
CELL_GAP = 4
MARGIN = 24
TITLE_HEIGHT = 40
LEGEND_ROW_HEIGHT = 22
MAX_CANVAS_SIDE = 16384


@dataclass
class MapTile:
    region_id: str
    label: str
    x: int
    y: int
    width: int
    height: int
    fill: str
    stroke: str
    text_color: str


@dataclass
class LegendItem:
    label: str
    color: str


@dataclass
class MapScene:
    """렌더링 가능한 지도 장면"""

    width: int
    height: int
    background: str
    title: str
    title_color: str
    tiles: list[MapTile] = field(default_factory=list)
    legend: list[LegendItem] = field(default_factory=list)


def build_map_scene(visits, theme: str = "classic", title: str = "My Travel Map") -> MapScene:
    """방문 기록으로부터 지도 장면 생성 (지역별 최고 방문 유형으로 채색)"""
    if theme not in THEMES:
        raise ValueError(f"Unknown theme: {theme}")
    palette = THEMES[theme]
    highest = highest_rating_by_region(visits)

    cols = max(p["grid"][0] for p in PREFECTURES) + 1
    rows = max(p["grid"][1] for p in PREFECTURES) + 1
    step = CELL_SIZE + CELL_GAP

    tiles = []
    for prefecture in PREFECTURES:
        col, row = prefecture["grid"]
        rating = highest.get(prefecture["id"], 0)
        tiles.append(
            MapTile(
                region_id=prefecture["id"],
                label=prefecture["name"][:3],
                x=MARGIN + col * step,
                y=MARGIN + TITLE_HEIGHT + row * step,
                width=CELL_SIZE,
                height=CELL_SIZE,
                fill=palette["ratings"][rating],
                stroke=palette["stroke"],
                text_color=palette["text"],
            )
        )

    legend = [
        LegendItem(label=label, color=palette["ratings"][rating])
        for rating, label in RATING_LABELS.items()
    ]

    return MapScene(
        width=MARGIN * 2 + cols * step,
        height=MARGIN * 2 + TITLE_HEIGHT + rows * step + LEGEND_ROW_HEIGHT * len(legend),
        background=palette["background"],
        title=title,
        title_color=palette["text"],
        tiles=tiles,
        legend=legend,
    )


class MapRenderer(ABC):
    """지도 장면 -> PNG 바이트"""

    name = "base"

    @abstractmethod
    def render(self, scene: MapScene, scale: float = 1.0) -> bytes:
        pass


def _new_canvas(width: int, height: int, background) -> Image.Image:
    if width <= 0 or height <= 0 or width > MAX_CANVAS_SIDE or height > MAX_CANVAS_SIDE:
        raise ExportError(
            ExportErrorType.CANVAS_CONTEXT_FAILED,
            f"Invalid canvas size: {width}x{height}",
        )
    return Image.new("RGBA", (width, height), background)


def _safe_text(text: str) -> str:
    # 기본 비트맵 폰트는 latin-1 범위만 그릴 수 있음
    return text.encode("latin-1", "replace").decode("latin-1")


def _to_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


class DirectCaptureRenderer(MapRenderer):
    """장면의 색상 값을 그대로 사용해 Pillow 로 그림"""

    name = "direct"

    def _color(self, value: str):
        if is_color_function(value):
            raise ExportError(
                ExportErrorType.CAPTURE_FAILED,
                f"Unsupported CSS color function: {value}",
            )
        try:
            return ImageColor.getrgb(value)
        except ValueError as e:
            raise ExportError(
                ExportErrorType.CAPTURE_FAILED,
                f"Unsupported color value: {value}",
                e,
            ) from e

    def render(self, scene: MapScene, scale: float = 1.0) -> bytes:
        def s(v):
            return int(round(v * scale))

        canvas = _new_canvas(s(scene.width), s(scene.height), self._color(scene.background))
        draw = ImageDraw.Draw(canvas)
        font = ImageFont.load_default()

        draw.text((s(MARGIN), s(MARGIN)), _safe_text(scene.title), fill=self._color(scene.title_color), font=font)

        for tile in scene.tiles:
            draw.rectangle(
                [s(tile.x), s(tile.y), s(tile.x + tile.width), s(tile.y + tile.height)],
                fill=self._color(tile.fill),
                outline=self._color(tile.stroke),
                width=max(1, s(1)),
            )
            draw.text(
                (s(tile.x + 4), s(tile.y + tile.height / 2 - 6)),
                _safe_text(tile.label),
                fill=self._color(tile.text_color),
                font=font,
            )

        legend_top = scene.height - MARGIN - LEGEND_ROW_HEIGHT * len(scene.legend)
        for index, item in enumerate(scene.legend):
            top = legend_top + index * LEGEND_ROW_HEIGHT
            draw.rectangle(
                [s(MARGIN), s(top), s(MARGIN + 14), s(top + 14)],
                fill=self._color(item.color),
                outline=self._color(scene.title_color),
            )
            draw.text((s(MARGIN + 22), s(top)), _safe_text(item.label), fill=self._color(scene.title_color), font=font)

        return _to_png(canvas)


def rewrite_scene_colors(scene: MapScene) -> MapScene:
    """장면을 깊은 복사하여 모든 색상을 hex 리터럴로 변환 (원본은 변경하지 않음)"""
    clone = copy.deepcopy(scene)
    try:
        clone.background = resolve_color(clone.background)
        clone.title_color = resolve_color(clone.title_color)
        for tile in clone.tiles:
            tile.fill = resolve_color(tile.fill)
            tile.stroke = resolve_color(tile.stroke)
            tile.text_color = resolve_color(tile.text_color)
        for item in clone.legend:
            item.color = resolve_color(item.color)
    except ValueError as e:
        raise ExportError(ExportErrorType.CAPTURE_FAILED, str(e), e) from e
    return clone


class CloneAndRewriteRenderer(MapRenderer):
    name = "clone"

    def __init__(self):
        self._direct = DirectCaptureRenderer()

    def render(self, scene: MapScene, scale: float = 1.0) -> bytes:
        return self._direct.render(rewrite_scene_colors(scene), scale)


def scene_to_svg(scene: MapScene) -> str:
    """장면을 SVG 문서로 직렬화 (색상은 hex 로 변환된 속성 값 사용)"""
    try:
        resolved = rewrite_scene_colors(scene)
    except ExportError as e:
        raise ExportError(ExportErrorType.SVG_SERIALIZATION_FAILED, e.message, e) from e

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{resolved.width}" '
        f'height="{resolved.height}" viewBox="0 0 {resolved.width} {resolved.height}">',
        f'<rect x="0" y="0" width="{resolved.width}" height="{resolved.height}" '
        f'fill="{resolved.background}"/>',
        f'<text x="{MARGIN}" y="{MARGIN + 16}" font-family="sans-serif" font-size="16" '
        f'fill="{resolved.title_color}">{html.escape(resolved.title)}</text>',
    ]

    for tile in resolved.tiles:
        parts.append(
            f'<g id="{html.escape(tile.region_id)}">'
            f'<rect x="{tile.x}" y="{tile.y}" width="{tile.width}" height="{tile.height}" '
            f'fill="{tile.fill}" stroke="{tile.stroke}" stroke-width="1"/>'
            f'<text x="{tile.x + tile.width / 2}" y="{tile.y + tile.height / 2 + 4}" '
            f'text-anchor="middle" font-family="sans-serif" font-size="11" '
            f'fill="{tile.text_color}">{html.escape(tile.label)}</text></g>'
        )

    legend_top = resolved.height - MARGIN - LEGEND_ROW_HEIGHT * len(resolved.legend)
    for index, item in enumerate(resolved.legend):
        top = legend_top + index * LEGEND_ROW_HEIGHT
        parts.append(
            f'<rect x="{MARGIN}" y="{top}" width="14" height="14" fill="{item.color}" '
            f'stroke="{resolved.title_color}"/>'
            f'<text x="{MARGIN + 22}" y="{top + 12}" font-family="sans-serif" font-size="12" '
            f'fill="{resolved.title_color}">{html.escape(item.label)}</text>'
        )

    parts.append("</svg>")
    return "".join(parts)


class SvgToCanvasRenderer(MapRenderer):
    """SVG 직렬화 -> CairoSVG 래스터화 -> 흰 배경 캔버스 합성"""

    name = "svg"

    def render(self, scene: MapScene, scale: float = 2.0) -> bytes:
        svg = scene_to_svg(scene)

        try:
            import cairosvg
        except (ImportError, OSError) as e:
            raise ExportError(
                ExportErrorType.RENDERER_UNAVAILABLE,
                "SVG rasterizer is not available",
                e,
            ) from e

        width = int(round(scene.width * scale))
        height = int(round(scene.height * scale))
        canvas = _new_canvas(width, height, (255, 255, 255, 255))

        try:
            png = cairosvg.svg2png(
                bytestring=svg.encode("utf-8"),
                output_width=width,
                output_height=height,
            )
            image = Image.open(io.BytesIO(png)).convert("RGBA")
        except Exception as e:
            logger.error(f"SVG 래스터화 실패: {e}")
            raise ExportError(ExportErrorType.IMAGE_LOAD_FAILED, "Failed to load SVG image", e) from e

        canvas.alpha_composite(image)
        return _to_png(canvas)


RENDERERS = {
    DirectCaptureRenderer.name: DirectCaptureRenderer,
    CloneAndRewriteRenderer.name: CloneAndRewriteRenderer,
    SvgToCanvasRenderer.name: SvgToCanvasRenderer,
}


def get_renderer(name: str) -> MapRenderer:
    renderer_cls = RENDERERS.get(name)
    if renderer_cls is None:
        raise ExportError(ExportErrorType.RENDERER_UNAVAILABLE, f"Unknown renderer: {name}")
    return renderer_cls()
