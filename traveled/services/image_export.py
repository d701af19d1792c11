"""
지도 이미지 내보내기 파이프라인

직접 캡처를 먼저 시도하고, 실패하면 복제 후 색상 재작성 렌더러로 재시도합니다.
"""

import logging
from dataclasses import dataclass

from ..exceptions import ExportError, ExportErrorType
from ..utils.image_utils import encode_data_url, format_file_size
from .map_renderer import (
    CloneAndRewriteRenderer,
    DirectCaptureRenderer,
    MapRenderer,
    MapScene,
    get_renderer,
)

logger = logging.getLogger(__name__)

FILE_SIZE_WARNING_THRESHOLD = 10 * 1024 * 1024  # 10MB
FILE_SIZE_MAX_THRESHOLD = 50 * 1024 * 1024  # 50MB


@dataclass
class ExportResult:
    success: bool
    png: bytes | None = None
    data_url: str | None = None
    file_size: int = 0
    renderer: str | None = None
    error: ExportError | None = None


class MapExporter:
    """렌더러 체인으로 지도 PNG 생성"""

    def __init__(
        self,
        renderers: list[MapRenderer] | None = None,
        max_size: int = FILE_SIZE_MAX_THRESHOLD,
        warning_size: int = FILE_SIZE_WARNING_THRESHOLD,
    ):
        self.renderers = renderers or [DirectCaptureRenderer(), CloneAndRewriteRenderer()]
        self.max_size = max_size
        self.warning_size = warning_size

    @classmethod
    def with_renderer(cls, name: str) -> "MapExporter":
        return cls(renderers=[get_renderer(name)])

    def _check_size(self, png: bytes) -> None:
        size = len(png)
        if size > self.max_size:
            raise ExportError(
                ExportErrorType.FILE_TOO_LARGE,
                f"Image is too large ({format_file_size(size)}). "
                f"Maximum size is {format_file_size(self.max_size)}.",
            )
        if size > self.warning_size:
            logger.warning(f"대용량 내보내기 이미지: {format_file_size(size)}")

    def export(self, scene: MapScene | None, scale: float = 1.0) -> ExportResult:
        """
        지도 장면을 PNG 로 내보내기

        실패는 예외 대신 ExportResult.error 로 반환합니다.
        """
        if scene is None:
            return ExportResult(
                success=False,
                error=ExportError(ExportErrorType.ELEMENT_NOT_FOUND, "Map element not found"),
            )

        last_error: ExportError | None = None
        for renderer in self.renderers:
            try:
                png = renderer.render(scene, scale)
            except ExportError as e:
                logger.warning(f"렌더러 실패 ({renderer.name}): {e.error_type.value} - {e.message}")
                last_error = e
                continue
            except Exception as e:
                logger.error(f"렌더러 예기치 않은 오류 ({renderer.name}): {e}", exc_info=True)
                last_error = ExportError(ExportErrorType.UNKNOWN_ERROR, str(e), e)
                continue

            try:
                self._check_size(png)
            except ExportError as e:
                return ExportResult(success=False, file_size=len(png), renderer=renderer.name, error=e)

            return ExportResult(
                success=True,
                png=png,
                data_url=encode_data_url(png),
                file_size=len(png),
                renderer=renderer.name,
            )

        return ExportResult(success=False, error=last_error)

    def export_or_raise(self, scene: MapScene | None, scale: float = 1.0) -> ExportResult:
        result = self.export(scene, scale)
        if not result.success:
            raise result.error
        return result
