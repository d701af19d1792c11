"""
공유 지도용 이미지 최적화 유틸리티
"""

import base64
import binascii
import io

from PIL import Image

PNG_DATA_URL_PREFIX = "data:image/png;base64,"

_MIME_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}


def format_file_size(num_bytes: int) -> str:
    """바이트 수를 사람이 읽기 쉬운 문자열로 변환 (0 -> "0 Bytes")"""
    if num_bytes <= 0:
        return "0 Bytes"

    k = 1024
    sizes = ["Bytes", "KB", "MB", "GB"]
    # 정수 비교로 단위 결정
    i = 0
    while i < len(sizes) - 1 and num_bytes >= k ** (i + 1):
        i += 1
    value = f"{num_bytes / (k ** i):.2f}".rstrip("0").rstrip(".")
    # 1.50 -> 1.5, 1.00 -> 1
    return f"{value} {sizes[i]}"


def encode_data_url(data: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """data URL -> (mime type, 바이트)"""
    if not data_url.startswith("data:") or ";base64," not in data_url:
        raise ValueError("Not a base64 data URL")

    header, payload = data_url.split(",", 1)
    mime_type = header[len("data:"):].split(";", 1)[0]
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def estimate_data_url_size(data_url: str) -> int:
    """base64 길이로부터 대략적인 바이트 수 계산"""
    payload = data_url.split(",", 1)[1] if "," in data_url else ""
    return round(len(payload) * 3 / 4)


def get_image_size(data_url: str) -> dict:
    """data URL 이미지의 크기 정보 (width, height, size)"""
    _, data = decode_data_url(data_url)
    with Image.open(io.BytesIO(data)) as img:
        width, height = img.size
    return {"width": width, "height": height, "size": estimate_data_url_size(data_url)}


def compress_image(
    data: bytes,
    max_width: int = 1200,
    max_height: int = 900,
    quality: int = 90,
    image_format: str = "png",
) -> bytes:
    """
    비율을 유지하며 이미지를 축소하고 다시 인코딩

    Args:
        data: 원본 이미지 바이트
        max_width: 최대 너비
        max_height: 최대 높이
        quality: JPEG/WEBP 품질 (1~100)
        image_format: png | jpeg | webp
    """
    if image_format not in _MIME_TYPES:
        raise ValueError(f"Unsupported image format: {image_format}")

    with Image.open(io.BytesIO(data)) as img:
        img.load()
        width, height = img.size

        if width > max_width:
            height = height * max_width / width
            width = max_width
        if height > max_height:
            width = width * max_height / height
            height = max_height

        new_size = (max(1, int(round(width))), max(1, int(round(height))))
        resized = img.resize(new_size, Image.Resampling.LANCZOS) if new_size != img.size else img.copy()

    if image_format == "jpeg" and resized.mode in ("RGBA", "LA", "P"):
        resized = resized.convert("RGB")

    output = io.BytesIO()
    if image_format == "png":
        resized.save(output, format="PNG", optimize=True)
    else:
        resized.save(output, format=image_format.upper(), quality=quality)
    return output.getvalue()
