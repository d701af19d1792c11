"""
CSS 색상 값 해석 유틸리티

Pillow 의 ImageColor 는 oklch()/oklab() 같은 최신 CSS 색상 함수와
공백 구분 rgb()/hsl() 문법을 해석하지 못합니다. 내보내기 전에 이런 값을
일반 hex 리터럴로 바꾸기 위해 사용합니다.
"""

import math
import re

from PIL import ImageColor

_FUNCTION_PATTERN = re.compile(r"^\s*([a-z]+)\(\s*(.*?)\s*\)\s*$", re.IGNORECASE)

# Pillow 가 그대로 이해하지 못하는 색상 함수
CSS_COLOR_FUNCTIONS = ("oklch", "oklab", "lab", "lch", "color", "color-mix")


def is_color_function(value: str | None) -> bool:
    """Pillow 가 해석하지 못하는 CSS 색상 함수인지 확인"""
    if not value:
        return False
    lowered = value.strip().lower()
    return any(lowered.startswith(f"{name}(") for name in CSS_COLOR_FUNCTIONS)


def _split_args(body: str) -> tuple[list[str], str | None]:
    alpha = None
    if "/" in body:
        body, alpha = body.split("/", 1)
        alpha = alpha.strip()
    parts = [p for p in re.split(r"[\s,]+", body.strip()) if p]
    return parts, alpha


def _parse_number(token: str, percent_scale: float = 1.0) -> float:
    token = token.strip().lower()
    if token == "none":
        return 0.0
    if token.endswith("%"):
        return float(token[:-1]) / 100.0 * percent_scale
    if token.endswith("deg"):
        return float(token[:-3])
    return float(token)


def _parse_alpha(token: str | None) -> float:
    if token is None:
        return 1.0
    return min(1.0, max(0.0, _parse_number(token)))


def _linear_to_srgb(x: float) -> float:
    if x <= 0.0031308:
        return 12.92 * x
    return 1.055 * (x ** (1 / 2.4)) - 0.055


def oklab_to_rgb(lightness: float, a: float, b: float) -> tuple[int, int, int]:
    """OKLab -> sRGB (0~255, 범위 밖 값은 잘라냄)"""
    l_ = lightness + 0.3963377774 * a + 0.2158037573 * b
    m_ = lightness - 0.1055613458 * a - 0.0638541728 * b
    s_ = lightness - 0.0894841775 * a - 1.2914855480 * b

    l_c, m_c, s_c = l_ ** 3, m_ ** 3, s_ ** 3

    r = 4.0767416621 * l_c - 3.3077115913 * m_c + 0.2309699292 * s_c
    g = -1.2684380046 * l_c + 2.6097574011 * m_c - 0.3413193965 * s_c
    bl = -0.0041960863 * l_c - 0.7034186147 * m_c + 1.7076147010 * s_c

    return tuple(
        int(round(min(1.0, max(0.0, _linear_to_srgb(channel))) * 255))
        for channel in (r, g, bl)
    )


def oklch_to_rgb(lightness: float, chroma: float, hue: float) -> tuple[int, int, int]:
    radians = math.radians(hue)
    return oklab_to_rgb(lightness, chroma * math.cos(radians), chroma * math.sin(radians))


def _to_hex(rgb: tuple[int, int, int], alpha: float = 1.0) -> str:
    hex_value = "#{:02x}{:02x}{:02x}".format(*rgb)
    if alpha < 1.0:
        hex_value += "{:02x}".format(int(round(alpha * 255)))
    return hex_value


def _resolve_function(name: str, body: str) -> str:
    args, alpha_token = _split_args(body)
    alpha = _parse_alpha(alpha_token)

    if name == "oklch":
        if len(args) != 3:
            raise ValueError(f"oklch() expects 3 components, got {len(args)}")
        rgb = oklch_to_rgb(
            _parse_number(args[0]),
            _parse_number(args[1], percent_scale=0.4),
            _parse_number(args[2]),
        )
        return _to_hex(rgb, alpha)

    if name == "oklab":
        if len(args) != 3:
            raise ValueError(f"oklab() expects 3 components, got {len(args)}")
        rgb = oklab_to_rgb(
            _parse_number(args[0]),
            _parse_number(args[1], percent_scale=0.4),
            _parse_number(args[2], percent_scale=0.4),
        )
        return _to_hex(rgb, alpha)

    if name in ("rgb", "rgba"):
        if len(args) < 3:
            raise ValueError(f"{name}() expects 3 components")
        if len(args) == 4 and alpha_token is None:
            alpha = _parse_alpha(args[3])
        rgb = tuple(
            int(round(min(255.0, max(0.0, _parse_number(c, percent_scale=255.0)))))
            for c in args[:3]
        )
        return _to_hex(rgb, alpha)

    if name in ("hsl", "hsla"):
        if len(args) < 3:
            raise ValueError(f"{name}() expects 3 components")
        if len(args) == 4 and alpha_token is None:
            alpha = _parse_alpha(args[3])
        hue = _parse_number(args[0])
        saturation = _parse_number(args[1], percent_scale=100.0)
        light = _parse_number(args[2], percent_scale=100.0)
        rgb = ImageColor.getrgb(f"hsl({hue:g}, {saturation:g}%, {light:g}%)")
        return _to_hex(rgb[:3], alpha)

    raise ValueError(f"Unsupported color function: {name}()")


def resolve_color(value: str) -> str:
    """
    CSS 색상 값을 Pillow 가 해석 가능한 hex 리터럴로 변환

    Args:
        value: hex, 색상 이름, rgb()/hsl()/oklch()/oklab() 문자열

    Returns:
        "#rrggbb" 또는 알파가 있으면 "#rrggbbaa"

    Raises:
        ValueError: 해석할 수 없는 값
    """
    if value is None:
        raise ValueError("Color value is empty")

    stripped = value.strip()
    if stripped.lower() in ("none", "transparent"):
        return "#00000000"

    match = _FUNCTION_PATTERN.match(stripped)
    if match:
        return _resolve_function(match.group(1).lower(), match.group(2))

    rgb = ImageColor.getrgb(stripped)
    if len(rgb) == 4:
        return _to_hex(rgb[:3], rgb[3] / 255)
    return _to_hex(rgb)
