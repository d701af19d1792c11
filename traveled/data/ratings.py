# 방문 유형 (0~5) 라벨과 지도 색상
RATING_LABELS = {
    0: "Never been",
    1: "Passed through",
    2: "Brief stop",
    3: "Day visit",
    4: "Multi-day stay",
    5: "Lived there",
}

# classic 테마: 단순 hex 색상
RATING_COLORS = {
    0: "#e5e7eb",  # gray-200
    1: "#fecaca",  # red-200
    2: "#fed7aa",  # orange-200
    3: "#fef08a",  # yellow-200
    4: "#bbf7d0",  # green-200
    5: "#bfdbfe",  # blue-200
}

# modern 테마: 최신 CSS 팔레트와 같은 oklch() 색상
RATING_COLORS_OKLCH = {
    0: "oklch(0.928 0.006 264.531)",
    1: "oklch(0.885 0.062 18.334)",
    2: "oklch(0.901 0.076 70.697)",
    3: "oklch(0.945 0.129 101.54)",
    4: "oklch(0.925 0.084 155.995)",
    5: "oklch(0.882 0.059 254.128)",
}

THEMES = {
    "classic": {
        "ratings": RATING_COLORS,
        "background": "#ffffff",
        "stroke": "#9ca3af",
        "text": "#374151",
    },
    "modern": {
        "ratings": RATING_COLORS_OKLCH,
        "background": "oklch(1 0 0)",
        "stroke": "oklch(0.707 0.022 261.325)",
        "text": "oklch(0.373 0.034 259.733)",
    },
}

MIN_RATING = 0
MAX_RATING = 5
