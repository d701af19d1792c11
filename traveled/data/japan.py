# 일본 47개 도도부현 기준 데이터
# grid: 타일 지도 상의 (열, 행) 위치
JAPAN_COUNTRY = {"id": "japan", "name": "Japan", "code": "JP"}

MACRO_REGIONS = [
    "hokkaido",
    "tohoku",
    "kanto",
    "chubu",
    "kansai",
    "chugoku",
    "shikoku",
    "kyushu",
]

MACRO_REGION_NAMES = {
    "hokkaido": "Hokkaido",
    "tohoku": "Tohoku",
    "kanto": "Kanto",
    "chubu": "Chubu",
    "kansai": "Kansai",
    "chugoku": "Chugoku",
    "shikoku": "Shikoku",
    "kyushu": "Kyushu & Okinawa",
}

PREFECTURES = [
    # Hokkaido
    {"id": "hokkaido", "name": "Hokkaido", "name_local": "北海道", "code": "01", "macro_region": "hokkaido", "grid": (12, 0)},

    # Tohoku
    {"id": "aomori", "name": "Aomori", "name_local": "青森県", "code": "02", "macro_region": "tohoku", "grid": (12, 2)},
    {"id": "iwate", "name": "Iwate", "name_local": "岩手県", "code": "03", "macro_region": "tohoku", "grid": (12, 3)},
    {"id": "miyagi", "name": "Miyagi", "name_local": "宮城県", "code": "04", "macro_region": "tohoku", "grid": (12, 4)},
    {"id": "akita", "name": "Akita", "name_local": "秋田県", "code": "05", "macro_region": "tohoku", "grid": (11, 3)},
    {"id": "yamagata", "name": "Yamagata", "name_local": "山形県", "code": "06", "macro_region": "tohoku", "grid": (11, 4)},
    {"id": "fukushima", "name": "Fukushima", "name_local": "福島県", "code": "07", "macro_region": "tohoku", "grid": (12, 5)},

    # Kanto
    {"id": "ibaraki", "name": "Ibaraki", "name_local": "茨城県", "code": "08", "macro_region": "kanto", "grid": (12, 7)},
    {"id": "tochigi", "name": "Tochigi", "name_local": "栃木県", "code": "09", "macro_region": "kanto", "grid": (12, 6)},
    {"id": "gunma", "name": "Gunma", "name_local": "群馬県", "code": "10", "macro_region": "kanto", "grid": (11, 6)},
    {"id": "saitama", "name": "Saitama", "name_local": "埼玉県", "code": "11", "macro_region": "kanto", "grid": (11, 7)},
    {"id": "chiba", "name": "Chiba", "name_local": "千葉県", "code": "12", "macro_region": "kanto", "grid": (12, 8)},
    {"id": "tokyo", "name": "Tokyo", "name_local": "東京都", "code": "13", "macro_region": "kanto", "grid": (11, 8)},
    {"id": "kanagawa", "name": "Kanagawa", "name_local": "神奈川県", "code": "14", "macro_region": "kanto", "grid": (11, 9)},

    # Chubu
    {"id": "niigata", "name": "Niigata", "name_local": "新潟県", "code": "15", "macro_region": "chubu", "grid": (11, 5)},
    {"id": "toyama", "name": "Toyama", "name_local": "富山県", "code": "16", "macro_region": "chubu", "grid": (10, 5)},
    {"id": "ishikawa", "name": "Ishikawa", "name_local": "石川県", "code": "17", "macro_region": "chubu", "grid": (9, 5)},
    {"id": "fukui", "name": "Fukui", "name_local": "福井県", "code": "18", "macro_region": "chubu", "grid": (8, 6)},
    {"id": "yamanashi", "name": "Yamanashi", "name_local": "山梨県", "code": "19", "macro_region": "chubu", "grid": (10, 7)},
    {"id": "nagano", "name": "Nagano", "name_local": "長野県", "code": "20", "macro_region": "chubu", "grid": (10, 6)},
    {"id": "gifu", "name": "Gifu", "name_local": "岐阜県", "code": "21", "macro_region": "chubu", "grid": (9, 6)},
    {"id": "shizuoka", "name": "Shizuoka", "name_local": "静岡県", "code": "22", "macro_region": "chubu", "grid": (10, 8)},
    {"id": "aichi", "name": "Aichi", "name_local": "愛知県", "code": "23", "macro_region": "chubu", "grid": (9, 7)},

    # Kansai
    {"id": "mie", "name": "Mie", "name_local": "三重県", "code": "24", "macro_region": "kansai", "grid": (9, 8)},
    {"id": "shiga", "name": "Shiga", "name_local": "滋賀県", "code": "25", "macro_region": "kansai", "grid": (8, 7)},
    {"id": "kyoto", "name": "Kyoto", "name_local": "京都府", "code": "26", "macro_region": "kansai", "grid": (7, 7)},
    {"id": "osaka", "name": "Osaka", "name_local": "大阪府", "code": "27", "macro_region": "kansai", "grid": (7, 8)},
    {"id": "hyogo", "name": "Hyogo", "name_local": "兵庫県", "code": "28", "macro_region": "kansai", "grid": (6, 8)},
    {"id": "nara", "name": "Nara", "name_local": "奈良県", "code": "29", "macro_region": "kansai", "grid": (8, 8)},
    {"id": "wakayama", "name": "Wakayama", "name_local": "和歌山県", "code": "30", "macro_region": "kansai", "grid": (7, 9)},

    # Chugoku
    {"id": "tottori", "name": "Tottori", "name_local": "鳥取県", "code": "31", "macro_region": "chugoku", "grid": (5, 7)},
    {"id": "shimane", "name": "Shimane", "name_local": "島根県", "code": "32", "macro_region": "chugoku", "grid": (4, 7)},
    {"id": "okayama", "name": "Okayama", "name_local": "岡山県", "code": "33", "macro_region": "chugoku", "grid": (5, 8)},
    {"id": "hiroshima", "name": "Hiroshima", "name_local": "広島県", "code": "34", "macro_region": "chugoku", "grid": (4, 8)},
    {"id": "yamaguchi", "name": "Yamaguchi", "name_local": "山口県", "code": "35", "macro_region": "chugoku", "grid": (3, 8)},

    # Shikoku
    {"id": "tokushima", "name": "Tokushima", "name_local": "徳島県", "code": "36", "macro_region": "shikoku", "grid": (5, 10)},
    {"id": "kagawa", "name": "Kagawa", "name_local": "香川県", "code": "37", "macro_region": "shikoku", "grid": (5, 9)},
    {"id": "ehime", "name": "Ehime", "name_local": "愛媛県", "code": "38", "macro_region": "shikoku", "grid": (4, 9)},
    {"id": "kochi", "name": "Kochi", "name_local": "高知県", "code": "39", "macro_region": "shikoku", "grid": (4, 10)},

    # Kyushu & Okinawa
    {"id": "fukuoka", "name": "Fukuoka", "name_local": "福岡県", "code": "40", "macro_region": "kyushu", "grid": (1, 9)},
    {"id": "saga", "name": "Saga", "name_local": "佐賀県", "code": "41", "macro_region": "kyushu", "grid": (0, 9)},
    {"id": "nagasaki", "name": "Nagasaki", "name_local": "長崎県", "code": "42", "macro_region": "kyushu", "grid": (0, 10)},
    {"id": "kumamoto", "name": "Kumamoto", "name_local": "熊本県", "code": "43", "macro_region": "kyushu", "grid": (1, 10)},
    {"id": "oita", "name": "Oita", "name_local": "大分県", "code": "44", "macro_region": "kyushu", "grid": (2, 9)},
    {"id": "miyazaki", "name": "Miyazaki", "name_local": "宮崎県", "code": "45", "macro_region": "kyushu", "grid": (2, 10)},
    {"id": "kagoshima", "name": "Kagoshima", "name_local": "鹿児島県", "code": "46", "macro_region": "kyushu", "grid": (1, 11)},
    {"id": "okinawa", "name": "Okinawa", "name_local": "沖縄県", "code": "47", "macro_region": "kyushu", "grid": (0, 13)},
]

_PREFECTURES_BY_ID = {p["id"]: p for p in PREFECTURES}

# 도도부현 -> 광역 지방 매핑
REGION_TO_MACRO_REGION = {p["id"]: p["macro_region"] for p in PREFECTURES}

TOTAL_PREFECTURES = len(PREFECTURES)


def get_all_prefectures():
    """모든 도도부현 반환"""
    return PREFECTURES


def get_prefecture(region_id: str):
    """특정 도도부현 반환 (없으면 None)"""
    return _PREFECTURES_BY_ID.get(region_id)


def search_prefectures(term: str) -> list[dict]:
    """영문명, 일본어명, ID 로 도도부현 검색"""
    term = term.strip()
    if not term:
        return []

    term_lower = term.lower()
    return [
        p for p in PREFECTURES
        if term_lower in p["name"].lower()
        or term in p["name_local"]
        or term_lower in p["id"]
    ]
