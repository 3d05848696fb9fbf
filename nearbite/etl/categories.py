"""Category inference from provider taxonomies and free text."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "restaurant"
CATEGORIES = (
    "korean",
    "japanese",
    "chinese",
    "western",
    "cafe",
    "fast_food",
    "bbq",
    "chicken",
    "noodle",
    "street_food",
    DEFAULT_CATEGORY,
)

# Google place types; generic types such as "restaurant" or "food" are left out on purpose
# so that the keyword matcher gets a chance to find something more specific.
GOOGLE_TYPE_CATEGORIES = {
    "korean_restaurant": "korean",
    "japanese_restaurant": "japanese",
    "sushi_restaurant": "japanese",
    "chinese_restaurant": "chinese",
    "american_restaurant": "western",
    "italian_restaurant": "western",
    "french_restaurant": "western",
    "mediterranean_restaurant": "western",
    "spanish_restaurant": "western",
    "greek_restaurant": "western",
    "pizza_restaurant": "western",
    "steak_house": "western",
    "brunch_restaurant": "western",
    "bar": "western",
    "night_club": "western",
    "cafe": "cafe",
    "coffee_shop": "cafe",
    "bakery": "cafe",
    "dessert_shop": "cafe",
    "tea_house": "cafe",
    "fast_food_restaurant": "fast_food",
    "hamburger_restaurant": "fast_food",
    "sandwich_shop": "fast_food",
    "meal_takeaway": "fast_food",
    "barbecue_restaurant": "bbq",
    "ramen_restaurant": "noodle",
    "food_court": "street_food",
}

# Segments of Kakao's "음식점 > 한식 > 육류,고기" style category paths.
KAKAO_SEGMENT_CATEGORIES = {
    "한식": "korean",
    "한정식": "korean",
    "해장국": "korean",
    "일식": "japanese",
    "초밥,롤": "japanese",
    "돈까스,우동": "japanese",
    "중식": "chinese",
    "중국요리": "chinese",
    "양식": "western",
    "이탈리안": "western",
    "프랑스음식": "western",
    "스테이크,립": "western",
    "피자": "western",
    "술집": "western",
    "카페": "cafe",
    "커피전문점": "cafe",
    "제과,베이커리": "cafe",
    "디저트카페": "cafe",
    "패스트푸드": "fast_food",
    "햄버거": "fast_food",
    "샌드위치": "fast_food",
    "육류,고기": "bbq",
    "삼겹살": "bbq",
    "갈비": "bbq",
    "곱창,막창": "bbq",
    "치킨": "chicken",
    "국수": "noodle",
    "냉면": "noodle",
    "칼국수": "noodle",
    "일본식라면": "noodle",
    "분식": "street_food",
    "떡볶이": "street_food",
    "김밥": "street_food",
}

# Checked in order, most specific first. Hangul and Romanized spellings side by side.
KEYWORD_CATEGORIES: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("chicken", ("치킨", "통닭", "닭강정", "chicken")),
    ("bbq", ("고기", "갈비", "삼겹", "곱창", "bbq", "barbecue", "galbi", "samgyeopsal")),
    ("noodle", ("국수", "냉면", "라멘", "우동", "쌀국수", "noodle", "ramen", "udon", "pho", "naengmyeon", "guksu")),
    ("street_food", ("분식", "떡볶이", "김밥", "순대", "tteokbokki", "gimbap", "kimbap", "street food")),
    ("fast_food", ("버거", "롯데리아", "맥도날드", "서브웨이", "burger", "mcdonald", "kfc", "subway", "fast food")),
    ("cafe", ("카페", "커피", "베이커리", "디저트", "cafe", "café", "coffee", "bakery", "dessert")),
    ("japanese", ("스시", "초밥", "돈까스", "돈카츠", "이자카야", "일식", "sushi", "tonkatsu", "izakaya", "japanese")),
    ("chinese", ("중국", "중화", "짜장", "짬뽕", "마라", "딤섬", "chinese", "dim sum", "jjajang", "jjamppong")),
    ("western", ("파스타", "피자", "스테이크", "브런치", "비스트로", "pasta", "pizza", "steak", "brunch", "bistro", "italian")),
    ("korean", ("한식", "국밥", "찌개", "비빔밥", "백반", "korean", "gukbap", "jjigae", "bibimbap")),
)


def category_from_google_types(types: Optional[Iterable[str]]) -> Optional[str]:
    for type_name in types or []:
        category = GOOGLE_TYPE_CATEGORIES.get(type_name)
        if category:
            return category
    return None


def category_from_kakao_path(category_name: Optional[str]) -> Optional[str]:
    """Map a Kakao category path, trying the most specific segment first."""
    if not category_name:
        return None
    segments = [segment.strip() for segment in category_name.split(">")]
    for segment in reversed(segments):
        category = KAKAO_SEGMENT_CATEGORIES.get(segment)
        if category:
            return category
    return None


def category_from_text(*parts: Optional[str]) -> Optional[str]:
    text = " ".join(part for part in parts if part).casefold()
    if not text:
        return None
    for category, keywords in KEYWORD_CATEGORIES:
        if any(keyword in text for keyword in keywords):
            return category
    return None


def infer_category(taxonomy_match: Optional[str], name: Optional[str], address: Optional[str]) -> str:
    """Resolve the normalized category: taxonomy lookup, then keywords, then the default."""
    if taxonomy_match:
        return taxonomy_match
    from_text = category_from_text(name, address)
    if from_text:
        return from_text
    logger.debug("No category match for name=%s; using default", name)
    return DEFAULT_CATEGORY
