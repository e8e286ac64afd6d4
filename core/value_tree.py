"""
JSON 값 트리 접근 모듈

API 응답을 json 디코딩한 결과(dict/list/str/int/float/bool/None)를
형태 검사 후 안전하게 읽어내는 함수 모음입니다.
키가 없거나 타입이 다르면 예외 대신 항등원(0.0, 0, None)을 반환합니다.
"""

import math
import numbers
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional


_DECIMAL_RE = re.compile(r"\A[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z")
_FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def to_float(value: Any) -> float:
    """
    다양한 JSON 숫자 표현을 float로 변환합니다.

    Args:
        value: float, int, 숫자 문자열 등 임의의 값

    Returns:
        변환된 값. 숫자가 아니거나 변환할 수 없으면 0.0
    """
    # bool은 int의 하위 타입이므로 먼저 걸러냅니다
    if isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        # float()가 허용하는 "1_000", " 3.5 ", "infinity" 등은 거부합니다
        if not _DECIMAL_RE.match(value):
            return 0.0
    elif not isinstance(value, (numbers.Real, Decimal)):
        return 0.0

    try:
        result = float(value)
    except (OverflowError, ValueError):
        # 매우 큰 JSON 정수 (int too large to convert to float)
        return 0.0

    if not math.isfinite(result):
        return 0.0
    return result


def get_mapping_field(doc: Any, name: str) -> Optional[Dict[str, Any]]:
    """doc[name]이 dict이면 반환하고, 아니면 None을 반환합니다."""
    if not isinstance(doc, dict):
        return None
    value = doc.get(name)
    if isinstance(value, dict):
        return value
    return None


def get_array_field(doc: Any, name: str) -> Optional[List[Any]]:
    """
    dict에서 name 필드를 찾아 배열일 때만 반환합니다.

    Args:
        doc: 임의의 값 (dict가 아니면 None)
        name: 필드 이름

    Returns:
        배열 값 또는 None
    """
    if not isinstance(doc, dict):
        return None
    value = doc.get(name)
    if isinstance(value, list):
        return value
    return None


def get_field(doc: Any, name: str) -> Any:
    """doc이 dict이면 doc[name]을, 아니면 None을 반환합니다."""
    if not isinstance(doc, dict):
        return None
    return doc.get(name)


def sum_field(entries: Any, field_name: str) -> float:
    """
    배열 원소들의 field_name 값을 합산합니다.

    dict가 아닌 원소와 필드가 없는 원소는 건너뜁니다.

    Args:
        entries: 엔트리 배열 (None 허용)
        field_name: 합산할 필드 이름

    Returns:
        합계 (빈 배열/None이면 0.0)
    """
    if not isinstance(entries, list):
        return 0.0

    total = 0.0
    for item in entries:
        if not isinstance(item, dict):
            continue
        if field_name in item:
            total += to_float(item[field_name])
    return total


def sum_nested_field(entries: Any, parent_field: str, child_field: str) -> float:
    """
    배열 원소들의 parent_field.child_field 값을 합산합니다.

    예: savingsPlan 엔트리의 totalPrice.value
    """
    if not isinstance(entries, list):
        return 0.0

    total = 0.0
    for item in entries:
        parent = get_mapping_field(item, parent_field)
        if parent is None:
            continue
        if child_field in parent:
            total += to_float(parent[child_field])
    return total


def sum_filtered_field(
    entries: Any,
    filter_field: str,
    filter_value: str,
    price_field: str
) -> float:
    """
    filter_field 값이 filter_value와 같은 원소만 골라 price_field를 합산합니다.

    Args:
        entries: 엔트리 배열 (None 허용)
        filter_field: 비교할 필드 (예: "type")
        filter_value: 비교할 문자열 값 (예: "gateway")
        price_field: 합산할 필드 (예: "totalPrice")

    Returns:
        필터링된 합계
    """
    if not isinstance(entries, list):
        return 0.0

    total = 0.0
    for item in entries:
        if not isinstance(item, dict):
            continue
        tag = item.get(filter_field)
        if not isinstance(tag, str) or tag != filter_value:
            continue
        if price_field in item:
            total += to_float(item[price_field])
    return total


def count(entries: Any) -> int:
    """배열 길이를 반환합니다. 배열이 아니면 0."""
    if not isinstance(entries, list):
        return 0
    return len(entries)


def to_timestamp(value: Any) -> Optional[datetime]:
    """
    ISO-8601 문자열을 datetime으로 변환합니다 ("Z" 접미사 허용).

    이미 datetime이면 그대로, 변환할 수 없으면 None을 반환합니다.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    # 소수 초는 6자리(마이크로초)로 맞춥니다 (예: .5, 나노초 9자리)
    text = _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
