"""
사용량 문서 집계 모듈

current / forecast / history 응답은 모두 같은 형태(UsageDocument)이므로
하나의 집계 함수 세트를 세 종류 문서에 공통으로 사용합니다.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from core import catalog
from core.logger import get_logger
from core.value_tree import (
    count,
    get_array_field,
    get_field,
    get_mapping_field,
    sum_field,
    sum_filtered_field,
    sum_nested_field,
    to_float,
)


@dataclass
class UsageDocument:
    """current / forecast / history 상세 응답 한 건"""
    project_id: str = ""
    id: str = ""  # history 전용 (예: RUN2_202511)
    last_update: Any = None
    hourly_usage: Optional[Dict[str, Any]] = None
    monthly_usage: Optional[Dict[str, Any]] = None
    resources_usage: Optional[List[Any]] = None
    period: Optional[Dict[str, Any]] = None
    usable_credits: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], project_id: str = "") -> "UsageDocument":
        """
        API 응답 dict로부터 UsageDocument를 생성합니다.

        API 응답에는 projectId가 없으므로 호출자가 넘긴 값을 사용합니다.
        형태가 맞지 않는 섹션은 None(= 데이터 없음)으로 둡니다.

        Args:
            data: 디코딩된 JSON 응답
            project_id: 조회한 프로젝트 ID

        Returns:
            UsageDocument
        """
        usage_id = data.get("id")
        return cls(
            project_id=project_id,
            id=usage_id if isinstance(usage_id, str) else "",
            last_update=data.get("lastUpdate"),
            hourly_usage=get_mapping_field(data, "hourlyUsage"),
            monthly_usage=get_mapping_field(data, "monthlyUsage"),
            resources_usage=get_array_field(data, "resourcesUsage"),
            period=get_mapping_field(data, "period"),
            usable_credits=get_mapping_field(data, "usableCredits"),
        )


# --- 카테고리별 projection -------------------------------------------------

def category_detail(doc: UsageDocument, key: str) -> Any:
    """hourlyUsage[key] 원본 값을 그대로 반환합니다 (없으면 None)."""
    return get_field(doc.hourly_usage, key)


def category_total_price(doc: UsageDocument, key: str) -> float:
    """hourlyUsage[key] 배열의 totalPrice 합계"""
    return sum_field(get_array_field(doc.hourly_usage, key), catalog.PRICE_FIELD)


def category_count(doc: UsageDocument, key: str) -> int:
    """hourlyUsage[key] 배열의 엔트리 수"""
    return count(get_array_field(doc.hourly_usage, key))


def quantum_total(doc: UsageDocument) -> float:
    """
    quantum(AI) 카테고리 합계를 계산합니다.

    quantum은 배열이 아니라 {"notebook": [...]} 형태로 한 단계 더 중첩되어 있습니다.
    quantum이 없거나 dict가 아니거나 notebook이 배열이 아니면 0.0입니다.
    """
    quantum = get_mapping_field(doc.hourly_usage, catalog.QUANTUM)
    notebooks = get_array_field(quantum, catalog.QUANTUM_ENTRIES)
    return sum_field(notebooks, catalog.PRICE_FIELD)


def savings_plan_detail(doc: UsageDocument) -> Any:
    return get_field(doc.monthly_usage, catalog.SAVINGS_PLAN)


def savings_plan_total(doc: UsageDocument) -> float:
    """monthlyUsage.savingsPlan 엔트리들의 totalPrice.value 합계"""
    entries = get_array_field(doc.monthly_usage, catalog.SAVINGS_PLAN)
    return sum_nested_field(
        entries,
        catalog.PRICE_FIELD,
        catalog.SAVINGS_PLAN_PRICE_VALUE,
    )


# --- 합계 ------------------------------------------------------------------

def hourly_grand_total(doc: UsageDocument) -> float:
    """
    hourly 카테고리 합계 + quantum 합계

    HOURLY_CATEGORIES에 없는 카테고리는 응답에 있어도 합산하지 않습니다.
    """
    total = 0.0
    for key in catalog.HOURLY_CATEGORY_KEYS:
        total += category_total_price(doc, key)
    total += quantum_total(doc)
    return total


def resources_total(doc: UsageDocument) -> float:
    """resourcesUsage 전체(type 무관) totalPrice 합계"""
    return sum_field(doc.resources_usage, catalog.PRICE_FIELD)


def resource_type_total(doc: UsageDocument, tag: str) -> float:
    """resourcesUsage 중 type == tag인 엔트리의 totalPrice 합계"""
    return sum_filtered_field(
        doc.resources_usage,
        catalog.RESOURCE_TYPE_FIELD,
        tag,
        catalog.PRICE_FIELD,
    )


def _safe_total(calculation: Callable[[UsageDocument], float], doc: UsageDocument) -> float:
    try:
        return float(calculation(doc))
    except (TypeError, ValueError, AttributeError, ArithmeticError) as e:
        get_logger().warning(
            f"[USAGE_TOTAL] {calculation.__name__} 계산 실패, 0으로 처리합니다: {e}"
        )
        return 0.0


def comprehensive_total(doc: UsageDocument) -> float:
    """
    hourly + monthly(savingsPlan) + resources 전체 합계

    하위 계산 하나가 실패해도 그 값만 0으로 보고 나머지는 계속 합산합니다.
    """
    total = 0.0
    for calculation in (hourly_grand_total, savings_plan_total, resources_total):
        total += _safe_total(calculation, doc)
    return total


# --- 기간 / 크레딧 ----------------------------------------------------------

def period_from(doc: UsageDocument) -> Any:
    return get_field(doc.period, "from")


def period_to(doc: UsageDocument) -> Any:
    return get_field(doc.period, "to")


def total_usable_credit(doc: UsageDocument) -> Optional[float]:
    """usableCredits.totalCredit (없으면 None)"""
    value = get_field(doc.usable_credits, "totalCredit")
    if value is None:
        return None
    return to_float(value)
