"""
사용량 카테고리 / 리소스 타입 목록

grand total에 포함되는 hourly 카테고리는 닫힌 집합입니다.
응답에 새 카테고리가 나타나도 여기 추가하기 전까지는 합계에서 제외됩니다.
"""

from dataclasses import dataclass
from typing import Tuple


PRICE_FIELD = "totalPrice"

QUANTUM = "quantum"
QUANTUM_ENTRIES = "notebook"

SAVINGS_PLAN = "savingsPlan"
SAVINGS_PLAN_PRICE_VALUE = "value"

RESOURCE_TYPE_FIELD = "type"


@dataclass(frozen=True)
class HourlyCategory:
    """hourlyUsage 안의 배열형 카테고리"""
    key: str           # API 응답의 키 (예: managedKubernetesService)
    column_prefix: str  # 컬럼 이름 접두어 (예: kubernetes)
    counted: bool       # <prefix>_count 컬럼 제공 여부


@dataclass(frozen=True)
class ResourceType:
    """resourcesUsage 배열의 type 태그"""
    tag: str
    column_prefix: str


HOURLY_CATEGORIES: Tuple[HourlyCategory, ...] = (
    HourlyCategory("volume", "volumes", True),
    HourlyCategory("instance", "instances", True),
    HourlyCategory("storage", "storage", True),
    HourlyCategory("snapshot", "snapshots", True),
    HourlyCategory("instanceOption", "instance_options", False),
    HourlyCategory("instanceBandwidth", "instance_bandwidth", False),
    HourlyCategory("managedKubernetesService", "kubernetes", False),
    HourlyCategory("rancher", "rancher", False),
)

HOURLY_CATEGORY_KEYS: Tuple[str, ...] = tuple(c.key for c in HOURLY_CATEGORIES)

RESOURCE_TYPES: Tuple[ResourceType, ...] = (
    ResourceType("gateway", "gateway"),
    ResourceType("publicip", "publicip"),
    ResourceType("octavia-loadbalancer", "loadbalancer"),
    ResourceType("floatingip", "floatingip"),
)
