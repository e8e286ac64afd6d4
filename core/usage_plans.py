"""
Savings plan 사용량(usage/plans) 문서 모듈

usage/plans 응답은 형태가 고정되어 있으므로 dataclass로 직접 파싱하고,
평탄화 컬럼은 flavors[0] (및 그 안의 첫 번째 period/subscription/detail)에서만 추출합니다.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.value_tree import get_mapping_field, to_float, to_timestamp


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    return int(to_float(value))


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def _mapping(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    return get_mapping_field(data, name) or {}


@dataclass
class PlanPrice:
    currency_code: str = ""
    price_in_ucents: int = 0
    text: str = ""
    value: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanPrice":
        return cls(
            currency_code=_str(data.get("currencyCode")),
            price_in_ucents=_int(data.get("priceInUcents")),
            text=_str(data.get("text")),
            value=to_float(data.get("value")),
        )


@dataclass
class Period:
    start: Optional[datetime] = None  # "from"
    end: Optional[datetime] = None    # "to"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Period":
        return cls(
            start=to_timestamp(data.get("from")),
            end=to_timestamp(data.get("to")),
        )


@dataclass
class FlatFeeDetail:
    id: str = ""
    period: Period = field(default_factory=Period)
    plan_name: str = ""
    size: int = 0
    total_price: PlanPrice = field(default_factory=PlanPrice)
    unit_price: PlanPrice = field(default_factory=PlanPrice)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlatFeeDetail":
        return cls(
            id=_str(data.get("id")),
            period=Period.from_dict(_mapping(data, "period")),
            plan_name=_str(data.get("planName")),
            size=_int(data.get("size")),
            total_price=PlanPrice.from_dict(_mapping(data, "totalPrice")),
            unit_price=PlanPrice.from_dict(_mapping(data, "unitPrice")),
        )


@dataclass
class FlatFee:
    details: List[FlatFeeDetail] = field(default_factory=list)
    total_price: PlanPrice = field(default_factory=PlanPrice)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlatFee":
        return cls(
            details=[FlatFeeDetail.from_dict(d) for d in _dict_list(data.get("details"))],
            total_price=PlanPrice.from_dict(_mapping(data, "totalPrice")),
        )


@dataclass
class OverQuota:
    ids: List[str] = field(default_factory=list)
    quantity: int = 0
    total_price: PlanPrice = field(default_factory=PlanPrice)
    unit_price: PlanPrice = field(default_factory=PlanPrice)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OverQuota":
        return cls(
            ids=_str_list(data.get("ids")),
            quantity=_int(data.get("quantity")),
            total_price=PlanPrice.from_dict(_mapping(data, "totalPrice")),
            unit_price=PlanPrice.from_dict(_mapping(data, "unitPrice")),
        )


@dataclass
class FlavorFees:
    flat_fee: FlatFee = field(default_factory=FlatFee)
    over_quota: OverQuota = field(default_factory=OverQuota)
    saved_amount: PlanPrice = field(default_factory=PlanPrice)
    total_price: PlanPrice = field(default_factory=PlanPrice)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlavorFees":
        return cls(
            flat_fee=FlatFee.from_dict(_mapping(data, "flatFee")),
            over_quota=OverQuota.from_dict(_mapping(data, "overQuota")),
            saved_amount=PlanPrice.from_dict(_mapping(data, "savedAmount")),
            total_price=PlanPrice.from_dict(_mapping(data, "totalPrice")),
        )


@dataclass
class UsagePeriod:
    plans_ids: List[str] = field(default_factory=list)
    begin: Optional[datetime] = None
    consumption_size: int = 0
    coverage: str = ""
    cumul_plan_size: int = 0
    end: Optional[datetime] = None
    resource_ids: List[str] = field(default_factory=list)
    utilization: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsagePeriod":
        return cls(
            plans_ids=_str_list(data.get("plansIds")),
            begin=to_timestamp(data.get("begin")),
            consumption_size=_int(data.get("consumptionSize")),
            coverage=_str(data.get("coverage")),
            cumul_plan_size=_int(data.get("cumulPlanSize")),
            end=to_timestamp(data.get("end")),
            resource_ids=_str_list(data.get("resourceIds")),
            utilization=_str(data.get("utilization")),
        )


@dataclass
class PlanSubscription:
    begin: Optional[datetime] = None
    end: Optional[datetime] = None
    id: str = ""
    size: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanSubscription":
        return cls(
            begin=to_timestamp(data.get("begin")),
            end=to_timestamp(data.get("end")),
            id=_str(data.get("id")),
            size=_int(data.get("size")),
        )


@dataclass
class FlavorUsage:
    flavor: str = ""
    fees: FlavorFees = field(default_factory=FlavorFees)
    periods: List[UsagePeriod] = field(default_factory=list)
    subscriptions: List[PlanSubscription] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlavorUsage":
        return cls(
            flavor=_str(data.get("flavor")),
            fees=FlavorFees.from_dict(_mapping(data, "fees")),
            periods=[UsagePeriod.from_dict(p) for p in _dict_list(data.get("periods"))],
            subscriptions=[
                PlanSubscription.from_dict(s) for s in _dict_list(data.get("subscriptions"))
            ],
        )


@dataclass
class UsagePlanDocument:
    """usage/plans 응답 한 건"""
    project_id: str = ""
    period: Period = field(default_factory=Period)
    total_savings: PlanPrice = field(default_factory=PlanPrice)
    flavors: List[FlavorUsage] = field(default_factory=list)
    raw_flavors: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], project_id: str = "") -> "UsagePlanDocument":
        """
        API 응답 dict로부터 UsagePlanDocument를 생성합니다.

        없는 필드는 해당 타입의 기본값(빈 문자열, 0, 빈 리스트, None)이 됩니다.
        응답에 projectId가 있으면 그 값을, 없으면 project_id 인자를 사용합니다.
        """
        return cls(
            project_id=_str(data.get("projectId")) or project_id,
            period=Period.from_dict(_mapping(data, "period")),
            total_savings=PlanPrice.from_dict(_mapping(data, "totalSavings")),
            flavors=[FlavorUsage.from_dict(f) for f in _dict_list(data.get("flavors"))],
            raw_flavors=data.get("flavors"),
        )


# --- 첫 번째 flavor 추출 -----------------------------------------------------

def first_flavor(doc: UsagePlanDocument) -> Optional[FlavorUsage]:
    if not doc.flavors:
        return None
    return doc.flavors[0]


def first_period(doc: UsagePlanDocument) -> Optional[UsagePeriod]:
    flavor = first_flavor(doc)
    if flavor is None or not flavor.periods:
        return None
    return flavor.periods[0]


def first_subscription(doc: UsagePlanDocument) -> Optional[PlanSubscription]:
    flavor = first_flavor(doc)
    if flavor is None or not flavor.subscriptions:
        return None
    return flavor.subscriptions[0]


def first_flat_fee_detail(doc: UsagePlanDocument) -> Optional[FlatFeeDetail]:
    flavor = first_flavor(doc)
    if flavor is None or not flavor.fees.flat_fee.details:
        return None
    return flavor.fees.flat_fee.details[0]


def flavor_name(doc: UsagePlanDocument) -> Optional[str]:
    flavor = first_flavor(doc)
    return flavor.flavor if flavor else None


def flat_fee_total_price(doc: UsagePlanDocument) -> Optional[float]:
    flavor = first_flavor(doc)
    return flavor.fees.flat_fee.total_price.value if flavor else None


def flat_fee_currency(doc: UsagePlanDocument) -> Optional[str]:
    flavor = first_flavor(doc)
    return flavor.fees.flat_fee.total_price.currency_code if flavor else None


def over_quota_quantity(doc: UsagePlanDocument) -> Optional[int]:
    flavor = first_flavor(doc)
    return flavor.fees.over_quota.quantity if flavor else None


def over_quota_unit_price(doc: UsagePlanDocument) -> Optional[float]:
    flavor = first_flavor(doc)
    return flavor.fees.over_quota.unit_price.value if flavor else None


def flavor_total_price(doc: UsagePlanDocument) -> Optional[float]:
    flavor = first_flavor(doc)
    return flavor.fees.total_price.value if flavor else None


def flavor_saved_amount(doc: UsagePlanDocument) -> Optional[float]:
    flavor = first_flavor(doc)
    return flavor.fees.saved_amount.value if flavor else None


def usage_coverage(doc: UsagePlanDocument) -> Optional[str]:
    period = first_period(doc)
    return period.coverage if period else None


def usage_utilization(doc: UsagePlanDocument) -> Optional[str]:
    period = first_period(doc)
    return period.utilization if period else None


def consumption_size(doc: UsagePlanDocument) -> Optional[int]:
    period = first_period(doc)
    return period.consumption_size if period else None


def cumul_plan_size(doc: UsagePlanDocument) -> Optional[int]:
    period = first_period(doc)
    return period.cumul_plan_size if period else None


def subscription_id(doc: UsagePlanDocument) -> Optional[str]:
    subscription = first_subscription(doc)
    return subscription.id if subscription else None


def subscription_size(doc: UsagePlanDocument) -> Optional[int]:
    subscription = first_subscription(doc)
    return subscription.size if subscription else None


def subscription_begin(doc: UsagePlanDocument) -> Optional[datetime]:
    subscription = first_subscription(doc)
    return subscription.begin if subscription else None


def subscription_end(doc: UsagePlanDocument) -> Optional[datetime]:
    subscription = first_subscription(doc)
    return subscription.end if subscription else None


def plan_name(doc: UsagePlanDocument) -> Optional[str]:
    detail = first_flat_fee_detail(doc)
    return detail.plan_name if detail else None
