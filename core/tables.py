"""
사용량 테이블 / 컬럼 정의 모듈

각 컬럼은 문서 한 건을 받아 값 하나를 돌려주는 projection 함수를 가지며,
요청된 컬럼만 독립적으로 계산할 수 있습니다.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from core import aggregator, catalog, usage_plans
from core.value_tree import to_float, to_timestamp


STRING = "string"
TIMESTAMP = "timestamp"
DOUBLE = "double"
INT = "int"
JSON = "json"

TABLE_CURRENT = "ovh_cloud_project_usage_current"
TABLE_FORECAST = "ovh_cloud_project_usage_forecast"
TABLE_HISTORY = "ovh_cloud_project_usage_history"
TABLE_PLANS = "ovh_cloud_project_usage_plans"


@dataclass(frozen=True)
class Column:
    name: str
    kind: str
    projection: Callable[[Any], Any]
    description: str = ""

    def value(self, record: Any) -> Any:
        """projection 결과를 컬럼 타입에 맞게 변환합니다."""
        value = self.projection(record)
        if value is None:
            return None
        if self.kind == TIMESTAMP:
            return to_timestamp(value)
        if self.kind == DOUBLE:
            return to_float(value)
        return value


@dataclass(frozen=True)
class Table:
    name: str
    description: str
    columns: Sequence[Column]

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Column:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(f"{self.name} 테이블에 {name} 컬럼이 없습니다")


def project_row(
    table: Table,
    record: Any,
    columns: Optional[Sequence[str]] = None
) -> Dict[str, Any]:
    """
    문서 한 건을 테이블 row(dict)로 변환합니다.

    Args:
        table: 테이블 정의
        record: UsageDocument 또는 UsagePlanDocument
        columns: 계산할 컬럼 이름 목록 (None이면 전체)

    Returns:
        {컬럼 이름: 값} 딕셔너리 (요청 순서 유지)

    Raises:
        KeyError: 테이블에 없는 컬럼을 요청했을 때
    """
    selected = table.columns if columns is None else [table.get_column(n) for n in columns]
    return {column.name: column.value(record) for column in selected}


# --- current / forecast / history 공통 컬럼 ----------------------------------

def _category_columns(category: catalog.HourlyCategory, detail_suffix: str, label: str) -> List[Column]:
    key = category.key
    prefix = category.column_prefix
    columns = [
        Column(
            f"{prefix}{detail_suffix}",
            JSON,
            lambda doc: aggregator.category_detail(doc, key),
            f"Detailed {key} {label} data.",
        ),
        Column(
            f"total_{prefix}_price",
            DOUBLE,
            lambda doc: aggregator.category_total_price(doc, key),
            f"Total {label} price for {key}.",
        ),
    ]
    if category.counted:
        columns.append(Column(
            f"{prefix}_count",
            INT,
            lambda doc: aggregator.category_count(doc, key),
            f"Number of different {key} types in {label} usage.",
        ))
    return columns


def _resource_type_column(resource: catalog.ResourceType, price_label: str, label: str) -> Column:
    tag = resource.tag
    return Column(
        f"{resource.column_prefix}_{price_label}_price",
        DOUBLE,
        lambda doc: aggregator.resource_type_total(doc, tag),
        f"{label.capitalize()} price for {tag} resources.",
    )


def usage_columns(
    detail_suffix: str,
    price_label: str,
    period_prefix: str,
    label: str
) -> List[Column]:
    """
    UsageDocument 기반 테이블(current/forecast/history)의 공통 컬럼 목록을 만듭니다.

    Args:
        detail_suffix: 상세 JSON 컬럼 접미사 ("_usage" 또는 "_forecast")
        price_label: 합계 컬럼 라벨 ("current", "forecast", "historical")
        period_prefix: 기간 컬럼 접두어 ("usage_period" 또는 "forecast_period")
        label: 설명에 쓰는 라벨
    """
    columns = [
        Column("project_id", STRING, lambda doc: doc.project_id, "The project ID."),
        Column("last_update", TIMESTAMP, lambda doc: doc.last_update, f"Last update timestamp for {label} usage data."),
    ]

    for category in catalog.HOURLY_CATEGORIES:
        columns.extend(_category_columns(category, detail_suffix, label))

    columns.extend([
        Column(
            f"quantum{detail_suffix}",
            JSON,
            lambda doc: aggregator.category_detail(doc, catalog.QUANTUM),
            f"Detailed quantum/AI {label} data (nested notebook array).",
        ),
        Column("total_quantum_price", DOUBLE, aggregator.quantum_total, f"Total {label} price for quantum/AI services."),
        Column(
            f"grand_total_{price_label}_price",
            DOUBLE,
            aggregator.hourly_grand_total,
            f"Grand total of all {label} hourly costs across all resource types.",
        ),
        Column("hourly_usage", JSON, lambda doc: doc.hourly_usage, f"Complete raw {label} hourly usage."),
        Column("monthly_usage", JSON, lambda doc: doc.monthly_usage, "Monthly usage including savings plan usage."),
        Column(
            f"monthly_savings_plan{detail_suffix}",
            JSON,
            aggregator.savings_plan_detail,
            "Savings plan monthly usage data with detailed pricing.",
        ),
        Column(
            "total_monthly_savings_plan_price",
            DOUBLE,
            aggregator.savings_plan_total,
            f"Total {label} price for monthly savings plans.",
        ),
        Column(
            "resources_usage_forecast" if detail_suffix == "_forecast" else "resources_usage",
            JSON,
            lambda doc: doc.resources_usage,
            "Infrastructure resources usage (gateways, load balancers, floating IPs).",
        ),
        Column(
            "total_resources_price",
            DOUBLE,
            aggregator.resources_total,
            f"Total {label} price for infrastructure resources.",
        ),
    ])

    for resource in catalog.RESOURCE_TYPES:
        columns.append(_resource_type_column(resource, price_label, label))

    columns.extend([
        Column(period_prefix, JSON, lambda doc: doc.period, "Period with from/to dates."),
        Column(f"{period_prefix}_from", TIMESTAMP, aggregator.period_from, "Start date of the period."),
        Column(f"{period_prefix}_to", TIMESTAMP, aggregator.period_to, "End date of the period."),
        Column("usable_credits", JSON, lambda doc: doc.usable_credits, "Available credits."),
        Column("total_usable_credit", DOUBLE, aggregator.total_usable_credit, "Total amount of usable credits."),
        Column(
            f"comprehensive_total_{price_label}_price",
            DOUBLE,
            aggregator.comprehensive_total,
            f"Grand total of all {label} costs (hourly + monthly + resources).",
        ),
    ])
    return columns


def _history_columns() -> List[Column]:
    columns = usage_columns("_usage", "historical", "usage_period", "historical")
    usage_id = Column(
        "usage_id",
        STRING,
        lambda doc: doc.id,
        "Unique usage period identifier (e.g., RUN2_202511).",
    )
    return columns[:1] + [usage_id] + columns[1:]


def _plan_columns() -> List[Column]:
    return [
        Column("project_id", STRING, lambda doc: doc.project_id, "The project ID."),
        Column("period_from", TIMESTAMP, lambda doc: doc.period.start, "Start of the usage plan period."),
        Column("period_to", TIMESTAMP, lambda doc: doc.period.end, "End of the usage plan period."),
        Column("total_savings", DOUBLE, lambda doc: doc.total_savings.value, "Total amount saved."),
        Column("total_savings_currency", STRING, lambda doc: doc.total_savings.currency_code, "Currency of the total savings."),
        Column("total_savings_text", STRING, lambda doc: doc.total_savings.text, "Formatted total savings."),
        Column("flavor", STRING, usage_plans.flavor_name, "Flavor of the first savings plan."),
        Column("flat_fee_total_price", DOUBLE, usage_plans.flat_fee_total_price, "Flat fee total price."),
        Column("flat_fee_currency", STRING, usage_plans.flat_fee_currency, "Flat fee currency."),
        Column("over_quota_quantity", INT, usage_plans.over_quota_quantity, "Over quota quantity."),
        Column("over_quota_unit_price", DOUBLE, usage_plans.over_quota_unit_price, "Over quota unit price."),
        Column("flavor_total_price", DOUBLE, usage_plans.flavor_total_price, "Total price for the flavor."),
        Column("flavor_saved_amount", DOUBLE, usage_plans.flavor_saved_amount, "Amount saved for the flavor."),
        Column("usage_period_coverage", STRING, usage_plans.usage_coverage, "Coverage of the first usage period."),
        Column("usage_period_utilization", STRING, usage_plans.usage_utilization, "Utilization of the first usage period."),
        Column("consumption_size", INT, usage_plans.consumption_size, "Consumption size of the first usage period."),
        Column("cumul_plan_size", INT, usage_plans.cumul_plan_size, "Cumulative plan size of the first usage period."),
        Column("subscription_id", STRING, usage_plans.subscription_id, "First subscription ID."),
        Column("subscription_size", INT, usage_plans.subscription_size, "First subscription size."),
        Column("subscription_begin", TIMESTAMP, usage_plans.subscription_begin, "First subscription start."),
        Column("subscription_end", TIMESTAMP, usage_plans.subscription_end, "First subscription end."),
        Column("plan_name", STRING, usage_plans.plan_name, "Plan name of the first flat fee detail."),
        Column("flavors", JSON, lambda doc: doc.raw_flavors, "Complete flavors array."),
    ]


TABLES: Dict[str, Table] = {
    TABLE_CURRENT: Table(
        TABLE_CURRENT,
        "Cloud project current usage with resource breakdown and price calculations.",
        usage_columns("_usage", "current", "usage_period", "current"),
    ),
    TABLE_FORECAST: Table(
        TABLE_FORECAST,
        "Cloud project usage forecast with resource breakdown and price calculations.",
        usage_columns("_forecast", "forecast", "forecast_period", "forecast"),
    ),
    TABLE_HISTORY: Table(
        TABLE_HISTORY,
        "Cloud project usage history across billing periods.",
        _history_columns(),
    ),
    TABLE_PLANS: Table(
        TABLE_PLANS,
        "Cloud project savings plan usage.",
        _plan_columns(),
    ),
}
