"""
사용량 history 조회 모듈

1단계: usage/history 목록에서 id 목록을 가져옵니다.
2단계: id마다 usage/history/{id} 상세를 조회하여 row를 만듭니다.
한 id의 상세 조회가 실패해도 해당 row에만 오류를 남기고 나머지는 계속 진행합니다.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Sequence

from core.logger import get_logger
from core.tables import TABLE_HISTORY, TABLES, project_row
from core.usage_client import UsageApiError


@dataclass
class HistoryRow:
    """history 상세 조회 결과 한 건 (row 또는 error 중 하나)"""
    usage_id: str
    row: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def get_history_row(
    client,
    project_id: str,
    usage_id: str,
    columns: Optional[Sequence[str]] = None
) -> Dict[str, Any]:
    """
    목록 조회 없이 (project_id, usage_id)로 history row 하나를 가져옵니다.

    Raises:
        UsageApiError: 상세 조회 실패 시
    """
    doc = client.fetch_history(project_id, usage_id)
    return project_row(TABLES[TABLE_HISTORY], doc, columns)


def iter_history_rows(
    client,
    project_id: str,
    columns: Optional[Sequence[str]] = None
) -> Iterator[HistoryRow]:
    """
    history 목록을 먼저 조회한 뒤, id별 상세 row를 순서대로 yield 합니다.

    Args:
        client: list_history / fetch_history 를 제공하는 클라이언트 (UsageClient)
        project_id: 프로젝트 ID
        columns: 계산할 컬럼 목록 (None이면 전체)

    Yields:
        HistoryRow

    Raises:
        UsageApiError: 목록 조회(1단계) 실패 시
    """
    logger = get_logger()
    usage_ids = client.list_history(project_id)
    logger.info(f"[USAGE_HISTORY] {project_id}: {len(usage_ids)}개 기간 조회")

    for usage_id in usage_ids:
        try:
            row = get_history_row(client, project_id, usage_id, columns)
        except UsageApiError as e:
            logger.warning(f"[USAGE_HISTORY] {project_id}/{usage_id} 상세 조회 실패: {e}")
            yield HistoryRow(usage_id=usage_id, error=e)
            continue
        yield HistoryRow(usage_id=usage_id, row=row)
