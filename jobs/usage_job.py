#!/usr/bin/env python3
"""
Usage Job: 프로젝트 사용량 테이블을 조회하여 row를 JSON Lines로 출력합니다.
"""

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

# 프로젝트 루트 경로 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import load_settings, Settings
from core.history import get_history_row, iter_history_rows
from core.logger import get_logger
from core.tables import (
    TABLE_CURRENT,
    TABLE_FORECAST,
    TABLE_HISTORY,
    TABLE_PLANS,
    TABLES,
    project_row,
)
from core.usage_client import UsageApiError, UsageClient

TABLE_ALIASES = {
    "current": TABLE_CURRENT,
    "forecast": TABLE_FORECAST,
    "history": TABLE_HISTORY,
    "plans": TABLE_PLANS,
}


def parse_columns(value: Optional[str]) -> Optional[List[str]]:
    """
    "a,b,c" 형태의 컬럼 목록을 리스트로 변환합니다. 비어 있으면 None(전체 컬럼).
    """
    if not value:
        return None
    columns = [c.strip() for c in value.split(",") if c.strip()]
    return columns or None


def collect_rows(
    client: UsageClient,
    table_name: str,
    project_id: str,
    columns: Optional[Sequence[str]] = None,
    usage_id: Optional[str] = None
) -> Iterator[Dict[str, Any]]:
    """
    테이블 종류에 맞는 API를 호출하여 row를 yield 합니다.

    history는 usage_id가 주어지면 해당 기간만 조회하고,
    아니면 목록 → 상세 순서로 조회합니다. 실패한 기간은 건너뜁니다.
    """
    table = TABLES[table_name]

    if table_name == TABLE_CURRENT:
        yield project_row(table, client.fetch_current(project_id), columns)
    elif table_name == TABLE_FORECAST:
        yield project_row(table, client.fetch_forecast(project_id), columns)
    elif table_name == TABLE_PLANS:
        yield project_row(table, client.fetch_plans(project_id), columns)
    elif usage_id:
        yield get_history_row(client, project_id, usage_id, columns)
    else:
        for result in iter_history_rows(client, project_id, columns):
            if result.ok:
                yield result.row


def run_usage_job(
    settings: Settings,
    table_name: str,
    project_id: str,
    columns: Optional[Sequence[str]] = None,
    usage_id: Optional[str] = None,
    out=None
) -> int:
    """
    Usage Job을 실행합니다.

    Args:
        settings: 설정 객체
        table_name: 조회할 테이블 이름
        project_id: 프로젝트 ID
        columns: 출력할 컬럼 목록 (None이면 전체)
        usage_id: history 기간 ID (history 테이블 전용)
        out: 출력 스트림 (기본값: stdout)

    Returns:
        출력한 row 수
    """
    out = out or sys.stdout
    logger = get_logger(settings=settings.logging)
    logger.info(f"[USAGE_JOB] {table_name} 조회 시작 - project {project_id}")

    written = 0
    with UsageClient(settings.api) as client:
        for row in collect_rows(client, table_name, project_id, columns, usage_id):
            out.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
            written += 1

    logger.info(f"[USAGE_JOB] {table_name} 조회 완료 - {written}개 row")
    return written


def main():
    """메인 함수"""
    parser = argparse.ArgumentParser(description='Cloud Project Usage Job')
    parser.add_argument(
        '--config',
        type=str,
        default='config/settings.yaml',
        help='설정 파일 경로'
    )
    parser.add_argument(
        '--table',
        choices=sorted(TABLE_ALIASES),
        default='current',
        help='조회할 테이블 (기본값: current)'
    )
    parser.add_argument(
        '--project',
        type=str,
        help='프로젝트 ID (기본값: 설정 파일의 defaultProjectId)'
    )
    parser.add_argument(
        '--usage-id',
        type=str,
        help='history 기간 ID (예: RUN2_202511)'
    )
    parser.add_argument(
        '--columns',
        type=str,
        help='출력할 컬럼 (쉼표 구분, 기본값: 전체)'
    )

    args = parser.parse_args()

    # 설정 로드
    settings = load_settings(args.config)

    project_id = args.project or settings.default_project_id
    if not project_id:
        parser.error("--project 또는 설정 파일의 defaultProjectId가 필요합니다")

    try:
        run_usage_job(
            settings,
            TABLE_ALIASES[args.table],
            project_id,
            columns=parse_columns(args.columns),
            usage_id=args.usage_id,
        )
    except (UsageApiError, KeyError) as e:
        print(f"\n❌ 오류 발생: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
