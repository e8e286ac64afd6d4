"""
Cloud project usage API 클라이언트 모듈
"""

from typing import Any, Dict, List, Optional

import requests

from config.settings import ApiSettings
from core.aggregator import UsageDocument
from core.logger import get_logger
from core.usage_plans import UsagePlanDocument


class UsageApiError(RuntimeError):
    """API 호출 실패 (네트워크/인증/잘못된 응답 형태)"""


def usage_path(project_id: str, kind: str) -> str:
    """
    /cloud/project/{project_id}/usage/{kind} 경로를 만듭니다.

    Args:
        project_id: 프로젝트 ID
        kind: current, forecast, history, history/{usage_id}, plans

    Returns:
        API 경로
    """
    return f"/cloud/project/{project_id}/usage/{kind}"


class UsageClient:
    """
    사용량 API를 호출하여 디코딩된 JSON을 돌려주는 클라이언트.

    재시도, 페이지네이션, 요청 서명은 하지 않습니다.
    """

    def __init__(self, settings: ApiSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "X-Ovh-Application": settings.application_key,
            "X-Ovh-Consumer": settings.consumer_key,
        })
        self.logger = get_logger()

    def close(self):
        """HTTP 세션을 닫습니다."""
        self.session.close()

    def __enter__(self) -> "UsageClient":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def fetch(self, path: str) -> Any:
        """
        API를 호출하여 JSON 응답을 반환합니다.

        Args:
            path: API 경로 (예: /cloud/project/xxx/usage/current)

        Returns:
            디코딩된 JSON 값

        Raises:
            UsageApiError: API 호출 실패 또는 JSON 디코딩 실패 시
        """
        url = f"{self.settings.endpoint}{path}"
        self.logger.debug(f"GET {path}")

        try:
            response = self.session.get(url, timeout=self.settings.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            error_msg = f"Usage API 호출 실패 ({path}): {e}"
            if getattr(e, "response", None) is not None:
                error_msg += f"\n응답 내용: {e.response.text}"
            self.logger.error(error_msg)
            raise UsageApiError(error_msg) from e
        except ValueError as e:
            # requests.JSONDecodeError 가 아닌 json 디코딩 오류
            error_msg = f"Usage API 응답이 JSON이 아닙니다 ({path}): {e}"
            self.logger.error(error_msg)
            raise UsageApiError(error_msg) from e

    def _fetch_object(self, path: str) -> Dict[str, Any]:
        data = self.fetch(path)
        if not isinstance(data, dict):
            error_msg = f"Usage API 응답 형식 오류 ({path}): object가 아닙니다"
            self.logger.error(error_msg)
            raise UsageApiError(error_msg)
        return data

    def fetch_current(self, project_id: str) -> UsageDocument:
        data = self._fetch_object(usage_path(project_id, "current"))
        return UsageDocument.from_dict(data, project_id=project_id)

    def fetch_forecast(self, project_id: str) -> UsageDocument:
        data = self._fetch_object(usage_path(project_id, "forecast"))
        return UsageDocument.from_dict(data, project_id=project_id)

    def list_history(self, project_id: str) -> List[str]:
        """
        history 목록 조회 (1단계). 각 항목의 id만 반환합니다.

        Raises:
            UsageApiError: 호출 실패 또는 응답이 배열이 아닐 때
        """
        path = usage_path(project_id, "history")
        data = self.fetch(path)
        if not isinstance(data, list):
            error_msg = f"Usage API 응답 형식 오류 ({path}): array가 아닙니다"
            self.logger.error(error_msg)
            raise UsageApiError(error_msg)

        usage_ids = []
        for index, item in enumerate(data):
            usage_id = item.get("id") if isinstance(item, dict) else None
            if not isinstance(usage_id, str) or not usage_id:
                self.logger.warning(
                    f"[USAGE_HISTORY] {path} 목록 {index}번 항목에 id가 없어 건너뜁니다: {item!r}"
                )
                continue
            usage_ids.append(usage_id)
        return usage_ids

    def fetch_history(self, project_id: str, usage_id: str) -> UsageDocument:
        """
        history 상세 조회 (2단계).

        상세 응답에 id가 비어 있으면 목록 단계의 usage_id로 채웁니다.
        """
        data = self._fetch_object(usage_path(project_id, f"history/{usage_id}"))
        doc = UsageDocument.from_dict(data, project_id=project_id)
        if not doc.id:
            doc.id = usage_id
        return doc

    def fetch_plans(self, project_id: str) -> UsagePlanDocument:
        data = self._fetch_object(usage_path(project_id, "plans"))
        return UsagePlanDocument.from_dict(data, project_id=project_id)
