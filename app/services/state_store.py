"""
위저드 상태 저장소 서비스입니다.
브라우저 localStorage를 대신하여 현재 제안서, 선택된 섹션 목록,
섹션별 업로드 이미지 목록을 키-값(JSON) 형태로 보관합니다.

관리하는 키:
1. currentProposal: 현재 제안서 전체
2. selectedSections: 사용자가 고른 섹션 키 목록
3. screenshots_<sectionId>: 섹션별 스크린샷 목록
4. process_flow_diagram_image / technical_architecture_images: 다이어그램 이미지
5. proposal_diagrams: API가 돌려준 다이어그램 목록

모든 읽기/쓰기는 동기식이며, 값이 손상되어 파싱할 수 없으면
에러 대신 기본값을 돌려줍니다.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import quote, unquote

from app.config import get_settings
from app.exceptions import StorageError

logger = logging.getLogger(__name__)


# 저장소 키 상수
CURRENT_PROPOSAL_KEY = "currentProposal"
SELECTED_SECTIONS_KEY = "selectedSections"
PROPOSAL_DIAGRAMS_KEY = "proposal_diagrams"
PROCESS_FLOW_IMAGES_KEY = "process_flow_diagram_image"
TECHNICAL_ARCHITECTURE_IMAGES_KEY = "technical_architecture_images"
SCREENSHOTS_KEY_PREFIX = "screenshots_"

# 구독 콜백: (key, 새 값 또는 삭제 시 None, 저장소 버전)
Subscriber = Callable[[str, Any, int], None]


def screenshots_key(section_id: str) -> str:
    """섹션별 스크린샷 목록 키."""
    return f"{SCREENSHOTS_KEY_PREFIX}{section_id}"


class StateStore(ABC):
    """
    버전이 붙은 키-값 저장소 인터페이스.

    쓰기(set/delete)가 일어날 때마다 version이 1씩 증가하고
    등록된 구독자에게 변경이 통지됩니다.
    """

    def __init__(self):
        self._version = 0
        self._subscribers: list[Subscriber] = []
        self._lock = threading.RLock()

    @property
    def version(self) -> int:
        return self._version

    def get(self, key: str, default: Any = None) -> Any:
        """키의 값을 반환합니다. 없거나 손상된 경우 default."""
        with self._lock:
            value = self._read(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> int:
        """값을 저장하고 새 버전 번호를 반환합니다."""
        with self._lock:
            self._write(key, value)
            self._version += 1
            version = self._version
        self._notify(key, value, version)
        return version

    def delete(self, key: str) -> bool:
        with self._lock:
            existed = self._remove(key)
            if existed:
                self._version += 1
            version = self._version
        if existed:
            self._notify(key, None, version)
        return existed

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        변경 구독을 등록합니다.

        Returns:
            호출하면 구독이 해제되는 함수
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, key: str, value: Any, version: int) -> None:
        for callback in list(self._subscribers):
            try:
                callback(key, value, version)
            except Exception as e:
                logger.error(f"[StateStore] 구독자 콜백 실패 ({key}): {e}", exc_info=True)

    @abstractmethod
    def keys(self) -> list[str]:
        ...

    @abstractmethod
    def _read(self, key: str) -> Any:
        ...

    @abstractmethod
    def _write(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def _remove(self, key: str) -> bool:
        ...


class InMemoryStateStore(StateStore):
    """테스트 및 단일 프로세스 실행용 메모리 저장소."""

    def __init__(self):
        super().__init__()
        # 저장 시점의 스냅샷을 보관하기 위해 JSON 문자열로 둡니다.
        self._data: dict[str, str] = {}

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def _read(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"[StateStore] 손상된 값 무시: {key}")
            return None

    def _write(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(
                f"JSON으로 직렬화할 수 없는 값입니다: {key}",
                details={"key": key, "error": str(e)},
            )

    def _remove(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def put_raw(self, key: str, raw: str) -> None:
        """원시 문자열을 그대로 넣습니다 (손상 데이터 재현용)."""
        self._data[key] = raw


class FileStateStore(StateStore):
    """키마다 JSON 파일 하나를 쓰는 파일 기반 저장소."""

    def __init__(self, base_path: Optional[str] = None):
        super().__init__()
        self.base_path = Path(base_path or get_settings().state_store_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # 퍼센트 인코딩: 서로 다른 키가 같은 파일명이 되지 않고 keys()에서 되돌릴 수 있음
        safe_key = quote(key, safe="")
        return self.base_path / f"{safe_key}.json"

    def keys(self) -> list[str]:
        return [unquote(path.stem) for path in sorted(self.base_path.glob("*.json"))]

    def _read(self, key: str) -> Any:
        file_path = self._path(key)
        if not file_path.exists():
            return None

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[StateStore] 파일 로딩 실패, 기본값 사용 {file_path}: {e}")
            return None

    def _write(self, key: str, value: Any) -> None:
        file_path = self._path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"[StateStore] 파일 저장 실패 {file_path}: {e}", exc_info=True)
            raise StorageError(
                f"상태 저장에 실패했습니다: {key}",
                details={"path": str(file_path), "error": str(e)},
            )

    def _remove(self, key: str) -> bool:
        file_path = self._path(key)
        if file_path.exists():
            file_path.unlink()
            return True
        return False


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_state_store: Optional[StateStore] = None


def get_state_store() -> StateStore:
    """StateStore 인스턴스를 반환합니다."""
    global _state_store
    if _state_store is None:
        _state_store = FileStateStore()
    return _state_store


def set_state_store(store: Optional[StateStore]) -> None:
    """저장소 구현을 교체합니다 (테스트에서 메모리 저장소 주입용)."""
    global _state_store
    _state_store = store
