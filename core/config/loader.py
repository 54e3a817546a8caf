"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

from adapters.db.sqlite_adapter import get_db_path
from core.constants import Defaults, Paths
from core.types import AppMode


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: AppMode
    db_path: Path
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT
    console_log_level: str = Defaults.LOG_LEVEL
    file_log_level: str = Defaults.LOG_LEVEL


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def load_settings(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")

    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SettingsLoadError("settings.yaml에 'mode' 필드가 없습니다")

    try:
        mode = AppMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in AppMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    # DB 경로 (명시되지 않으면 모드별 기본 경로)
    db_path_str = data.get("db_path")
    db_path = Path(db_path_str) if db_path_str else get_db_path(mode)

    web_config = data.get("web") or {}
    web_port = web_config.get("port", Defaults.WEB_PORT)
    if not isinstance(web_port, int):
        raise SettingsLoadError(
            f"settings.yaml의 web.port는 정수여야 합니다: {web_port!r}"
        )

    logging_config = data.get("logging") or {}

    return AppConfig(
        mode=mode,
        db_path=db_path,
        web_host=web_config.get("host", Defaults.WEB_HOST),
        web_port=web_port,
        console_log_level=str(
            logging_config.get("console_level", Defaults.LOG_LEVEL)
        ).upper(),
        file_log_level=str(
            logging_config.get("file_level", Defaults.LOG_LEVEL)
        ).upper(),
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_settings(settings_path)

    @property
    def mode(self) -> AppMode:
        """현재 실행 모드"""
        assert self._config is not None
        return self._config.mode

    @property
    def db_path(self) -> Path:
        """DB 경로"""
        assert self._config is not None
        return self._config.db_path

    @property
    def web_host(self) -> str:
        """Web 바인드 호스트"""
        assert self._config is not None
        return self._config.web_host

    @property
    def web_port(self) -> int:
        """Web 포트"""
        assert self._config is not None
        return self._config.web_port

    @property
    def console_log_level(self) -> str:
        """콘솔 로그 레벨 이름"""
        assert self._config is not None
        return self._config.console_log_level

    @property
    def file_log_level(self) -> str:
        """파일 로그 레벨 이름"""
        assert self._config is not None
        return self._config.file_log_level

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
