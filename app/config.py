from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    # API 설정: AI 모델 사용을 위한 키와 모델 이름
    anthropic_api_key: str = ""
    claude_model: str = "claude-3-5-sonnet-20241022"  # 사용할 Claude AI 모델 버전
    claude_timeout_seconds: float = 30.0  # API 호출 1회당 타임아웃

    # 생성 기본값: 섹션별 설정이 없을 때 사용
    default_max_tokens: int = 1000
    default_temperature: float = 0.7
    max_retries: int = 3  # 재시도 포함 최대 시도 횟수
    retry_base_delay: float = 1.0  # 첫 재시도 대기 시간(초)
    retry_max_delay: float = 10.0  # 재시도 대기 시간 상한(초)

    # API 키가 없을 때 섹션별 기본(샘플) 콘텐츠로 응답할지 여부
    use_fallback_content: bool = True

    # 상태 저장소: 브라우저 localStorage를 대신하는 JSON 저장 폴더
    state_store_path: str = "data/state"

    # 내보내기 설정
    image_fetch_timeout: float = 10.0  # 원격 이미지 다운로드 타임아웃(초)
    docx_image_width_inches: float = 6.0

    # 이미지 업로드 제한
    max_image_size_mb: int = 10
    max_upload_total_mb: int = 50
    max_images_per_upload: int = 20
    max_filename_length: int = 255

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000"]

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    (매번 파일을 다시 읽지 않아 효율적입니다)
    """
    return Settings()
