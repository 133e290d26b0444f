"""
공통 데이터 모델 모듈입니다.
요구사항, 제안서, 이미지 모델이 공통으로 사용하는 기본 클래스를 정의합니다.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    JSON에서는 camelCase, 파이썬 코드에서는 snake_case를 쓰는 기본 모델입니다.

    프론트엔드(위저드 화면)가 저장하던 형식(companyName, generatedAt 등)을
    그대로 주고받기 위해 별칭(alias)을 자동 생성합니다.
    - 입력: camelCase / snake_case 둘 다 허용
    - 출력: model_dump(by_alias=True) 사용 시 camelCase
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def to_json_dict(self) -> dict:
        """API 응답 및 저장소에 쓰는 JSON 호환 딕셔너리로 변환합니다."""
        return self.model_dump(mode="json", by_alias=True)
