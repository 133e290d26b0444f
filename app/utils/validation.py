"""입력 유효성 검증 유틸리티.

요구사항 폼의 필수 항목과 업로드 이미지(이름, 형식, 크기, 개수)를 검사합니다.
실패하면 모두 InputValidationError(400)를 던집니다.
"""

import os
import re
from typing import NamedTuple, Optional

from pydantic import ValidationError

from app.config import get_settings
from app.exceptions import InputValidationError
from app.models.requirements import Requirements, find_missing_fields


class ImageFormat(NamedTuple):
    mime_type: str
    magic: bytes  # 파일 앞부분에 있어야 하는 바이트


# 업로드 가능한 이미지 형식 (소문자 확장자 기준)
IMAGE_FORMATS = {
    ".png": ImageFormat("image/png", b"\x89PNG"),
    ".jpg": ImageFormat("image/jpeg", b"\xff\xd8\xff"),
    ".jpeg": ImageFormat("image/jpeg", b"\xff\xd8\xff"),
    ".gif": ImageFormat("image/gif", b"GIF8"),
    ".bmp": ImageFormat("image/bmp", b"BM"),
    ".webp": ImageFormat("image/webp", b"RIFF"),
}

# 파일명에 들어갈 수 없는 문자 (제어 문자 포함)
FORBIDDEN_NAME_CHARS = re.compile(r"[<>:\"|?*\x00-\x1f]")

_MB = 1024 * 1024


def validate_required_fields(payload: dict) -> None:
    """
    요구사항 요청 본문의 필수 항목 검증.

    누락된 항목 이름을 정해진 순서대로 쉼표로 이어 메시지에 담습니다.

    Raises:
        InputValidationError: 필수 항목 누락 (예: "Missing required fields: companyName, timeline")
    """
    missing = find_missing_fields(payload)
    if missing:
        raise InputValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"missing_fields": missing},
        )


def validate_filename(filename: str) -> str:
    """
    업로드 이미지 이름을 정리해서 돌려줍니다.

    널 바이트는 지우고, 디렉터리가 섞인 이름이나 금지 문자,
    설정 길이를 넘는 이름, 확장자만 있는 이름은 거부합니다.
    정리된 이름은 이미지 제목으로 그대로 쓰입니다.
    """
    name = (filename or "").replace("\x00", "").strip()
    if not name:
        raise InputValidationError("이미지 파일명이 없습니다")

    if ".." in name or os.path.basename(name) != name:
        raise InputValidationError(
            "이미지 파일명에 경로를 포함할 수 없습니다",
            details={"filename": filename},
        )

    if FORBIDDEN_NAME_CHARS.search(name):
        raise InputValidationError(
            "이미지 파일명에 사용할 수 없는 문자가 있습니다",
            details={"filename": filename},
        )

    limit = get_settings().max_filename_length
    if len(name) > limit:
        raise InputValidationError(
            f"이미지 파일명은 {limit}자를 넘을 수 없습니다",
            details={"filename": name, "length": len(name)},
        )

    stem, _ = os.path.splitext(name)
    if not stem:
        raise InputValidationError(
            "확장자만 있는 파일명은 사용할 수 없습니다",
            details={"filename": name},
        )

    return name


def validate_file_size(file_size: int, total_size: Optional[int] = None) -> None:
    """
    이미지 크기 검증.

    file_size는 이미지 1장, total_size는 한 번의 업로드 요청 전체 크기입니다.
    """
    settings = get_settings()

    per_image = settings.max_image_size_mb * _MB
    if file_size > per_image:
        raise InputValidationError(
            f"이미지 1장은 {settings.max_image_size_mb}MB 이하여야 합니다",
            details={"size": file_size, "limit": per_image},
        )

    if total_size is None:
        return

    per_request = settings.max_upload_total_mb * _MB
    if total_size > per_request:
        raise InputValidationError(
            f"한 번에 올리는 이미지는 합계 {settings.max_upload_total_mb}MB 이하여야 합니다",
            details={"size": total_size, "limit": per_request},
        )


def validate_image_extension(filename: str) -> str:
    """허용된 이미지 확장자인지 확인하고 소문자 확장자를 돌려줍니다."""
    ext = os.path.splitext(filename)[1].lower()
    if ext not in IMAGE_FORMATS:
        raise InputValidationError(
            f"지원하지 않는 이미지 형식입니다: {ext or '(확장자 없음)'}",
            details={"filename": filename, "allowed": sorted(IMAGE_FORMATS)},
        )
    return ext


def validate_file_signature(content: bytes, extension: str) -> None:
    """
    이미지 내용의 첫 바이트가 확장자와 맞는지 확인합니다.

    확장자만 바꾼 파일(예: PNG를 .jpg로 저장)도 여기서 걸러집니다.
    """
    fmt = IMAGE_FORMATS.get(extension)
    if fmt is None:
        return

    if len(content or b"") < len(fmt.magic):
        raise InputValidationError(
            "이미지 내용이 비어있거나 잘려 있습니다",
            details={"extension": extension},
        )

    if not content.startswith(fmt.magic):
        raise InputValidationError(
            f"이미지 내용이 {extension} 형식이 아닙니다",
            details={"extension": extension},
        )


def validate_image_count(count: int) -> None:
    """업로드 요청 1건에 담긴 이미지 개수 검증 (1장 이상, 설정값 이하)."""
    if count < 1:
        raise InputValidationError("업로드할 이미지를 1장 이상 선택해야 합니다")

    limit = get_settings().max_images_per_upload
    if count > limit:
        raise InputValidationError(
            f"이미지는 한 번에 {limit}장까지 올릴 수 있습니다",
            details={"count": count, "limit": limit},
        )


def validate_image_upload(filename: str, content: bytes) -> tuple[str, str]:
    """
    업로드 이미지 1건에 대한 전체 검증.

    Returns:
        (정리된 파일명, data URL에 쓸 MIME 타입)
    """
    name = validate_filename(filename)
    ext = validate_image_extension(name)
    validate_file_size(len(content))
    validate_file_signature(content, ext)
    return name, IMAGE_FORMATS[ext].mime_type


def validate_requirements(payload: dict) -> Requirements:
    """
    요구사항 요청 본문을 검증하고 Requirements 모델로 변환합니다.

    필수 항목이 비어 있으면 누락 목록을, 값의 타입이 맞지 않으면
    (예: companyName에 숫자) 잘못된 항목 목록을 담아 400으로 응답합니다.
    """
    validate_required_fields(payload)
    try:
        return Requirements.model_validate(payload)
    except ValidationError as e:
        invalid = []
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else "body"
            if name not in invalid:
                invalid.append(name)
        raise InputValidationError(
            f"Invalid fields: {', '.join(invalid)}",
            details={"invalid_fields": invalid},
        )
