"""Layer 1: Prompt Building - requirements to section prompts.

# Note: 순환 참조를 피하기 위해 이 패키지는 하위 모듈을 미리 import 하지 않습니다.
# Use: from app.layers.layer1_prompts.prompt_builder import build_prompt
# Use: from app.layers.layer1_prompts.section_registry import get_section_spec
"""
