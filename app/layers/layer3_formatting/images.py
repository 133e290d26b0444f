"""Markdown image to captioned figure conversion."""

import html
import re

# ![대체 텍스트](주소 "선택적 제목")
IMAGE_PATTERN = re.compile(r'!\[(?P<alt>[^\]]*)\]\((?P<url>[^)\s]+)(?:\s+"[^"]*")?\)')
IMAGE_LINE_PATTERN = re.compile(r'^\s*!\[(?P<alt>[^\]]*)\]\((?P<url>[^)\s]+)(?:\s+"[^"]*")?\)\s*$')


def render_figure_html(alt: str, url: str) -> str:
    """대체 텍스트를 캡션으로 쓰는 figure 블록. 대체 텍스트는 HTML 이스케이프됩니다."""
    safe_alt = html.escape(alt)
    safe_url = html.escape(url, quote=True)
    caption = f"<figcaption>{safe_alt}</figcaption>" if safe_alt else ""
    return (
        f'<figure class="proposal-figure">'
        f'<img src="{safe_url}" alt="{safe_alt}" />'
        f"{caption}</figure>"
    )


def convert_markdown_images(content: str) -> str:
    """본문의 마크다운 이미지를 figure 블록으로 치환합니다."""
    if not content:
        return content
    return IMAGE_PATTERN.sub(lambda m: render_figure_html(m.group("alt"), m.group("url")), content)
