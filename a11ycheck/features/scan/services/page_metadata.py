from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from a11ycheck.platform.config import settings
from a11ycheck.platform.logger import get_logger

logger = get_logger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; A11yCheckBot/1.0; +https://a11ycheck.vercel.app)"


@dataclass
class PageMetadata:
    title: Optional[str] = None
    description: Optional[str] = None


def extract_metadata(html: str) -> PageMetadata:
    soup = BeautifulSoup(html, "html.parser")

    title = None
    if soup.title and soup.title.string:
        title = soup.title.string.strip() or None

    description = None
    tag = soup.find("meta", attrs={"name": lambda v: v and v.lower() == "description"})
    if tag and tag.get("content"):
        description = tag["content"].strip() or None

    return PageMetadata(title=title, description=description)


async def fetch_page_metadata(url: str) -> PageMetadata:
    """
    Best-effort title/description lookup from the raw page markup.
    Never raises: any failure yields an empty PageMetadata.
    """
    try:
        async with httpx.AsyncClient(
            timeout=settings.PAGE_FETCH_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return extract_metadata(response.text)
    except Exception as e:
        logger.warning(f"Could not extract page metadata for {url}: {e}")
        return PageMetadata()
