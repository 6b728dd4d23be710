import logging
import re

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
_WHITESPACE_RE = re.compile(r"\s+")


class WebPageFetcher:
    def __init__(self,
                 timeout: float = 10.0,
                 verify_ssl: bool = True,
                 total_retries: int = 2,
                 backoff_factor: float = 0.5,
                 status_forcelist: tuple = (429, 500, 502, 503, 504)):
        """
        Initializes a requests.Session with a browser-like user agent and
        an HTTPAdapter retrying connection errors and transient statuses.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.session = requests.Session()

        retry_strategy = Retry(
            total=total_retries,
            connect=total_retries,
            read=total_retries,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist,
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        self.session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
        })

    def fetch_html(self, url: str) -> str:
        """
        Download a page.

        Raises:
            requests.HTTPError: For 4xx/5xx HTTP status codes
            ValueError: If the response is not HTML
        """
        resp = self.session.get(url, timeout=self.timeout, verify=self.verify_ssl)
        try:
            resp.raise_for_status()
        except requests.HTTPError:
            logger.error(f"HTTP {resp.status_code} error for {url}")
            raise

        content_type = resp.headers.get("Content-Type", "")
        if "html" not in content_type.lower():
            raise ValueError(f"Unsupported content type for {url}: {content_type or 'unknown'}")
        return resp.text


def extract_page_text(document: str, max_chars: int = 5000) -> str:
    """
    Reduce an HTML document to title, meta description and visible text.

    Scripts, styles and other non-visible nodes are dropped and whitespace
    is collapsed. Output is truncated to ``max_chars``.
    """
    if not document or not document.strip():
        return ""
    soup = BeautifulSoup(document, "lxml")

    for node in soup(["script", "style", "noscript", "template", "svg"]):
        node.decompose()

    parts = []
    title = soup.title.string.strip() if soup.title and soup.title.string else ""
    if title:
        parts.append(f"Title: {title}")

    description = soup.select_one('meta[name="description"]')
    if description and (description.get("content") or "").strip():
        parts.append(f"Description: {description['content'].strip()}")

    root = soup.body or soup
    text = _WHITESPACE_RE.sub(" ", root.get_text(separator=" ", strip=True)).strip()
    if text:
        parts.append(text)

    return "\n".join(parts)[:max_chars]


def fetch_web_page_content(url: str, fetcher: WebPageFetcher, max_chars: int = 5000) -> str:
    """Fetch ``url`` and return its readable text content."""
    logger.debug(f"Fetching page content from {url}")
    document = fetcher.fetch_html(url)
    content = extract_page_text(document, max_chars=max_chars)
    logger.info(f"Fetched {len(content)} characters of content from {url}")
    return content
