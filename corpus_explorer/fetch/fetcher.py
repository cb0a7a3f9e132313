"""Rate-limited, sequential document fetching over HTTP or from local files."""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import requests
from bs4 import BeautifulSoup

from ..config import get_data_dir, get_fetch_delay, get_fetch_retries, get_fetch_timeout, get_user_agent
from ..models.document import Document
from ..models.source import SourceDescriptor
from ..pipeline.reader import PDFReadError, read_positioned_words, words_to_text

logger = logging.getLogger(__name__)

# Tags holding scripts or styling, never document text
_NOISE_TAGS = ["script", "style", "noscript"]


class FetchError(Exception):
    """Base exception for fetch errors."""
    pass


class FetchFailure(FetchError):
    """Raised when a document cannot be retrieved or decoded after all attempts."""

    def __init__(self, name: str, message: str):
        super().__init__(f"Failed to fetch {name!r}: {message}")
        self.name = name


def html_to_text(html: str) -> str:
    """Extract paragraph text from an HTML page.

    Paragraph (<p>) texts are joined by newlines; pages without paragraphs fall
    back to the full body text.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()

    paragraphs = [p.get_text(" ", strip=True) for p in soup.find_all("p")]
    paragraphs = [p for p in paragraphs if p]
    if paragraphs:
        return "\n".join(paragraphs)

    body = soup.find("body") or soup
    return body.get_text(" ", strip=True)


class DocumentFetcher:
    """Fetches source documents one at a time with a politeness delay."""

    def __init__(
        self,
        delay_seconds: Optional[float] = None,
        retries: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        local_root: Optional[Path] = None,
    ):
        """Initialize fetcher.

        Args:
            delay_seconds: Minimum gap between two remote requests (default from env, 5s)
            retries: Extra attempts after a failed request (default from env, 1)
            timeout: Per-request timeout in seconds (default from env, 30s)
            session: Optional requests.Session (created if omitted)
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
            local_root: Directory that relative local paths resolve against
                (default from env, the project root)
        """
        self.delay_seconds = get_fetch_delay() if delay_seconds is None else delay_seconds
        self.retries = get_fetch_retries() if retries is None else retries
        self.timeout = get_fetch_timeout() if timeout is None else timeout
        if self.delay_seconds < 0 or self.retries < 0:
            raise ValueError("delay_seconds and retries must be non-negative")

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": get_user_agent()})
        self._sleep = sleep
        self._clock = clock
        self.local_root = Path(local_root) if local_root is not None else get_data_dir()
        self._last_request: Optional[float] = None

    def _wait_for_slot(self) -> None:
        """Block until delay_seconds have passed since the previous remote request."""
        if self._last_request is None:
            return
        remaining = self.delay_seconds - (self._clock() - self._last_request)
        if remaining > 0:
            logger.debug("Waiting %.1fs before next request", remaining)
            self._sleep(remaining)

    def _get(self, descriptor: SourceDescriptor) -> requests.Response:
        """GET descriptor.url, retrying up to self.retries times."""
        attempts = self.retries + 1
        last_error = "unknown error"
        for attempt in range(1, attempts + 1):
            self._wait_for_slot()
            try:
                response = self.session.get(descriptor.url, timeout=self.timeout)
                if response.status_code == 200:
                    return response
                last_error = f"HTTP {response.status_code}"
            except requests.exceptions.Timeout:
                last_error = f"timed out after {self.timeout}s"
            except requests.exceptions.RequestException as e:
                last_error = str(e)
            finally:
                self._last_request = self._clock()

            if attempt < attempts:
                logger.warning(
                    "Fetching %s failed (%s), retrying (%d/%d)",
                    descriptor.name, last_error, attempt, self.retries,
                )

        raise FetchFailure(descriptor.name, last_error)

    def _pdf_text(self, descriptor: SourceDescriptor, source) -> str:
        try:
            words = read_positioned_words(source, descriptor.page_range, descriptor.use_fonts)
        except PDFReadError as e:
            raise FetchFailure(descriptor.name, str(e)) from e
        return words_to_text(words)

    def _fetch_local(self, descriptor: SourceDescriptor) -> str:
        # Relative paths resolve against the data root, absolute paths are kept
        path = self.local_root / descriptor.url
        if not path.is_file():
            raise FetchFailure(descriptor.name, f"file not found: {path}")
        if descriptor.is_pdf:
            return self._pdf_text(descriptor, path)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FetchFailure(descriptor.name, f"cannot read {path}: {e}") from e
        if path.suffix.lower() in (".html", ".htm"):
            return html_to_text(text)
        return text

    def _fetch_remote(self, descriptor: SourceDescriptor) -> str:
        response = self._get(descriptor)
        content_type = response.headers.get("Content-Type", "").lower()
        if descriptor.is_pdf or "application/pdf" in content_type:
            return self._pdf_text(descriptor, response.content)
        if "html" in content_type:
            return html_to_text(response.text)
        return response.text

    def fetch(self, descriptor: SourceDescriptor) -> Document:
        """Fetch one document.

        Raises:
            FetchFailure: If the source is unreachable, answers non-200 after
                the retry, or cannot be decoded
        """
        started = time.time()
        if descriptor.is_remote:
            text = self._fetch_remote(descriptor)
        else:
            text = self._fetch_local(descriptor)
        logger.debug("Fetched %s in %.2fs (%d chars)", descriptor.name, time.time() - started, len(text))

        return Document(
            doc_id=descriptor.name,
            text=text,
            category=descriptor.category,
            source_url=descriptor.url,
        )
