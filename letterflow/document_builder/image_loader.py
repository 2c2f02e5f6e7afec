"""Image Loader Module

Acquires letter imagery (department signature, Canada wordmark) from:
- Base64 data URIs ("data:image/png;base64,...")
- HTTP(S) URLs (fetched with requests)
- Local file paths

Loading runs on a worker thread so the builder can bound the wait; a
timeout is reported the same way as any other load failure.
"""
import base64
import io
import os
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Optional, Tuple

import requests
from PIL import Image as PILImage

from ..config import IMAGE_LOAD_TIMEOUT
from ..exceptions import ImageLoadError
from ..logger import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class LoadedImage:
    """Decoded image bytes with their pixel size.

    Attributes:
        data: Raw encoded image bytes (PNG, JPEG, ...)
        width_px: Pixel width
        height_px: Pixel height
        source: Original reference, for log messages
    """

    data: bytes
    width_px: int
    height_px: int
    source: str = ""

    @property
    def aspect_ratio(self) -> float:
        return self.width_px / self.height_px if self.height_px else 1.0

    def size_for_height(self, height: float) -> Tuple[float, float]:
        """(width, height) scaled to a target height, keeping aspect ratio."""
        return height * self.aspect_ratio, height


class ImageLoader:
    """Loads images from data URIs, URLs or paths with a bounded wait."""

    def __init__(self, timeout: float = IMAGE_LOAD_TIMEOUT, session: Optional[requests.Session] = None):
        """
        Initialize image loader.

        Args:
            timeout: Seconds to wait for any single image
            session: Optional requests session (a new one is created on demand)
        """
        self.timeout = timeout
        self._session = session
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def load(self, source: str) -> LoadedImage:
        """
        Load and decode one image synchronously.

        Args:
            source: Data URI, http(s) URL or filesystem path

        Returns:
            LoadedImage with pixel dimensions

        Raises:
            ImageLoadError: If the image cannot be fetched or decoded
        """
        if not source or not source.strip():
            raise ImageLoadError(str(source), "empty image reference")

        data = self._read_bytes(source.strip())

        try:
            with PILImage.open(io.BytesIO(data)) as img:
                width, height = img.size
        except Exception as e:
            raise ImageLoadError(source, f"not a readable image ({e})") from e

        return LoadedImage(data=data, width_px=width, height_px=height, source=source)

    def _read_bytes(self, source: str) -> bytes:
        if source.startswith("data:"):
            try:
                header, payload = source.split(",", 1)
                if ";base64" in header:
                    return base64.b64decode(payload)
                return payload.encode("utf-8")
            except ValueError as e:
                raise ImageLoadError(source, f"malformed data URI ({e})") from e

        if source.startswith(("http://", "https://")):
            try:
                response = self.session.get(source, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                raise ImageLoadError(source, str(e)) from e
            return response.content

        path = source[len("file://"):] if source.startswith("file://") else source
        if not os.path.exists(path):
            raise ImageLoadError(source, "file not found")
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise ImageLoadError(source, str(e)) from e

    def load_async(self, source: str) -> Future:
        """Start loading an image on a worker thread."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="letterflow-image")
        return self._executor.submit(self.load, source)

    def resolve(self, future: Future, source: str) -> LoadedImage:
        """
        Wait for a pending load, treating a timeout as a load failure.

        Raises:
            ImageLoadError: If loading failed or exceeded the timeout
        """
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError:
            future.cancel()
            raise ImageLoadError(source, f"timed out after {self.timeout:g}s") from None

    def close(self):
        """Release the worker thread without waiting for abandoned loads."""
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
