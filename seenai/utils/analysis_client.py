import logging
from typing import Any, Optional

import requests

from seenai.errors import AnalysisServiceError

logger = logging.getLogger(__name__)


def analyze_video(
    base_url: str,
    data: bytes,
    file_name: Optional[str] = None,
    content_type: Optional[str] = None,
    timeout: int = 120,
) -> dict[str, Any]:
    """
    Sends a video to the remote analysis service and returns its JSON result.

    The file goes in the multipart field `video`. Any non-2xx answer, network
    failure or non-object body raises AnalysisServiceError; nothing is retried.
    """
    url = f"{base_url.rstrip('/')}/analyze"
    files = {"video": (file_name or "video", data, content_type or "application/octet-stream")}

    try:
        resp = requests.post(url, files=files, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Analysis service unreachable at {url}: {e}")
        raise AnalysisServiceError("Failed to analyze video") from e

    if not resp.ok:
        logger.error(f"Analysis service returned {resp.status_code}: {resp.text[:200]}")
        raise AnalysisServiceError("Failed to analyze video")

    try:
        result = resp.json()
    except ValueError as e:
        logger.error(f"Analysis service returned invalid JSON: {e}")
        raise AnalysisServiceError("Failed to analyze video") from e

    if not isinstance(result, dict):
        logger.error(f"Analysis service returned {type(result).__name__}, expected an object")
        raise AnalysisServiceError("Failed to analyze video")

    return result
