from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

import requests

from .exceptions import PublishError

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"


class WebhookPublisher:
    """
    POST a digest to a webhook.

    A `str` payload goes out as plain text, a `dict` as JSON; the
    Content-Type header always matches what is sent.
    """

    def __init__(self, url: str, *, session: Optional[requests.Session] = None, timeout_sec: float = 30.0) -> None:
        self._url = url
        self._session = session or requests.Session()
        self._timeout = timeout_sec

    def publish(self, payload: Union[str, Dict[str, Any]]) -> int:
        if isinstance(payload, str):
            kwargs: Dict[str, Any] = {
                "data": payload.encode("utf-8"),
                "headers": {"Content-Type": TEXT_CONTENT_TYPE},
            }
        else:
            kwargs = {"json": payload, "headers": {"Content-Type": JSON_CONTENT_TYPE}}

        try:
            resp = self._session.post(self._url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise PublishError(f"error sending webhook: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            raise PublishError(
                f"webhook returned status {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        logger.info("Successfully sent news to webhook. Status: %d", resp.status_code)
        return resp.status_code
