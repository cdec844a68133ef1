"""Example provider backed by a JSON HTTP service."""

from __future__ import annotations

import json
from http.client import HTTPException
from typing import List
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..logging import get_logger
from ..models import Example
from .base import ExampleProvider


class HttpExampleProvider(ExampleProvider):
    """Fetches ``GET <base_url>/examples/<namespace>/<name>``.

    The service answers with ``{"examples": [{"body": "..."}, ...]}`` (a bare
    list is accepted too). Missing symbols, network failures and malformed
    payloads all yield no examples; they are logged rather than raised.
    """

    def __init__(self, base_url: str, *, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = get_logger("examples.http")

    def endpoint(self, namespace: str, name: str) -> str:
        return f"{self.base_url}/examples/{quote(namespace, safe='')}/{quote(name, safe='')}"

    def examples_for(self, namespace: str, name: str) -> List[Example]:
        url = self.endpoint(namespace, name)
        request = Request(url, headers={"Accept": "application/json"}, method="GET")
        try:
            with urlopen(request, timeout=self.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            if exc.code != 404:
                self.logger.warning("Example service returned %s for %s/%s", exc.code, namespace, name)
            return []
        except URLError as exc:
            self.logger.warning("Example service unreachable for %s/%s: %s", namespace, name, exc.reason)
            return []
        except (OSError, HTTPException) as exc:
            self.logger.warning("Example service failed for %s/%s: %r", namespace, name, exc)
            return []

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            self.logger.warning("Example service returned invalid JSON for %s/%s", namespace, name)
            return []
        return self._extract_examples(payload, url)

    @staticmethod
    def _extract_examples(payload: object, url: str) -> List[Example]:
        items = payload.get("examples") if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            return []
        examples: List[Example] = []
        for item in items:
            body = item.get("body") if isinstance(item, dict) else item
            if isinstance(body, str) and body.strip():
                examples.append(Example(body=body, source=url))
        return examples


__all__ = ["HttpExampleProvider"]
