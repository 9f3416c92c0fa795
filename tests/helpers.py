"""Shared test data and event builders."""

import json
from typing import Any

JANE_TEXT = "Jane is a 29-year-old analytical data scientist who loves hiking and chess."

JANE_EXTRACTION: dict[str, Any] = {
    "name": "Jane",
    "age": 29,
    "occupation": "Data scientist",
    "background": "Analytical data scientist who spends weekends outdoors.",
    "traits": ["analytical", "curious", "patient"],
    "interests": ["hiking", "chess"],
    "skills": ["statistics", "python"],
    "values": ["honesty", "growth"],
    "communication_style": None,
    "personality_type": None,
    "goals": [],
    "challenges": [],
    "relationships": [],
}

MINIMAL_PERSONA: dict[str, Any] = {
    "background": "x",
    "traits": [],
    "interests": [],
    "skills": [],
    "values": [],
    "goals": [],
    "challenges": [],
    "relationships": [],
}


class FakeExtractor:
    """Extraction collaborator returning a canned result (or raising)."""

    def __init__(self, result: Any = None, error: Exception | None = None):
        self.result = JANE_EXTRACTION if result is None else result
        self.error = error
        self.calls: list[tuple[list[str], list[str]]] = []

    async def extract(self, text_blocks: list[str], links: list[str]) -> Any:
        self.calls.append((text_blocks, links))
        if self.error is not None:
            raise self.error
        return dict(self.result) if isinstance(self.result, dict) else self.result


def make_event(
    method: str = "GET",
    path: str = "/",
    query: str = "",
    body: Any = None,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Netlify-style event; non-string bodies are JSON encoded."""
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    return {
        "httpMethod": method,
        "path": path,
        "rawQuery": query,
        "headers": headers if headers is not None else {"content-type": "application/json"},
        "body": body,
        "isBase64Encoded": False,
    }


def reply_json(reply: dict[str, Any]) -> Any:
    return json.loads(reply["body"])
