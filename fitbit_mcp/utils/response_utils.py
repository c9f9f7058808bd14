"""The uniform payload every tool handler returns.

A successful Fitbit call becomes one `TextContent` block whose text is the
raw response body re-serialized as compact JSON. The body is never
reshaped, so clients see exactly what the Web API returned.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Sequence

from mcp.types import TextContent


def to_json_text(data: Any) -> str:
    """Serialize like JavaScript's JSON.stringify: no whitespace, non-ASCII kept."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class ResponseEnvelope:
    content: Sequence[TextContent]

    @property
    def text(self) -> str:
        return self.content[0].text

    def as_dict(self) -> dict[str, Any]:
        return {"content": [block.model_dump(include={"type", "text"}) for block in self.content]}


def text_envelope(data: Any) -> ResponseEnvelope:
    return ResponseEnvelope(content=(TextContent(type="text", text=to_json_text(data)),))
