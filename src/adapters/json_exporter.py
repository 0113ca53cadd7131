"""JSON export of carrier responses.

Why JSON:
- Interoperability with other tools and pipelines.
- Keeps the parsed reply (and raw XML) around without re-querying the
  gateway.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import Response


def export_response_json(*, response: Response, output_path: Path, include_xml: bool = True) -> Path:
    """Export any `Response` to UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    exclude = None if include_xml else {"xml", "request"}
    payload = response.model_dump(mode="json", exclude=exclude)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
