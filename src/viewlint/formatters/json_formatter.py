"""JSON formatter for viewlint."""

import json
from typing import Optional

from .base import BaseFormatter, Result


class JsonFormatter(BaseFormatter):
    """Render results as JSON."""

    def format(self, result: Result, source: Optional[str] = None) -> str:
        data = result.to_dict()
        if source is not None:
            data = {"source": source, **data}
        return json.dumps(data, indent=2)
