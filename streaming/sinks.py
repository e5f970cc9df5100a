# streaming/sinks.py
from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional, TextIO


class ConsoleSink:
    """Write every transform output as one JSON document per line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.written = 0

    def __call__(self, outputs: List[Dict[str, Any]]) -> None:
        for out in outputs:
            self.stream.write(json.dumps(out, sort_keys=True) + "\n")
            self.written += 1
        self.stream.flush()
