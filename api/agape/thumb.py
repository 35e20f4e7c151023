"""Vercel serverless entrypoint: GET /api/agape/thumb?src=<url>"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from core.http_adapter import make_handler
from core.relay import handle_thumb

logging.basicConfig(level=logging.INFO)

handler = make_handler(handle_thumb)
