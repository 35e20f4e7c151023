"""Vercel serverless entrypoint: POST /api/agape/edit"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from core.http_adapter import make_handler
from core.pipeline import handle_edit

logging.basicConfig(level=logging.INFO)

handler = make_handler(handle_edit)
