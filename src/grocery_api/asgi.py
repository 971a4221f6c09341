from __future__ import annotations

from grocery_api.bootstrap import build_app

app = build_app()
