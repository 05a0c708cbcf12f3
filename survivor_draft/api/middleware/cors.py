"""
Cross-origin access for the draft admin UI.

The commissioner's browser UI runs on its own origin and drives the API
with GET/POST/PUT/PATCH/DELETE; only origins from CORS_ORIGINS (or the
local dev server) may do so.
"""

from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

LOCAL_ADMIN_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

# Verbs used by the season, roster and draft routes
ADMIN_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def setup_cors(app: FastAPI, allowed_origins: Optional[List[str]] = None):
    """
    Let the admin UI call the API from the browser.

    Args:
        app: Application to attach the middleware to
        allowed_origins: Admin UI origins; the local dev server when empty
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or LOCAL_ADMIN_ORIGINS,
        allow_credentials=True,
        allow_methods=ADMIN_METHODS,
        allow_headers=["Content-Type", "Authorization"],
        # the UI shows request timings from the timing middleware
        expose_headers=["X-Process-Time"],
    )
