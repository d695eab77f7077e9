# Name: __init__.py
# Description: Export all routers for convenient importing
# Date: 2026-10-07

from mailscan.routers.scan_router import router as scan_router

__all__ = ["scan_router"]
