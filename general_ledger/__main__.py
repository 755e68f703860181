"""
Server entry point.

Usage:
    python -m general_ledger
"""

import uvicorn

from general_ledger.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "general_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
