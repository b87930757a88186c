#!/usr/bin/env python3
"""
API server launcher script.

Starts uvicorn on the teamprio FastAPI app.
"""

import os

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "teamprio.api:app",
        host=os.environ.get("TEAMPRIO_HOST", "127.0.0.1"),
        port=int(os.environ.get("TEAMPRIO_PORT", "8000")),
        reload=os.environ.get("TEAMPRIO_RELOAD", "").lower() in ("true", "1", "yes"),
    )
