"""Run the AI gateway service under uvicorn."""
from __future__ import annotations
import argparse
import os

import uvicorn

def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the PT Flow AI endpoints")
    ap.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    ap.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    ap.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = ap.parse_args()

    uvicorn.run(
        "ptflow_ai.serve.fastapi_app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )

if __name__ == "__main__":
    main()
