import os

import uvicorn

if __name__ == "__main__":
    host = os.environ.get("SCANCORE_HOST", "0.0.0.0")
    port = int(os.environ.get("SCANCORE_PORT", "8000"))

    print("Starting Scan Core API Server...")
    print(f"Docs available at: http://localhost:{port}/docs")

    uvicorn.run(
        "scancore.api.server:app",
        host=host,
        port=port,
        reload=os.environ.get("SCANCORE_RELOAD", "") == "1"
    )
