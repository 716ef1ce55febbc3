import uvicorn
import os

if __name__ == "__main__":
    # Disable reload in production
    reload = os.getenv("ENVIRONMENT") != "production"

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=reload,
        timeout_keep_alive=75,
        timeout_graceful_shutdown=30
    )
