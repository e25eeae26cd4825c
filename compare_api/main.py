"""Main entry point for the comparison API.

Usage:
    Development: APP_ENV=development uvicorn compare_api.main:app --reload --port 8000
    Production: uvicorn compare_api.main:app --host 0.0.0.0 --port 8000

Rate limit state is per process, so run a single worker.
"""

from compare_api.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "compare_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
