from __future__ import annotations  # ASGI entry point: uvicorn api_server:app

from api.app import create_app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
