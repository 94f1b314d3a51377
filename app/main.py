"""
Punto de entrada de la API de reservas.
    uvicorn app.main:app --reload
"""

import uvicorn

from app import create_app

app = create_app()


@app.get("/", tags=["health"])
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="127.0.0.1", port=8000, reload=True)
