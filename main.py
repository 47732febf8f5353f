# main.py

import logging
import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

# .env must be loaded before the routers read their settings
load_dotenv()

from app.middleware.request_logging import RequestLoggingMiddleware  # noqa: E402
from app.routers.email_router import router as email_router  # noqa: E402
from app.routers.upload_router import router as upload_router  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(
    title="CRM Intake API",
    description="Resume contact extraction for customer creation: regex heuristics reconciled with an LLM.",
    version="1.0.0",
)

# CORS for the CRM frontend
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

_frontend_env = os.getenv("FRONTEND_BASE_URL")
if _frontend_env and _frontend_env not in origins:
    origins.append(_frontend_env)

# extra origins from env (comma-separated), optional
_extra = os.getenv("CORS_EXTRA_ORIGINS", "")
if _extra:
    for o in [x.strip() for x in _extra.split(",") if x.strip()]:
        if o not in origins:
            origins.append(o)

_allow_all = os.getenv("CORS_ALLOW_ALL", "0").strip().lower() in {"1", "true", "yes", "on"}
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if _allow_all else origins,
    allow_credentials=not _allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(upload_router, prefix="/upload")
app.include_router(email_router, prefix="/email")


@app.get("/healthz")
async def healthz():
    return JSONResponse({"status": "ok", "service": "crm-intake"})


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 10000))
    uvicorn.run("main:app", host="0.0.0.0", port=port)
