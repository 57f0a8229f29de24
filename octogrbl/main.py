# octogrbl/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, RedirectResponse

from . import __version__
from .logging_config import setup_logging
from .dependencies import lifespan
from .routers import driver, jobs

setup_logging()

app = FastAPI(title="OctoPrint Grbl Driver", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(driver.router)
app.include_router(jobs.router)

@app.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/docs", status_code=307)

@app.get("/__routes", response_class=PlainTextResponse, include_in_schema=False)
def list_routes() -> PlainTextResponse:
    lines = []
    for route in app.routes:
        methods = ",".join(route.methods) if hasattr(route, "methods") else ""
        lines.append(f"{methods:<8} {route.path}")
    return PlainTextResponse("\n".join(sorted(lines)))
