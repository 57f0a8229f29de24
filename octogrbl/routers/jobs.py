# octogrbl/routers/jobs.py
import logging
import httpx
from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict

from ..dependencies import get_driver, get_http_client
from ..driver import OctoPrintGrblDriver
from ..errors import EmitError, UploadError
from ..models import JobPayload
from ..utils import ensure_extension, make_safe_filename

router = APIRouter(
    prefix="/api/jobs",
    tags=["jobs"],
)

def _job_filename(payload: JobPayload, driver: OctoPrintGrblDriver) -> str:
    return ensure_extension(make_safe_filename(payload.filename), driver.config.file_extension)

@router.post("/preview")
async def preview_job(payload: JobPayload, driver: OctoPrintGrblDriver = Depends(get_driver)) -> Dict[str, Any]:
    """Renders the program the job would upload, without contacting the print host."""
    job_driver = driver.clone()
    filename = _job_filename(payload, job_driver)
    try:
        job = job_driver.build_job(payload.operations, payload.resolution, filename)
    except EmitError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"filename": job.filename, "gcode": job.gcode}

@router.post("")
async def submit_job(
    payload: JobPayload,
    driver: OctoPrintGrblDriver = Depends(get_driver),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Dict[str, Any]:
    """Renders the job on a snapshot of the driver and uploads it to the print host."""
    job_driver = driver.clone()
    filename = _job_filename(payload, job_driver)
    if payload.resolution not in job_driver.config.resolutions:
        logging.warning(f"Job {filename} uses {payload.resolution:g} dpi, not among the supported resolutions")
    try:
        job = await job_driver.send_job(client, payload.operations, payload.resolution, filename)
    except UploadError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except EmitError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "filename": job.filename, "size": job.size}
