# octogrbl/routers/driver.py
from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict

from ..dependencies import get_driver
from ..driver import OctoPrintGrblDriver
from ..errors import ConfigError, PropertyError
from ..models import PropertyValuePayload

router = APIRouter(
    prefix="/api/driver",
    tags=["driver"],
)

@router.get("")
async def driver_info(driver: OctoPrintGrblDriver = Depends(get_driver)) -> Dict[str, Any]:
    """Model name, pinned upload method and the property keys the host may edit."""
    return {
        "model": driver.MODEL_NAME,
        "upload_method": driver.upload_method,
        "keys": driver.get_property_keys(),
    }

@router.get("/properties")
async def list_properties(driver: OctoPrintGrblDriver = Depends(get_driver)) -> Dict[str, Dict[str, Any]]:
    return {"properties": driver.get_properties()}

@router.get("/properties/{name}")
async def get_property(name: str, driver: OctoPrintGrblDriver = Depends(get_driver)) -> Dict[str, Any]:
    try:
        return {"name": name, "value": driver.get_property(name)}
    except PropertyError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.put("/properties/{name}")
async def set_property(
    name: str, payload: PropertyValuePayload, driver: OctoPrintGrblDriver = Depends(get_driver)
) -> Dict[str, Any]:
    try:
        driver.set_property(name, payload.value)
    except PropertyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "name": name, "value": driver.get_property(name)}
