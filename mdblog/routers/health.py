from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mdblog import dependencies as deps
from mdblog.services.health_service import HealthService

router = APIRouter()


@router.get("/health")
def health(service: HealthService = Depends(deps.get_health_service)):
    report = service.check()
    status_code = 503 if report.status == "unhealthy" else 200
    return JSONResponse(status_code=status_code, content=report.model_dump())
