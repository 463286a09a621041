from fastapi import FastAPI, HTTPException, Response
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional

from xerox_billing.config.settings import get_settings
from xerox_billing.exceptions import DuplicatePresetError, InvalidPresetError, PresetNotFoundError
from xerox_billing.logging_config import setup_logging
from xerox_billing.services.export_service import ExportFile, ExportService
from xerox_billing.api.customers_api import router as customers_router
from xerox_billing.api.state import get_session

setup_logging(log_level=get_settings().log_level)

app = FastAPI(
    title="SR XEROX Billing API",
    description="Backend API for the photocopy shop billing calculator",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(customers_router)


class PresetCreate(BaseModel):
    name: str
    pages_per_sheet: int = 1
    price_per_sheet: float = 0.0


class PresetUpdate(BaseModel):
    name: Optional[str] = None
    pages_per_sheet: Optional[int] = None
    price_per_sheet: Optional[float] = None


@app.get("/")
async def root():
    return {"status": "online", "message": f"{get_settings().shop_name} Billing API Active"}


@app.get("/presets")
async def list_presets():
    return jsonable_encoder(list(get_session().catalog))


@app.post("/presets")
async def add_preset(req: PresetCreate):
    try:
        preset = get_session().add_preset(req.name, req.pages_per_sheet, req.price_per_sheet)
        return jsonable_encoder(preset)
    except (DuplicatePresetError, InvalidPresetError) as e:
        raise HTTPException(status_code=400, detail=e.message)


@app.put("/presets/{name:path}")
async def update_preset(name: str, updates: PresetUpdate):
    try:
        preset = get_session().update_preset(name, **updates.model_dump(exclude_unset=True))
        return jsonable_encoder(preset)
    except PresetNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except (DuplicatePresetError, InvalidPresetError) as e:
        raise HTTPException(status_code=400, detail=e.message)


@app.delete("/presets/{name:path}")
async def remove_preset(name: str):
    try:
        get_session().remove_preset(name)
        return {"success": True, "message": f"Preset '{name}' removed"}
    except PresetNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@app.get("/history")
async def get_history():
    """Recorded bills, oldest first."""
    return jsonable_encoder(list(get_session().history))


def _download(export: ExportFile) -> Response:
    return Response(
        content=export.data,
        media_type=export.mime,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@app.get("/export/csv")
async def export_csv():
    return _download(ExportService(get_session()).to_csv())


@app.get("/export/xlsx")
async def export_xlsx():
    return _download(ExportService(get_session()).to_excel())
