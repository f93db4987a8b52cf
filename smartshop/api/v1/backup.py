"""
Backup download and restore endpoints.
"""
from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from smartshop.api.v1.deps import get_context
from smartshop.backup import backup_filename, export_snapshot, parse_backup, restore_snapshot, serialize_snapshot
from smartshop.context import AppContext
from smartshop.schemas.backup import RestoreResponse

router = APIRouter(prefix="/backup", tags=["Backup"])


@router.get("")
async def download_backup(ctx: AppContext = Depends(get_context)):
    """Download all products and sales as a JSON file."""
    snapshot = await export_snapshot(ctx)
    return Response(
        content=serialize_snapshot(snapshot),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{backup_filename()}"'}
    )


@router.post("/restore", response_model=RestoreResponse)
async def restore_backup(
    file: UploadFile = File(...),
    confirm: bool = Query(False, description="Must be true: current data is overwritten"),
    ctx: AppContext = Depends(get_context)
):
    """
    Replace all products and sales with an uploaded backup.

    The file is validated before anything changes.
    """
    snapshot = parse_backup(await file.read())
    await restore_snapshot(ctx, snapshot, confirmed=confirm)
    return RestoreResponse(products=len(snapshot.products), sales=len(snapshot.sales))
