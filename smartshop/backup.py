"""
Backup export and wholesale restore of the catalog and ledger.
"""
import json
import platform
from datetime import date
from typing import Union

from pydantic import ValidationError

from smartshop.core.exceptions import MalformedBackupFile, RestoreNotConfirmed
from smartshop.logging_config import get_logger
from smartshop.schemas.backup import BackupSnapshot
from smartshop.utils import now_millis

logger = get_logger("backup")


def backup_filename(day: date | None = None) -> str:
    day = day or date.today()
    return f"SmartShop_Data_{day.isoformat()}.json"


async def export_snapshot(ctx) -> BackupSnapshot:
    products = await ctx.catalog.get_all()
    sales = await ctx.ledger.get_all()
    return BackupSnapshot(
        version=ctx.settings.backup_version,
        timestamp=now_millis(),
        device_name=platform.node()[:50] or None,
        products=products,
        sales=sales
    )


def serialize_snapshot(snapshot: BackupSnapshot) -> str:
    """Pretty-printed JSON, readable by people and by `parse_backup`."""
    return json.dumps(snapshot.to_document(), ensure_ascii=False, indent=2)


def parse_backup(raw: Union[str, bytes]) -> BackupSnapshot:
    """
    Parse an uploaded backup document.

    The document must be a JSON object holding `products` and `sales`
    lists of valid records. `version` and `timestamp` are filled in
    when an older export left them out.
    """
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedBackupFile("not valid JSON") from e

    if not isinstance(data, dict):
        raise MalformedBackupFile("top-level value must be an object")

    missing = [key for key in ("products", "sales") if key not in data]
    if missing:
        raise MalformedBackupFile(f"missing field(s): {', '.join(missing)}")

    data.setdefault("version", "unknown")
    data.setdefault("timestamp", 0)
    data["version"] = str(data["version"])

    try:
        return BackupSnapshot.model_validate(data)
    except ValidationError as e:
        errors = [
            {"field": " -> ".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise MalformedBackupFile("invalid records", errors) from e


async def restore_snapshot(ctx, snapshot: BackupSnapshot, confirmed: bool = False) -> None:
    """Replace the catalog and ledger with the snapshot. Destructive; needs confirmation."""
    if not confirmed:
        raise RestoreNotConfirmed()

    async with ctx.sale_lock:
        await ctx.catalog.replace_all(snapshot.products)
        await ctx.ledger.replace_all(snapshot.sales)

    logger.info(
        f"[RESTORE] Replaced data with backup v{snapshot.version}: "
        f"{len(snapshot.products)} products, {len(snapshot.sales)} sales"
    )
