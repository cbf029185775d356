from typing import Optional

from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession

from pdf_share_service import models

async def get_entry(db: AsyncSession, key: str) -> Optional[models.KeyValueEntry]:
    result = await db.execute(select(models.KeyValueEntry).filter(models.KeyValueEntry.key == key))
    return result.scalars().first()

async def get_value(db: AsyncSession, key: str) -> Optional[str]:
    entry = await get_entry(db, key)
    if entry:
        return entry.value
    return None

async def set_value(db: AsyncSession, key: str, value: str) -> models.KeyValueEntry:
    entry = await get_entry(db, key)
    if entry is None:
        entry = models.KeyValueEntry(key=key, value=value)
        db.add(entry)
    else:
        entry.value = value
    await db.commit()
    await db.refresh(entry)
    return entry

async def delete_value(db: AsyncSession, key: str) -> bool:
    entry = await get_entry(db, key)
    if entry is None:
        return False
    await db.delete(entry)
    await db.commit()
    return True
