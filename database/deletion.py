import logging
from typing import Dict, List, NamedTuple

from sqlalchemy import Delete
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

class DeletionStep(NamedTuple):
    name: str
    statement: Delete

async def run_deletion_plan(db: AsyncSession, steps: List[DeletionStep]) -> Dict[str, int]:
    """
    Выполняет массовые удаления строго в заданном порядке: сначала дочерние
    таблицы, затем родительские. Коммит остается за вызывающим кодом.
    """
    counts = {}
    for step in steps:
        result = await db.execute(
            step.statement.execution_options(synchronize_session=False)
        )
        counts[step.name] = result.rowcount
        logger.info(f"Удалено {step.name}={result.rowcount}")
    return counts
