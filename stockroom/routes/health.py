from fastapi import APIRouter
from sqlalchemy import text

from stockroom.database import async_session

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "Stockroom"}


@router.get("/health/db")
async def database_health():
    """Check database connectivity and tables"""
    try:
        async with async_session() as session:
            await session.execute(text("SELECT 1"))
            tables_result = await session.execute(
                text("SELECT table_name FROM information_schema.tables WHERE table_schema = 'public' ORDER BY table_name")
            )
            tables = [row[0] for row in tables_result]

            return {
                "status": "healthy",
                "database": "connected",
                "tables_count": len(tables),
                "tables": tables
            }
    except Exception as e:
        return {
            "status": "unhealthy",
            "database": "error",
            "error": str(e)
        }
