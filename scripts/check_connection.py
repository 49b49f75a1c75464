"""
Check that the configured database is reachable and report table sizes.

    python -m scripts.check_connection [--create-tables]
"""
import argparse
import asyncio
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import func, select

from app.core.config import settings
from app.core.exceptions import DatabaseConnectionError
from app.db.models import Appointment, Clinic, Doctor, Invoice, Patient, User
from app.db.pool import ConnectionPool, PoolConfig
from app.db.session import create_db_and_tables

TABLES = {
    "users": User,
    "doctors": Doctor,
    "patients": Patient,
    "appointments": Appointment,
    "clinics": Clinic,
    "invoices": Invoice,
}

async def count_rows(pool: ConnectionPool) -> dict:
    counts = {}
    async with pool.lease() as lease:
        for name, model in TABLES.items():
            result = await lease.connection.execute(select(func.count()).select_from(model))
            counts[name] = result.scalar()
    return counts

async def main(create_tables: bool = False) -> int:
    config = PoolConfig.from_settings(settings)
    print("Database configuration:")
    for key, value in config.describe().items():
        print(f"  {key}: {value}")
    print(f"  pool capacity: {config.capacity}")

    pool = ConnectionPool.open(config)
    try:
        if create_tables:
            await create_db_and_tables(pool)
            print("Tables created (existing tables left untouched)")
        counts = await count_rows(pool)
    except DatabaseConnectionError as exc:
        print(f"Connection failed: {exc.message} ({exc.context.get('reason')})", file=sys.stderr)
        return 1
    except SQLAlchemyError as exc:
        print(f"Query failed, are the tables created? {exc}", file=sys.stderr)
        return 1
    finally:
        await pool.close_all()

    print("Row counts:")
    for name, count in counts.items():
        print(f"  {name}: {count}")
    return 0

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--create-tables", action="store_true", help="create missing tables first")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(create_tables=args.create_tables)))
