# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (MS SQL Server by default, any SQLAlchemy URL via DATABASE_URL)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @app.get("/leases/{lease_id}/payments")
     def list_payments(lease_id: int, db: Session = Depends(get_session)):
          return db.query(Payment).filter(Payment.lease_id == lease_id).all()
     """
import logging
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
     """
     Create the SQLAlchemy engine for the given URL.

     Server databases get a bounded QueuePool; SQLite (local runs, tests)
     keeps SQLAlchemy's default pool.
     """
     echo = settings.SQL_ECHO  # Log SQL if SQL_ECHO=true
     if url.startswith("sqlite"):
          return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
     return create_engine(
          url,
          poolclass=QueuePool,
          pool_size=settings.DB_POOL_SIZE,
          max_overflow=settings.DB_MAX_OVERFLOW,
          pool_timeout=settings.DB_POOL_TIMEOUT,
          pool_recycle=settings.DB_POOL_RECYCLE,
          pool_pre_ping=True,
          echo=echo,
     )


# Create SQLAlchemy engine
engine = build_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Usage:
          @app.get("/items")
          def get_items(db: Session = Depends(get_session)):
               return db.query(Item).all()

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError as e:
          logger.error("Database connection failed: %s", e)
          return False
