# app/infrastructure/persistence/database.py
import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

from app.domain.errors import StorageUnavailable

load_dotenv()

# Leemos la URL de la base de datos desde el archivo .env
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("No se ha definido DATABASE_URL en el archivo .env")

engine = create_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db() -> None:
    """Crea las tablas que aún no existen."""
    from . import models  # noqa: F401  registra los modelos en Base.metadata
    Base.metadata.create_all(bind=engine)


def get_db():
    """
    Una sesión por petición: commit si el caso de uso terminó bien,
    rollback ante cualquier excepción.
    """
    db_session = SessionLocal()
    try:
        yield db_session
        db_session.commit()
    except OperationalError as e:
        logging.error("Error de base de datos. Iniciando rollback.", exc_info=True)
        db_session.rollback()
        raise StorageUnavailable() from e
    except Exception:
        db_session.rollback()
        raise
    finally:
        db_session.close()
