# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# --- CONFIGURACIÓN GENERAL ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Orígenes permitidos para el frontend (separados por coma)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

# --- CONFIGURACIÓN DE FACTURAS ---
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
DEFAULT_CURRENCY = "UAH"
