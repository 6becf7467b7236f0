from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.server.db.session import init_db
from src.server.settings.config import settings
from src.server.settings.log import configure_logging
from src.server.api import system, products, clients, transactions, quotes, dashboard, exports

log = logging.getLogger("lagerkoll.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    log.info("Initierar databasen (%s)...", settings.environment)
    init_db()
    yield
    log.info("Avslutar appen...")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS – så frontenden kan prata med backend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers – system först (innehåller /health och /__debug/routes)
app.include_router(system.router)
app.include_router(products.router)        # /products..., kräver API-nyckel
app.include_router(clients.router)         # /clients...
app.include_router(transactions.router)    # /transactions...
app.include_router(quotes.router)          # /quotes..., inkl. /convert och /whatsapp
app.include_router(dashboard.router)       # /dashboard
app.include_router(exports.router)         # /exports/{kind}, xlsx
