import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bizops.api.deps import get_db
from bizops.api.v1.clients import router as clients_router
from bizops.api.v1.inventory import router as inventory_router
from bizops.api.v1.invoices import router as invoices_router
from bizops.api.v1.orders import router as orders_router
from bizops.api.v1.reports import router as reports_router
from bizops.api.v1.users import router as users_router
from bizops.core.config import API_PREFIX, LOG_LEVEL, PORT, PROJECT_NAME, VERSION
from bizops.core.db import ConnectionManager
from bizops.core.exception_handlers import setup_exception_handlers

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("bizops")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    db = ConnectionManager()
    app.state.db = db
    # Connects in the background; /health reports progress
    await db.start()
    yield
    await db.close()
    log.info(f"{PROJECT_NAME} stopped.")


app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers for modular API structure
app.include_router(users_router, prefix=API_PREFIX, tags=["Users"])
app.include_router(inventory_router, prefix=f"{API_PREFIX}/inventory", tags=["Inventory"])
app.include_router(orders_router, prefix=f"{API_PREFIX}/orders", tags=["Orders"])
app.include_router(clients_router, prefix=f"{API_PREFIX}/clients", tags=["Clients"])
app.include_router(invoices_router, prefix=f"{API_PREFIX}/invoices", tags=["Invoices"])
app.include_router(reports_router, prefix=f"{API_PREFIX}/reports", tags=["Reports"])

setup_exception_handlers(app)


@app.get("/health")
async def health_check(db: ConnectionManager = Depends(get_db)):
    """Reports the database connection state; 503 while it is not connected."""
    code = status.HTTP_200_OK if db.is_connected else status.HTTP_503_SERVICE_UNAVAILABLE
    body = {
        "status": "ok" if db.is_connected else "degraded",
        "app_name": PROJECT_NAME,
        "database": db.health(),
    }
    return JSONResponse(status_code=code, content=body)


if __name__ == "__main__":
    uvicorn.run("bizops.main:app", host="0.0.0.0", port=PORT)
