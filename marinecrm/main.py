import logging

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from marinecrm.core.config import settings
from marinecrm.core.logging_config import setup_logging
from marinecrm.database import engine, Base
from marinecrm.models import *

from marinecrm.routers import auth, users, project, company, estimate
from marinecrm.routers import product_description, quote, files

setup_logging()
logger = logging.getLogger("marinecrm")

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(users.router)
app.include_router(project.router)
app.include_router(company.router)
app.include_router(estimate.router)
app.include_router(product_description.router, prefix="/product-descriptions")
app.include_router(quote.router)
app.include_router(files.router)

@app.on_event("startup")
def create_tables():
    logger.info("Creating database tables if not exist...")
    Base.metadata.create_all(bind=engine)

    from marinecrm.seed.seed_product_descriptions import seed_product_descriptions
    try:
        inserted = seed_product_descriptions()
        logger.info("Product descriptions seeded (%d new).", inserted)
    except Exception:
        logger.warning("Could not seed product descriptions", exc_info=True)

    logger.info("Database ready.")


@app.get("/", response_class=HTMLResponse)
def root():
    return f"""
    <html>
        <head>
            <title>{settings.app_name}</title>
            <style>
                body {{
                    font-family: Arial, sans-serif;
                    background-color: #f9f9f9;
                    display: flex;
                    height: 100vh;
                    justify-content: center;
                    align-items: center;
                }}
                h1 {{
                    color: #2c3e50;
                    font-size: 3em;
                    text-align: center;
                }}
            </style>
        </head>
        <body>
            <h1>{settings.app_name} is running!</h1>
        </body>
    </html>
    """
