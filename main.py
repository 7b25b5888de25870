from fastapi import FastAPI
from dotenv import load_dotenv
from app.logging_config import setup_logging

load_dotenv()
setup_logging()

from app.dependencies import settings
from app.routers import webhook

app = FastAPI()

# Include Routers
app.include_router(webhook.router)

@app.get("/")
def read_root():
    return {"message": "Intercom Auto-Translator is running", "enabled": settings.enabled}
