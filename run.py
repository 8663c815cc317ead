#!/usr/bin/env python3
"""
Run script for the Briefcast API
"""
import uvicorn

from briefcast.config.settings import settings
from briefcast.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
