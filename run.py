#!/usr/bin/env python3
"""
Run script for the Access Log Analytics backend
"""
import uvicorn

from accesslog.config.settings import settings
from accesslog.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
