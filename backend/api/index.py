"""
Vercel Serverless Entry Point for the Split visibility API
Using Mangum for ASGI to AWS Lambda adapter
"""
import os
import sys

# Serverless runtimes start in backend/api; the app package lives one level up
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mangum import Mangum  # noqa: E402

from app.main import app  # noqa: E402

# Pools are created lazily per invocation, so no startup/shutdown hooks
handler = Mangum(app, lifespan="off")
