# FastAPI Application Redirect
# This file redirects to the actual app in the app package

from app.main import app

# Lets uvicorn find the app when started from the repository root:
# uvicorn main:app --host 0.0.0.0 --port 5000
