"""Transport front-ends: HTTP (FastAPI) and stdio."""
