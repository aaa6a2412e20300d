"""
Run the catalog auth API on the Flask development server: python -m api

Config comes from APP_ENV (dev/test/prod). Production refuses to start
without a real JWT_SECRET; serve create_app() from gunicorn there.
"""
import os

from . import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        host=os.getenv("FLASK_RUN_HOST", "127.0.0.1"),
        port=int(os.getenv("FLASK_RUN_PORT", "8000")),
        debug=app.config.get("DEBUG", False),
    )
