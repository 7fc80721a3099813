"""Development entry point: ``python app.py`` (after ``pip install -e .``)."""

import os

from staff_attendance.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")))
