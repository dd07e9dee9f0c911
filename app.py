"""Development entry point: ``python app.py``.

For production run a WSGI server against ``app:app``.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from config import load_settings

from hrms_lite.main import create_app

app = create_app()

if __name__ == "__main__":
    settings = load_settings()
    app.run(host="0.0.0.0", port=int(getattr(settings, "PORT", 5001)), debug=bool(getattr(settings, "DEBUG", False)))
