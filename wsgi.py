# wsgi.py (at repo root)
from couples_dashboard import create_app

app = create_app()
