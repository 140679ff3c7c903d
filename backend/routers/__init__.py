"""HTTP routers, mounted under /api by main.py."""
