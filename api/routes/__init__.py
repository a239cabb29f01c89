"""api/routes/ -- One APIRouter per resource. api/main.py mounts them under /api."""
