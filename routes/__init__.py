"""One APIRouter per resource, mounted under /api by ``main.create_app``."""
