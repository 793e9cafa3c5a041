from .auth import router
