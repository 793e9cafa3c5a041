from .categories import router
