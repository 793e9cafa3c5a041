from .posts import router
