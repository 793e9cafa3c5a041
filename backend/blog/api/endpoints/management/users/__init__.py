from .users import router
