from .orders import router as orders_router
from .callbacks import router as callbacks_router
