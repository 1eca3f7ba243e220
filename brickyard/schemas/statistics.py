from typing import List

from .bricks import Brick
from .common import ApiModel


class Statistics(ApiModel):
    total_bricks: int
    available_tractors: int
    active_laborers: int
    pending_orders: int
    total_sales: float
    low_stock_bricks: List[Brick]
