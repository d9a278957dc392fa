# backend/models/__init__.py
from models.product import Product
from models.discount import Discount
from models.best_selling import BestSellingProduct
from models.log import Log
