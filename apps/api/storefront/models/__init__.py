# Import SQLAlchemy models so they register on Base.metadata
from storefront.models.cart_item import CartItem  # noqa: F401
from storefront.models.inquiry import Inquiry  # noqa: F401
from storefront.models.order import Order, OrderItem, OrderStatus  # noqa: F401
from storefront.models.order_tracking import OrderTrackingEntry  # noqa: F401
from storefront.models.product import Product  # noqa: F401
from storefront.models.user import User, UserRole  # noqa: F401
