import uuid

PRODUCT_ID_PREFIX = "PRD-"
ORDER_ID_PREFIX = "ORD-"
INQUIRY_ID_PREFIX = "INQ-"


def _new_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex.upper()}"


def new_product_id() -> str:
    return _new_id(PRODUCT_ID_PREFIX)


def new_order_id() -> str:
    return _new_id(ORDER_ID_PREFIX)


def new_inquiry_id() -> str:
    return _new_id(INQUIRY_ID_PREFIX)
