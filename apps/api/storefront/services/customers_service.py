from decimal import Decimal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from storefront.errors import NotFoundError
from storefront.models.order import Order, OrderStatus
from storefront.models.user import User, UserRole
from storefront.schemas.customer import CustomerSummary

USER_NOT_FOUND = "User not found"


def require_user(db: Session, user_id: str) -> User:
    """Tokens come from an outside issuer; the subject may have no account here."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def list_customers(db: Session) -> list[CustomerSummary]:
    """Customers with their order count and spend on non-cancelled orders."""
    spent = func.coalesce(
        func.sum(
            case(
                (Order.status != OrderStatus.CANCELLED.value, Order.total_amount),
                else_=0,
            )
        ),
        0,
    )
    stmt = (
        select(User, func.count(Order.id).label("order_count"), spent.label("total_spent"))
        .outerjoin(Order, Order.user_id == User.id)
        .where(User.role == UserRole.CUSTOMER.value)
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id)
    )

    customers: list[CustomerSummary] = []
    for user, order_count, total_spent in db.execute(stmt):
        customers.append(
            CustomerSummary(
                id=user.id,
                name=user.name,
                email=user.email,
                phone=user.phone,
                created_at=user.created_at,
                order_count=order_count,
                total_spent=Decimal(str(total_spent)).quantize(Decimal("0.01")),
            )
        )
    return customers
