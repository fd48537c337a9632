from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.errors import InternalError
from storefront.models.inquiry import Inquiry
from storefront.observability import log_event
from storefront.schemas.inquiry import InquiryCreate
from storefront.services.ids import new_inquiry_id


def create_inquiry(db: Session, payload: InquiryCreate) -> Inquiry:
    data = payload.model_dump()
    data["email"] = str(payload.email)
    # Empty form fields arrive as "" rather than being omitted.
    for field in ("phone", "subject", "order_id"):
        if isinstance(data[field], str) and not data[field].strip():
            data[field] = None

    inquiry = Inquiry(id=new_inquiry_id(), **data)
    db.add(inquiry)
    try:
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        raise InternalError("Failed to submit inquiry") from err

    db.refresh(inquiry)
    log_event("inquiry_submitted", order_id=inquiry.order_id)
    return inquiry


def list_inquiries(db: Session) -> list[Inquiry]:
    return list(db.scalars(select(Inquiry).order_by(Inquiry.created_at.desc(), Inquiry.id)))
