from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.db.session import get_db
from storefront.schemas.common import Envelope
from storefront.schemas.inquiry import InquiryCreate, InquiryData, InquiryResponse
from storefront.services.inquiries_service import create_inquiry

router = APIRouter(prefix="/api/inquiries", tags=["inquiries"])


@router.post("", response_model=Envelope[InquiryData], status_code=201, summary="Submit inquiry")
def create_inquiry_endpoint(
    payload: InquiryCreate,
    db: Session = Depends(get_db),
) -> Envelope[InquiryData]:
    inquiry = create_inquiry(db, payload)
    return Envelope(
        message="Inquiry submitted successfully",
        data=InquiryData(inquiry=InquiryResponse.model_validate(inquiry)),
    )
