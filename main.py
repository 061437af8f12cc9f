import logging
import os
from functools import lru_cache

from fastapi import Depends, FastAPI, Form
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from config import DEFAULT_CONFIG
from database import MongoDirectory, MongoRecordStore
from logging_config import configure_logging
from mailer import build_mail_transport
from notifier import Notifier
from records import RecordWriter
from resolver import CustomerResolver
from schemas import Submission
from service import InquiryService, SubmissionStatus

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Inquiry Intake Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

FORM_ACTION = "/inquiries"


@lru_cache
def get_inquiry_service() -> InquiryService:
    """Wire the workflow to MongoDB and the configured mail transport."""
    directory = MongoDirectory()
    return InquiryService(
        resolver=CustomerResolver(directory, DEFAULT_CONFIG),
        writer=RecordWriter(MongoRecordStore(), DEFAULT_CONFIG),
        notifier=Notifier(directory, build_mail_transport(directory, DEFAULT_CONFIG), DEFAULT_CONFIG),
        form_action=FORM_ACTION,
    )


@app.get("/inquiries", response_class=HTMLResponse)
def intake_form(service: InquiryService = Depends(get_inquiry_service)):
    """Render the inquiry intake form."""
    return HTMLResponse(service.render_form())


@app.post("/inquiries")
def create_inquiry(
    custpage_name: str = Form(""),
    custpage_email: str = Form(""),
    custpage_subject: str = Form(""),
    custpage_message: str = Form(""),
    service: InquiryService = Depends(get_inquiry_service),
):
    """Store a submitted inquiry, link it to a known customer and notify sales."""
    submission = Submission(
        name=custpage_name,
        email=custpage_email,
        subject=custpage_subject,
        message=custpage_message,
    )
    try:
        outcome = service.submit(submission)
    except Exception:
        logger.exception("Unexpected error while handling inquiry submission")
        return Response(status_code=500)

    if outcome.status == SubmissionStatus.SUCCESS:
        return PlainTextResponse(outcome.confirmation())
    if outcome.status == SubmissionStatus.MAIL_FAULT:
        # The record exists; only the notices were lost
        return PlainTextResponse(outcome.confirmation(), headers={"X-Notification-Status": "failed"})
    if outcome.status == SubmissionStatus.DIRECTORY_FAULT:
        return Response(status_code=503)
    return Response(status_code=500)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
