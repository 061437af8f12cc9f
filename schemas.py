"""
Schemas for the inquiry intake service

Customer, Employee and InquiryRecord map to MongoDB collections with the
lowercase name of the class ("customer", "employee", "inquiry"). The other
models are transient and never stored.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class Submission(BaseModel):
    """
    Values posted from the intake form, passed through without validation
    """
    name: Optional[str] = Field(None, description="Customer name as typed")
    email: Optional[str] = Field(None, description="Customer email as typed, not format-checked")
    subject: Optional[str] = Field(None, description="Inquiry subject")
    message: Optional[str] = Field(None, description="Inquiry message")


class CustomerMatch(BaseModel):
    """Outcome of looking a submission's email up in the customer directory"""
    customer_id: Optional[str] = None
    # Matched directory email; kept on the match but not used downstream
    customer_email: Optional[str] = None
    sales_owner_email: str = ""


class Customer(BaseModel):
    """
    Customer directory entries
    Collection name: "customer"
    """
    email: str = Field(..., description="Customer contact email")
    companyname: Optional[str] = Field(None, description="Display name")
    sales_rep: Optional[str] = Field(None, description="_id of the owning employee")


class Employee(BaseModel):
    """
    Internal employees (sales reps and the system identity)
    Collection name: "employee"
    """
    entityid: str = Field(..., description="Display name used in mail signatures")
    email: Optional[str] = Field(None, description="Work email")


class InquiryRecord(BaseModel):
    """
    Inquiries created from the intake form
    Collection name: "inquiry"
    """
    customer_name: str = Field(..., description="Name given on the form")
    customer_email: str = Field(..., description="Email given on the form")
    subject: str = Field(..., description="Inquiry subject")
    message: str = Field(..., description="Inquiry message")
    customer: Optional[str] = Field(None, description="_id of the matched customer, unset when none")


class NotificationMessage(BaseModel):
    author: str
    recipients: str
    subject: str
    body: str


def required_fields(model: type) -> List[str]:
    return [name for name, field in model.model_fields.items() if field.is_required()]


# Mandatory fields per stored record type, checked only when a save asks for it
REQUIRED_FIELDS: Dict[str, List[str]] = {
    "customer": required_fields(Customer),
    "employee": required_fields(Employee),
    "inquiry": required_fields(InquiryRecord),
}
