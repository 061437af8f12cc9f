"""
Form documents for the GET side of the intake endpoint.

A Form is built field by field and rendered to HTML with the intake_form.html
template. build_intake_form() returns the one form this service serves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from templating import TemplateRenderer, template_renderer


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    TEXTAREA = "textarea"


@dataclass
class FormField:
    id: str
    type: FieldType
    label: str
    mandatory: bool = False


@dataclass
class Form:
    title: str
    action: str = ""
    method: str = "post"
    fields: List[FormField] = field(default_factory=list)
    submit_label: Optional[str] = None

    def add_field(self, id: str, type: FieldType, label: str, mandatory: bool = False) -> FormField:
        form_field = FormField(id=id, type=type, label=label, mandatory=mandatory)
        self.fields.append(form_field)
        return form_field

    def add_submit_button(self, label: str = "Submit") -> None:
        self.submit_label = label


def build_intake_form(action: str = "") -> Form:
    form = Form(title="External customer Form", action=action)
    form.add_field("custpage_name", FieldType.TEXT, "Customer Name", mandatory=True)
    form.add_field("custpage_email", FieldType.TEXT, "Customer Email", mandatory=True)
    form.add_field("custpage_subject", FieldType.TEXT, "Subject")
    form.add_field("custpage_message", FieldType.TEXT, "Message")
    form.add_submit_button("Submit")
    return form


def render_form(form: Form, renderer: TemplateRenderer = template_renderer) -> str:
    return renderer.render("intake_form.html", form=form)
