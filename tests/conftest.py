from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from config import InquiryConfig
from errors import MailFault, RequiredFieldsMissing
from notifier import Notifier
from ports import Column, DirectoryQuery, Filter, MailTransport, RecordHandle, RecordStore, SearchResult
from records import RecordWriter
from resolver import CustomerResolver
from schemas import REQUIRED_FIELDS
from service import InquiryService

SYSTEM_ID = "-5"

JOINS = {"salesRep": ("sales_rep", "employee")}


class FakeDirectory(DirectoryQuery):
    """In-memory directory. Rows are returned in insertion order."""

    def __init__(self):
        self.rows: Dict[str, List[Dict[str, Any]]] = {"customer": [], "employee": []}
        self.searches: List[tuple] = []
        self.fail_on: Optional[str] = None

    def add_employee(self, internalid: str, entityid: str, email: Optional[str] = None) -> None:
        self.rows["employee"].append({"internalid": internalid, "entityid": entityid, "email": email})

    def add_customer(self, internalid: str, email: str, sales_rep: Optional[str] = None) -> None:
        self.rows["customer"].append({"internalid": internalid, "email": email, "sales_rep": sales_rep})

    def search(self, type: str, filters: List[Filter], columns: List[Column]):
        self.searches.append((type, filters, columns))
        if self.fail_on == type:
            raise RuntimeError(f"{type} directory unavailable")
        for row in self.rows[type]:
            if all(row.get(f.field) == f.value for f in filters):
                yield SearchResult({col.key: self._value(row, col) for col in columns})

    def _value(self, row: Dict[str, Any], col: Column) -> Any:
        if col.join:
            ref_field, joined_type = JOINS[col.join]
            ref = row.get(ref_field)
            row = next((r for r in self.rows[joined_type] if r["internalid"] == ref), {})
        return row.get(col.name)


class FakeRecord(RecordHandle):
    def __init__(self, store: "FakeRecordStore", type: str):
        self.store = store
        self.type = type
        self.values: Dict[str, Any] = {}

    def set_value(self, field: str, value: Any) -> None:
        self.values[field] = value

    def get_value(self, field: str) -> Any:
        return self.values.get(field)

    def save(self, enforce_required_fields: bool = False) -> str:
        if self.store.fail_with is not None:
            raise self.store.fail_with
        if enforce_required_fields:
            missing = [f for f in REQUIRED_FIELDS.get(self.type, []) if self.values.get(f) in (None, "")]
            if missing:
                raise RequiredFieldsMissing(self.type, missing)
        record_id = str(1000 + len(self.store.saved))
        self.store.saved[record_id] = (self.type, dict(self.values))
        return record_id


class FakeRecordStore(RecordStore):
    def __init__(self):
        self.saved: Dict[str, tuple] = {}
        self.fail_with: Optional[Exception] = None

    def create(self, type: str) -> FakeRecord:
        return FakeRecord(self, type)


class FakeMailTransport(MailTransport):
    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.failing_recipients: set = set()

    def send(self, author, recipients, subject, body) -> None:
        if recipients in self.failing_recipients:
            raise MailFault(f"relay refused {recipients}")
        self.sent.append({"author": author, "recipients": recipients, "subject": subject, "body": body})

    def recipients(self) -> List[str]:
        return [m["recipients"] for m in self.sent]


@pytest.fixture()
def config() -> InquiryConfig:
    return InquiryConfig(system_employee_id=SYSTEM_ID)


@pytest.fixture()
def directory() -> FakeDirectory:
    d = FakeDirectory()
    d.add_employee(SYSTEM_ID, "System Administrator", "admin@x.com")
    d.add_employee("77", "Rita Rep", "rep@x.com")
    return d


@pytest.fixture()
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def mail() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture()
def service(directory, store, mail, config) -> InquiryService:
    return InquiryService(
        resolver=CustomerResolver(directory, config),
        writer=RecordWriter(store, config),
        notifier=Notifier(directory, mail, config),
        form_action="/inquiries",
    )


@pytest.fixture()
def client(service):
    from main import app, get_inquiry_service

    app.dependency_overrides[get_inquiry_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_inquiry_service, None)
