from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from database import MongoDirectory, MongoRecordStore, as_object_id
from errors import DirectoryFault, RecordWriteFault, RequiredFieldsMissing
from ports import Column, Filter


def _database(**collections):
    database = MagicMock()
    database.__getitem__.side_effect = lambda name: collections[name]
    return database


def test_as_object_id() -> None:
    oid = ObjectId()
    assert as_object_id(str(oid)) == oid
    assert as_object_id("-5") == "-5"
    assert as_object_id(None) is None


def test_search_projects_columns_and_joins() -> None:
    rep_id = ObjectId()
    customer_id = ObjectId()
    customers = MagicMock()
    customers.find.return_value = [{"_id": customer_id, "email": "a@x.com", "sales_rep": str(rep_id)}]
    employees = MagicMock()
    employees.find_one.return_value = {"_id": rep_id, "email": "rep@x.com"}
    directory = MongoDirectory(_database(customer=customers, employee=employees))

    rows = list(directory.search(
        "customer",
        [Filter("email", "is", "a@x.com")],
        [Column("email"), Column("internalid"), Column("email", join="salesRep")],
    ))

    customers.find.assert_called_once_with({"email": "a@x.com"})
    employees.find_one.assert_called_once_with({"_id": rep_id})
    assert len(rows) == 1
    assert rows[0].get_value("internalid") == str(customer_id)
    assert rows[0].get_value("email") == "a@x.com"
    assert rows[0].get_value("email", join="salesRep") == "rep@x.com"


def test_search_without_joined_reference() -> None:
    customers = MagicMock()
    customers.find.return_value = [{"_id": "c1", "email": "a@x.com"}]
    employees = MagicMock()
    directory = MongoDirectory(_database(customer=customers, employee=employees))

    rows = list(directory.search("customer", [], [Column("email", join="salesRep")]))

    assert rows[0].get_value("email", join="salesRep") is None
    employees.find_one.assert_not_called()


def test_internalid_filter_maps_to_id() -> None:
    employees = MagicMock()
    employees.find.return_value = [{"_id": "-5", "entityid": "System"}]
    directory = MongoDirectory(_database(employee=employees))

    rows = list(directory.search("employee", [Filter("internalid", "is", "-5")], [Column("entityid")]))

    employees.find.assert_called_once_with({"_id": "-5"})
    assert rows[0].get_value("entityid") == "System"


def test_search_error_becomes_directory_fault() -> None:
    customers = MagicMock()
    customers.find.side_effect = PyMongoError("connection refused")
    directory = MongoDirectory(_database(customer=customers))

    with pytest.raises(DirectoryFault):
        list(directory.search("customer", [], [Column("email")]))


def test_record_save_inserts_document() -> None:
    inquiries = MagicMock()
    inserted = ObjectId()
    inquiries.insert_one.return_value.inserted_id = inserted
    customer_id = ObjectId()
    store = MongoRecordStore(_database(inquiry=inquiries))

    record = store.create("inquiry")
    record.set_value("customer_name", "Alice")
    record.set_value("subject", None)
    record.set_value("customer", str(customer_id))

    assert record.save() == str(inserted)
    doc = inquiries.insert_one.call_args.args[0]
    assert doc["customer_name"] == "Alice"
    assert doc["subject"] is None
    assert doc["customer"] == customer_id
    assert "created_at" in doc and "updated_at" in doc


def test_record_save_enforces_required_fields_on_request() -> None:
    inquiries = MagicMock()
    store = MongoRecordStore(_database(inquiry=inquiries))
    record = store.create("inquiry")
    record.set_value("customer_name", "Alice")

    with pytest.raises(RequiredFieldsMissing):
        record.save(enforce_required_fields=True)
    inquiries.insert_one.assert_not_called()


def test_record_save_error_becomes_record_write_fault() -> None:
    inquiries = MagicMock()
    inquiries.insert_one.side_effect = PyMongoError("not authorized")
    record = MongoRecordStore(_database(inquiry=inquiries)).create("inquiry")

    with pytest.raises(RecordWriteFault, match="not authorized"):
        record.save()
