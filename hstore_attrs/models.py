"""
Example models with hstore-backed attributes.
Each is a @dataclass subclassing HstoreModel.
"""

from dataclasses import dataclass
from typing import Optional

from hstore_attrs.base import HstoreAttribute, HstoreModel


@dataclass
class Person(HstoreModel):
    """A person with work details and an address, each in its own hstore."""
    hstore_columns = ("work_details", "address")

    name: str = ""
    work_details: Optional[dict] = None
    address: Optional[dict] = None

    employer = HstoreAttribute("work_details", "string", "")
    salary = HstoreAttribute("work_details", "integer", 0)
    street = HstoreAttribute("address", "string", "")
    city = HstoreAttribute("address", "string", "")


def _format_icq(uin):
    return "UIN: n/a" if not uin else f"UIN: #{uin}"


@dataclass
class User(HstoreModel):
    """An application user with loosely structured profile data."""
    hstore_columns = ("data",)

    name: str = ""
    data: Optional[dict] = None

    age = HstoreAttribute("data", "integer")
    salary = HstoreAttribute("data", "float", 1234.56)
    admin = HstoreAttribute("data", "boolean", False)
    icq = HstoreAttribute("data", _format_icq)
