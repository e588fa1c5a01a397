import re
from typing import Dict, Mapping

from visitor_training.core.exceptions import InvalidInput
from visitor_training.core.schemas.training import UserData

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]{2,}$")
COMPANY_PATTERN = re.compile(r"^[a-zA-Z\s]{2,}$")
PHONE_PATTERN = re.compile(r"^\d{10}$")
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")

MIN_NAME_LENGTH = 2


def strip_html(value: str) -> str:
    return HTML_TAG_PATTERN.sub("", value).strip()


def collect_profile_errors(fields: Mapping[str, str]) -> Dict[str, str]:
    """
    Check the registration form fields.

    Returns a map of field name -> message; empty when the form is valid.
    Keys follow the form (`name`, `company`, `phone`, `hostName`).
    """
    errors: Dict[str, str] = {}

    name = (fields.get("name") or "").strip()
    company = (fields.get("company") or "").strip()
    phone = (fields.get("phone") or "").strip()
    # Host name has no character rule, so it is checked after markup is removed.
    host_name = strip_html(fields.get("hostName") or "")

    if not name:
        errors["name"] = "Name is required"
    elif not NAME_PATTERN.match(name):
        errors["name"] = "Enter a valid full name (letters only)"

    if not company:
        errors["company"] = "Company name is required"
    elif not COMPANY_PATTERN.match(company):
        errors["company"] = "Enter a valid full company name (letters only)"

    if not phone:
        errors["phone"] = "Phone number is required"
    elif not PHONE_PATTERN.match(phone):
        errors["phone"] = "Phone number must be 10 digits"

    if not host_name:
        errors["hostName"] = "Host name is required"
    elif len(host_name) < MIN_NAME_LENGTH:
        errors["hostName"] = "Host name is too short"

    return errors


def build_profile(fields: Mapping[str, str]) -> UserData:
    """
    Validate and sanitize the form into a UserData profile.

    Raises:
        InvalidInput: with `field_errors` set when any field fails
    """
    errors = collect_profile_errors(fields)
    if errors:
        raise InvalidInput("; ".join(errors.values()), field_errors=errors)

    return UserData(
        name=strip_html(fields["name"]),
        company=strip_html(fields["company"]),
        phone=strip_html(fields["phone"]),
        hostName=strip_html(fields["hostName"]),
    )
