"""
Lead submission schema.

Field names are case-sensitive and are forwarded to the lead buyer as-is.
The UI may send ``bankMonths`` instead of ``subID3``; see ``normalize_lead``.
"""
from typing import Any, Dict, List, Literal, Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, StrictFloat, StrictInt, StrictStr, ValidationError, field_validator

from leadrelay.schemas.base import BaseSchema
from leadrelay.utils.exceptions import LeadValidationError

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# Accepted as sent, never coerced
StrOrNumber = Union[StrictStr, StrictInt, StrictFloat]


class LeadSubmission(BaseSchema):
    """Applicant data as accepted from the web form"""

    # Required
    campaignID: StrictInt
    ipAddress: StrictStr  # proxies and IPv6 allowed
    sourceURL: StrictStr
    firstName: StrictStr
    lastName: StrictStr
    streetAddress: StrictStr
    city: StrictStr
    state: StrictStr = Field(min_length=2, max_length=2)
    zipCode: StrictStr = Field(min_length=5)
    homePhone: StrictStr = Field(min_length=10)
    workPhone: StrictStr = Field(min_length=10)
    mobilePhone: StrictStr = Field(min_length=10)
    email: StrictStr
    dateOfBirth: StrictStr = Field(pattern=DATE_PATTERN)
    ssn: StrictStr = Field(min_length=9, max_length=9)
    ownRent: Literal["own", "rent", "other"]
    yearsAtResidence: StrictInt = Field(ge=0, le=127)
    monthsAtResidence: StrictInt = Field(ge=0, le=11)
    incomeSource: Literal[
        "employment",
        "socialSecurity",
        "disability",
        "retirement",
        "unemployment",
        "other",
    ]
    employer: StrictStr
    yearsAtEmployer: StrictInt = Field(ge=0, le=127)
    monthsAtEmployer: StrictInt = Field(ge=0, le=11)
    monthlyIncome: StrOrNumber
    loanAmount: StrOrNumber
    payMethod: Literal["checking", "savings", "paper", "other"]
    payPeriod: Literal["weekly", "biWeekly", "semiMonthly", "monthly"]
    firstPayDate: StrictStr = Field(pattern=DATE_PATTERN)
    secondPayDate: StrictStr = Field(pattern=DATE_PATTERN)
    bankName: StrictStr
    bankAccountType: Literal["checking", "savings"]
    bankRoutingNumber: StrictStr
    bankAccountNumber: StrictStr
    activeMilitary: StrOrNumber
    minPrice: StrOrNumber

    # Optional
    gender: Optional[Literal["m", "f"]] = None
    streetAddress2: Optional[StrictStr] = None
    workPhoneExt: Optional[StrictStr] = None
    citizen: Optional[StrOrNumber] = None
    licenseNumber: Optional[StrictStr] = None
    licenseState: Optional[StrictStr] = Field(default=None, min_length=2, max_length=2)
    title: Optional[StrictStr] = None
    employerAddress: Optional[StrictStr] = None
    employerCity: Optional[StrictStr] = None
    employerState: Optional[StrictStr] = Field(default=None, min_length=2, max_length=2)
    employerZip: Optional[StrOrNumber] = None
    bankPhone: Optional[StrictStr] = None
    referencePrimaryName: Optional[StrictStr] = None
    referencePrimaryPhone: Optional[StrictStr] = None
    referencePrimaryRelation: Optional[StrictStr] = None
    referenceSecondaryName: Optional[StrictStr] = None
    referenceSecondaryPhone: Optional[StrictStr] = None
    referenceSecondaryRelation: Optional[StrictStr] = None
    optin: Optional[StrOrNumber] = None
    bankruptcy: Optional[StrOrNumber] = None
    timeToCall: Optional[StrictStr] = None
    campaignRouting: Optional[StrOrNumber] = None
    subID: Optional[StrictStr] = None
    subID2: Optional[StrictStr] = None
    subID3: Optional[StrOrNumber] = None  # Bank months
    bankMonths: Optional[StrOrNumber] = None  # UI alias for subID3
    subID4: Optional[StrictStr] = None
    subID5: Optional[StrictStr] = None
    subID6: Optional[StrictStr] = None
    subID7: Optional[StrictStr] = None
    subID8: Optional[StrictStr] = None
    subID9: Optional[StrictStr] = None
    subID10: Optional[StrictStr] = None
    subIDBig: Optional[StrictStr] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        # Syntax only; the address is forwarded exactly as typed
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address: {e}")
        return v


def format_validation_errors(error: ValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into the field-level list returned to the UI"""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "body",
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors(include_url=False)
    ]


BANK_MONTHS_ERROR = {
    "field": "bankMonths",
    "message": "bankMonths (subID3) is required",
    "type": "custom",
}


def _missing_bank_months(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    return data.get("subID3") is None and data.get("bankMonths") is None


def validate_lead(payload: Any) -> LeadSubmission:
    """
    Validate a raw submission against the lead schema.

    The bankMonths/subID3 rule is reported alongside any field errors so the
    form can show every problem at once.

    Raises:
        LeadValidationError: With the field-level error list
    """
    try:
        submission = LeadSubmission.model_validate(payload)
    except ValidationError as e:
        errors = format_validation_errors(e)
        if _missing_bank_months(payload):
            errors.append(dict(BANK_MONTHS_ERROR))
        raise LeadValidationError(errors)

    if submission.subID3 is None and submission.bankMonths is None:
        raise LeadValidationError([dict(BANK_MONTHS_ERROR)])

    return submission


def normalize_lead(submission: LeadSubmission) -> Dict[str, Any]:
    """
    Build the outbound payload: ``bankMonths`` fills ``subID3`` when the
    latter is missing and is never sent upstream.
    """
    payload = submission.model_dump(exclude_none=True)
    bank_months = payload.pop("bankMonths", None)
    if "subID3" not in payload and bank_months is not None:
        payload["subID3"] = bank_months
    return payload
