from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from errors import ValidationFailed


class Submission(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        # Forms send null for optional fields left blank
        return "" if value is None else value

    def missing_fields(self):
        return []


class RsvpSubmission(Submission):
    attendance: str = ""
    name: str = ""
    guest: str = ""
    message: str = ""
    uuid: Optional[str] = None

    def missing_fields(self):
        missing = []
        if self.attendance not in ("yes", "no"):
            missing.append("attendance")
        # A name is only needed from guests who are coming
        if self.attendance == "yes" and not self.name:
            missing.append("name")
        return missing


class InviteSubmission(Submission):
    name: str = ""
    comment: str = ""

    def missing_fields(self):
        return [] if self.name else ["name"]


def validate_body(model_cls, body):
    """Shape-check body against model_cls and enforce its required fields.

    Raises ValidationFailed listing every offending field at once.
    """
    if not isinstance(body, dict):
        raise ValidationFailed(["body"])

    try:
        submission = model_cls.model_validate(body)
    except ValidationError as e:
        bad = []
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "body"
            if field not in bad:
                bad.append(field)
        raise ValidationFailed(bad) from e

    missing = submission.missing_fields()
    if missing:
        raise ValidationFailed(missing)

    return submission
