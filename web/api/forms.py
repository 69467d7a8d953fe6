"""Form schemas and validation error formatting."""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, ValidationError, model_validator

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class _Form(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SignupForm(_Form):
    first_name: NonBlank = Field(alias="firstName")
    last_name: NonBlank = Field(alias="lastName")
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str = Field(alias="confirmPassword", min_length=6)

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class LoginForm(_Form):
    email: EmailStr
    password: str = Field(min_length=1)


class NewMessageForm(_Form):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    content: NonBlank


_FIELD_LABELS = {
    "firstName": "First name",
    "lastName": "Last name",
    "email": "Email",
    "password": "Password",
    "confirmPassword": "Password confirmation",
    "title": "Title",
    "content": "Content",
}


def form_error(exc: ValidationError) -> str:
    """Reduce a validation error to one readable sentence for the form."""
    err = exc.errors()[0]
    msg = err["msg"]
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = err.get("loc") or ()
    if not loc:
        return msg
    label = _FIELD_LABELS.get(str(loc[0]), str(loc[0]))
    return f"{label}: {msg}"
