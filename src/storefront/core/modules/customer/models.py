from pydantic import BaseModel, Field


class Registration(BaseModel):
    """New customer account details sent to the commerce backend."""

    email: str = Field(..., description="Customer email")
    password: str = Field(..., description="Plain text password, verified and stored by the backend")
    first_name: str = Field(..., description="Customer first name")
    last_name: str = Field(..., description="Customer last name")
