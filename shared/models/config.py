from typing import Literal

from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    Declares one environment setting a backend client needs before it can be booted.

    Attributes:
        env_key (str): The raw key, prefixed by the client with "{TYPE}_{ENGINE}_" (e.g. "BASE_URL" → "SBOM_BOMBASTIC_BASE_URL").
        val_type (str): How the raw value is parsed: "string", "number" or "bool".
        default (str | int | float | bool | None): Value used when the variable is not set. None marks the setting as required.
    """

    env_key: str
    val_type: Literal["string", "number", "bool"] = "string"
    default: str | int | float | bool | None = None
