"""Shared pydantic base model for wire-facing data."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DashboardModel(BaseModel):
    """Base model with camelCase wire aliases.

    Attributes are snake_case in Python and camelCase on the wire
    (``issue_number`` <-> ``issueNumber``); both spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
