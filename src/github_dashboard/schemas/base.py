"""Base schema classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaBase(BaseModel):
    """Base class for result schemas produced by this package.

    Fields are snake_case in Python and camelCase on the wire
    (``model_dump(by_alias=True)`` / ``model_dump_json(by_alias=True)``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class GitHubObject(BaseModel):
    """Base class for GitHub API payloads.

    Only the fields this package reads are declared; everything else
    GitHub sends is kept and passed through untouched.
    """

    model_config = ConfigDict(extra="allow")
