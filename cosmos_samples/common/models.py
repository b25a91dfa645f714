"""
Family document models.

Pydantic models for the example payloads written to the FamilyContainer.
Attributes are snake_case in Python and serialize to the camelCase field
names that the sample queries reference (``lastName``, ``district``,
``children``, ``gender``).
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvalidDocumentError


class Pet(BaseModel):
    """A child's pet."""

    given_name: str = Field(alias="givenName")

    model_config = ConfigDict(populate_by_name=True)


class Parent(BaseModel):
    """A parent in a family.

    Attributes:
        first_name: Given name
        family_name: Surname
    """

    first_name: str = Field(alias="firstName")
    family_name: Optional[str] = Field(default=None, alias="familyName")

    model_config = ConfigDict(populate_by_name=True)


class Child(BaseModel):
    """A child in a family.

    Attributes:
        first_name: Given name
        family_name: Surname
        gender: ``male`` or ``female``
        grade: School grade
        pets: Pets owned by the child
    """

    first_name: str = Field(alias="firstName")
    family_name: Optional[str] = Field(default=None, alias="familyName")
    gender: Optional[str] = None
    grade: int = 0
    pets: List[Pet] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("grade")
    @classmethod
    def validate_grade(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Grade cannot be negative")
        return v


class Address(BaseModel):
    """Postal address of a family."""

    city: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None


class Family(BaseModel):
    """Top-level family document.

    ``id`` identifies the item and ``last_name`` is its partition key value,
    so both must be set before the document is written or read.

    Attributes:
        id: Item identifier
        last_name: Surname, used as the partition key
        district: Optional district
        parents: Parents
        children: Children
        address: Home address
        is_registered: Registration flag
    """

    id: str
    last_name: str = Field(alias="lastName")
    district: Optional[str] = None
    parents: List[Parent] = Field(default_factory=list)
    children: List[Child] = Field(default_factory=list)
    address: Optional[Address] = None
    is_registered: bool = Field(default=False, alias="isRegistered")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def partition_key(self) -> str:
        """Partition key value of this document."""
        return self.last_name

    def validate_keys(self) -> None:
        """Ensure the document can be addressed by id and partition key.

        Raises:
            InvalidDocumentError: If id or last name is empty
        """
        if not self.id or not self.id.strip():
            raise InvalidDocumentError(
                "Family document has no id",
                partition_key=self.last_name,
            )
        if not self.last_name or not self.last_name.strip():
            raise InvalidDocumentError(
                f"Family document {self.id} has no lastName partition key",
                document_id=self.id,
            )

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the JSON body sent to the container."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Family":
        """Build a Family from a stored item, ignoring system properties."""
        fields = {k: v for k, v in document.items() if not k.startswith("_")}
        return cls.model_validate(fields)
