"""
Sample data: family document models, sample families and exceptions.
"""

from .models import Family, Parent, Child, Pet, Address
from .families import (
    FamilyGenerator,
    sample_families,
    get_andersen_family,
    get_wakefield_family,
    get_johnson_family,
    get_smith_family,
)
from .exceptions import SampleError, ConfigurationError, InvalidDocumentError

__all__ = [
    # Models
    "Family",
    "Parent",
    "Child",
    "Pet",
    "Address",
    # Sample data
    "FamilyGenerator",
    "sample_families",
    "get_andersen_family",
    "get_wakefield_family",
    "get_johnson_family",
    "get_smith_family",
    # Exceptions
    "SampleError",
    "ConfigurationError",
    "InvalidDocumentError",
]
