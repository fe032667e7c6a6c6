"""
Enumeration classes used throughout the slate_clone package.
"""

from enum import Enum


class BaseStrEnum(str, Enum):
    """Base class for string enums in Python 3.10"""
    pass


class Cardinality(BaseStrEnum):
    """How many references a foreign key field holds.

    Attributes:
        single: The field holds one document id.
        array: The field holds a list of document ids.
    """
    single = "single"
    array = "array"


class CloneJobState(BaseStrEnum):
    """States of a clone job.

    ``cloning`` is entered once per collection; the job records which
    collection index it is on separately.
    """
    not_started = "NotStarted"
    duplicate_checked = "DuplicateChecked"
    cloning = "Cloning"
    membership_provisioned = "MembershipProvisioned"
    completed = "Completed"
    failed = "Failed"


class MemberRole(BaseStrEnum):
    """Role of the membership record a clone job writes."""
    owner = "owner"


class MemberStatus(BaseStrEnum):
    active = "active"
