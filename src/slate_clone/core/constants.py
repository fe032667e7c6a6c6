"""
Constants used throughout the slate_clone package.
"""

from typing import NewType

# Identifier of a document in the store
DocumentId = NewType("DocumentId", str)

# Collection names of the records that sit outside the cloned graph
ROOT_COLLECTION = "projects"
MEMBERSHIP_COLLECTION = "project_members"
USERS_COLLECTION = "users"

# Field names on the root entity
PARENT_FIELD = "projectId"
OWNER_SCOPE_FIELD = "orgId"
CLONE_FLAG_FIELD = "isClonedDemo"
TEMPLATE_FLAG_FIELD = "isTemplate"
BACK_REFERENCE_FIELD = "originalDemoId"

# Largest number of writes the store accepts in one batch
MAX_BATCH_SIZE = 500

# Length of ids produced by the default id factory
AUTO_ID_LENGTH = 20

# Source-owned fields removed from every cloned document
SystemFields = ["id", "createdAt", "updatedAt", "createdBy"]

# Fields removed from the root entity in addition to SystemFields
RootStrippedFields = SystemFields + ["isPublic", "isTemplate", OWNER_SCOPE_FIELD]
