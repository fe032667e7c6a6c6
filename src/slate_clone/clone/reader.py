"""Reads the template graph out of the document store."""

from __future__ import annotations

from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId
from slate_clone.core.exceptions import CollectionReadFailure, SourceRootNotFound, SourceUnavailable
from slate_clone.core.logging_config import LoggerMixin
from slate_clone.model.schema import CollectionSchema
from slate_clone.store.interfaces import Document, DocumentStore


class SourceGraphReader(LoggerMixin):
    """Fetches the template root and, per collection, the documents under it.

    Reads are not a consistent snapshot across collections. The template is
    not edited while users sign up, so this is acceptable.
    """

    def __init__(self, store: DocumentStore, config: CloneConfig):
        self.store = store
        self.config = config

    def read_root(self, source_root_id: DocumentId | None) -> Document:
        """Fetch the template root.

        Falls back to any root flagged as a template when ``source_root_id``
        is None or does not exist and ``template_fallback`` is enabled.

        Raises:
            SourceUnavailable: If the store could not be read.
            SourceRootNotFound: If no template root exists.
        """
        cfg = self.config
        try:
            if source_root_id is not None:
                root = self.store.get_document(cfg.root_collection, source_root_id)
                if root is not None:
                    return root
            if not cfg.template_fallback:
                raise SourceRootNotFound(source_root_id)

            if source_root_id is None:
                self._logger.info("No template project configured, looking for any template")
            else:
                self._logger.warning(f"Template project {source_root_id} not found, looking for any template")
            templates = self.store.query_by_flag(
                cfg.root_collection, cfg.owner_scope_field, None, cfg.template_flag_field, True
            )
        except SourceUnavailable:
            raise
        except Exception as e:
            raise SourceUnavailable(f"Failed to read template project {source_root_id}: {e}") from e

        if not templates:
            raise SourceRootNotFound(source_root_id)
        root = min(templates, key=lambda d: d.id)
        self._logger.info(f"Using template project {root.id}")
        return root

    def read_collection(self, schema_entry: CollectionSchema, source_root_id: DocumentId) -> list[Document]:
        """Fetch every document of one collection belonging to the template.

        An empty list is a valid result.

        Raises:
            CollectionReadFailure: If the store could not be read.
        """
        name = schema_entry.collection_name
        try:
            documents = self.store.read_by_parent(name, schema_entry.parent_field, source_root_id)
        except Exception as e:
            raise CollectionReadFailure(name, f"Failed to read source collection {name}: {e}") from e
        self._logger.debug(f"Read {len(documents)} documents from {name}")
        return documents
