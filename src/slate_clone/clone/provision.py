"""Entry point used by account provisioning.

``clone_template_for`` never raises for a failed clone. Signing up must succeed
even when the demo project could not be copied, so every failure is logged
with the job summary, forwarded to an optional alert sink, and returned as
part of a CloneOutcome.

Example:
    >>> outcome = clone_template_for(store, config, user_id, org_id)
    >>> if outcome.orphaned:
    ...     schedule_reconciliation()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from slate_clone.clone.job import CloneJob, CloneResult
from slate_clone.clone.orchestrator import CloneOrchestrator
from slate_clone.core.config import CloneConfig
from slate_clone.core.constants import DocumentId
from slate_clone.core.exceptions import CloneError, DuplicateExists, MembershipProvisioningFailure
from slate_clone.core.logging_config import get_logger
from slate_clone.store.interfaces import DocumentStore

logger = get_logger("provision")

AlertSink = Callable[[CloneJob, CloneError], None]


@dataclass
class CloneOutcome:
    """Result of ``clone_template_for``: either ``result`` or ``error`` is set."""

    job: CloneJob
    result: CloneResult | None = None
    error: CloneError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def duplicate(self) -> bool:
        return isinstance(self.error, DuplicateExists)

    @property
    def orphaned(self) -> bool:
        """True when a populated clone exists that nobody owns."""
        return isinstance(self.error, MembershipProvisioningFailure)

    @property
    def new_root_id(self) -> DocumentId | None:
        return self.job.new_root_id


def _report_failure(job: CloneJob, error: CloneError, alert: AlertSink | None) -> None:
    level = logging.CRITICAL if isinstance(error, MembershipProvisioningFailure) else logging.ERROR
    logger.log(
        level,
        f"Failed to clone template for {job.owner_id}: {type(error).__name__}: {error}",
        extra={"clone_job": job.to_dict()},
    )
    if alert is not None:
        try:
            alert(job, error)
        except Exception:
            logger.exception("Clone failure alert sink raised")


def clone_template_for(
    store: DocumentStore,
    config: CloneConfig,
    owner_id: str,
    owner_namespace: str,
    source_root_id: DocumentId | None = None,
    orchestrator: CloneOrchestrator | None = None,
    alert: AlertSink | None = None,
) -> CloneOutcome:
    """Clone the template project for a new account.

    Args:
        store: Document store.
        config: Clone configuration.
        owner_id: User the clone is created for.
        owner_namespace: Namespace the clone is created in.
        source_root_id: Template to copy. Defaults to ``config.source_root_id``.
        orchestrator: Orchestrator to use. Built from store and config if None.
        alert: Called with the job and error for every failure other than
            DuplicateExists.

    Returns:
        CloneOutcome describing what happened.
    """
    try:
        orchestrator = orchestrator or CloneOrchestrator(store, config)
        job = orchestrator.new_job(owner_id, owner_namespace, source_root_id)
    except Exception as e:
        logger.exception(f"Cannot start clone job for {owner_id}")
        job = CloneJob(
            owner_id=owner_id,
            owner_namespace=owner_namespace,
            source_root_id=source_root_id or config.source_root_id,
        )
        error = CloneError(f"Cannot start clone job: {e}")
        job.fail(error)
        _report_failure(job, error, alert)
        return CloneOutcome(job=job, error=error)

    try:
        result = orchestrator.execute(job)
    except DuplicateExists as e:
        logger.info(f"Namespace {owner_namespace} already has a cloned template, skipping")
        return CloneOutcome(job=job, error=e)
    except CloneError as e:
        error = e
    except Exception as e:
        logger.exception(f"Unexpected failure cloning template for {owner_id}")
        if not job.is_terminal:
            job.fail(CloneError(f"Unexpected failure: {e}"))
        error = job.failure
    else:
        return CloneOutcome(job=job, result=result)

    _report_failure(job, error, alert)
    return CloneOutcome(job=job, error=error)
