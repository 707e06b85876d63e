"""Structured logger for observability."""

import logging
from typing import Any, Optional

# Configure root logger with JSON-like structured format
_logger = logging.getLogger("lead_pipeline")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(
    lead_id: str,
    component: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log structured event for a lead.

    Args:
        lead_id: Lead identifier
        component: Component name (e.g., 'http', 'engine', 'scheduler')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {
        "lead_id": lead_id,
        "component": component,
    }
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_transition(
    lead_id: str,
    from_status: str,
    to_status: str,
    actor: str,
    source: str,
    **kwargs: Any,
) -> None:
    """
    Log an applied status transition.

    Args:
        lead_id: Lead identifier
        from_status: Status before the transition
        to_status: Status after the transition
        actor: Identity the change is attributed to
        source: Origin of the request (api, agent, sync, scheduler)
        **kwargs: Additional fields
    """
    log_event(
        lead_id=lead_id,
        component="engine",
        status_before=str(from_status),
        status_after=str(to_status),
        actor=actor,
        source=str(source),
        **kwargs,
    )


def log_transition_rejected(
    lead_id: str,
    target_status: str,
    reason: Optional[str],
    **kwargs: Any,
) -> None:
    """
    Log a denied advance request.

    Args:
        lead_id: Lead identifier
        target_status: Requested status
        reason: Denial reason
        **kwargs: Additional fields
    """
    log_event(
        lead_id=lead_id,
        component="engine",
        level=logging.WARNING,
        requested_status=str(target_status),
        rejected_reason=reason,
        **kwargs,
    )


def log_scheduler_tick(
    processed: int,
    succeeded: int,
    organization_id: Optional[str] = None,
) -> None:
    """
    Log the summary of one scheduler pass.

    Args:
        processed: Number of due leads attempted
        succeeded: Number of leads advanced
        organization_id: Tenant scope, if any
    """
    fields = {
        "component": "scheduler",
        "processed": processed,
        "succeeded": succeeded,
        "failed": processed - succeeded,
    }
    if organization_id is not None:
        fields["organization_id"] = organization_id
    _logger.info(" | ".join(f"{k}={v!r}" for k, v in fields.items()))


# Export logger instance for direct use
logger = _logger
