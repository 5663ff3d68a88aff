"""Post-connect data fetch sequence."""

from __future__ import annotations

from collections.abc import Awaitable

from routerscope.models.coordinator import FetchPolicy, FetchReport, FetchStep
from routerscope.models.target import Target
from routerscope.services.base import DeviceApiClient
from routerscope.utils.logging import get_logger

logger = get_logger(__name__)


def _step_call(
    client: DeviceApiClient, step: FetchStep, target: Target, log_entry_count: int,
) -> Awaitable[None]:
    if step == FetchStep.SYSTEM_INFO:
        return client.get_system_info(target)
    if step == FetchStep.INTERFACES:
        return client.get_network_interfaces(target)
    if step == FetchStep.DHCP_LEASES:
        return client.get_dhcp_leases(target)
    return client.get_log_entries(target, log_entry_count)


async def run_fetch_sequence(
    client: DeviceApiClient,
    target: Target,
    *,
    log_entry_count: int = 100,
    policy: FetchPolicy = FetchPolicy.ABORT_ON_ERROR,
) -> FetchReport:
    """Run the four data fetches for *target* strictly in order.

    Each step is awaited before the next one starts. Under
    ``ABORT_ON_ERROR`` the first raising step ends the sequence; under
    ``CONTINUE_ON_ERROR`` every step is attempted. Data written by steps that
    succeeded stays on the target in both modes.

    Returns:
        A :class:`FetchReport`; this function never raises ``Exception``
        subclasses from the client, they are recorded in the report.
    """
    report = FetchReport(policy=policy)
    for step in FetchStep:
        try:
            await _step_call(client, step, target, log_entry_count)
        except Exception as exc:
            report.errors[step] = exc
            logger.warning(
                "fetch_step_failed",
                target_id=target.id,
                step=step.value,
                error=str(exc),
            )
            if policy == FetchPolicy.ABORT_ON_ERROR:
                break
        else:
            report.completed.append(step)
    return report
