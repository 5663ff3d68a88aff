"""Coordinator configuration.

Defaults match the stock router record. Every field can be overridden from
``ROUTERSCOPE_*`` environment variables via :meth:`CoordinatorSettings.from_env`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from routerscope.models.coordinator import FetchPolicy

ENV_PREFIX = "ROUTERSCOPE_"


class NewTargetDefaults(BaseModel):
    """Field values given to a target created by ``add_target()``."""

    model_config = {"extra": "forbid"}

    name: str = "New Router"
    address: str = "192.168.1.1"
    port: int = Field(default=8728, ge=1, le=65535)
    username: str = "admin"
    password: str = ""
    use_polling: bool = False
    polling_community: str = "public"
    polling_port: int = Field(default=161, ge=1, le=65535)


class CoordinatorSettings(BaseModel):
    """Tunables for :class:`~routerscope.core.coordinator.ConnectionLifecycleCoordinator`."""

    log_entry_count: int = Field(default=100, gt=0, description="Log entries fetched per refresh")
    fetch_policy: FetchPolicy = FetchPolicy.ABORT_ON_ERROR
    new_target: NewTargetDefaults = Field(default_factory=NewTargetDefaults)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CoordinatorSettings:
        """Build settings, overriding defaults from environment variables.

        Recognised variables:
            ROUTERSCOPE_LOG_ENTRY_COUNT
            ROUTERSCOPE_FETCH_POLICY (``abort`` or ``continue``)
            ROUTERSCOPE_NEW_TARGET_<FIELD>, e.g. ROUTERSCOPE_NEW_TARGET_ADDRESS

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ

        data: dict[str, object] = {}
        if f"{ENV_PREFIX}LOG_ENTRY_COUNT" in env:
            data["log_entry_count"] = env[f"{ENV_PREFIX}LOG_ENTRY_COUNT"]
        if f"{ENV_PREFIX}FETCH_POLICY" in env:
            data["fetch_policy"] = env[f"{ENV_PREFIX}FETCH_POLICY"]

        target_prefix = f"{ENV_PREFIX}NEW_TARGET_"
        target_data = {
            key[len(target_prefix):].lower(): value
            for key, value in env.items()
            if key.startswith(target_prefix)
        }
        if target_data:
            data["new_target"] = target_data

        return cls.model_validate(data)
