"""ConfigService: report the effective configuration."""

from __future__ import annotations

from wmgr.domain.networks import list_clusters, list_derivation_profiles, list_evm_networks
from wmgr.services.base import BaseService
from wmgr.services.result import ServiceResult


class ConfigService(BaseService):
    def show(self) -> ServiceResult:
        """Merged settings (CLI > env > TOML > defaults), section by section."""
        s = self._settings
        return ServiceResult(
            ok=True,
            op="config_show",
            data={
                "config_path": str(s.config_path) if s.config_path else None,
                "svpi": s.svpi.model_dump(),
                "solana": s.solana.model_dump(),
                "evm": s.evm.model_dump(),
            },
            meta={
                "clusters": list_clusters(),
                "evm_networks": list_evm_networks(),
                "derivation_profiles": list_derivation_profiles(),
            },
        )
