from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from rulestudio.api.dependencies import get_remote_config_resolver, get_rule_catalog, get_simulation_engine
from rulestudio.integrations.remote_config import RemoteConfigResolver
from rulestudio.rules.catalog import RuleCatalogService
from rulestudio.simulation import BatchSimulationResult, ImpactSimulationEngine, SimulationResult

router = APIRouter()


class SimulationRequest(BaseModel):
    rule_id: str = Field(min_length=1)
    workspace_path: str
    base_config_path: str | None = None
    base_config_url: str | None = None
    is_optin: bool | None = None  # Looked up in the catalog when omitted

    @model_validator(mode="after")
    def _single_baseline(self) -> "SimulationRequest":
        if self.base_config_path and self.base_config_url:
            raise ValueError("Provide either base_config_path or base_config_url, not both")
        return self


class BatchSimulationRequest(BaseModel):
    rule_ids: list[str] = Field(min_length=1)
    workspace_path: str
    base_config_path: str | None = None


class BatchSimulationResponse(BaseModel):
    results: list[SimulationResult]
    failures: dict[str, str]
    safe_rules: list[str]
    total_duration: float


def _workspace(path: str) -> Path:
    workspace = Path(path).expanduser()
    if not workspace.is_dir():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Workspace '{path}' is not a directory.")
    return workspace


async def _is_optin(catalog: RuleCatalogService, rule_id: str, explicit: bool | None) -> bool:
    if explicit is not None:
        return explicit
    if not catalog.rules:
        await catalog.load_rules()
    rule = catalog.get_rule(rule_id)
    return rule.is_optin if rule else False


@router.post("/simulations", response_model=SimulationResult)
async def simulate_rule(
    request: SimulationRequest,
    engine: ImpactSimulationEngine = Depends(get_simulation_engine),
    catalog: RuleCatalogService = Depends(get_rule_catalog),
    resolver: RemoteConfigResolver = Depends(get_remote_config_resolver),
):
    workspace = _workspace(request.workspace_path)
    is_optin = await _is_optin(catalog, request.rule_id, request.is_optin)

    if request.base_config_url:
        return await engine.simulate_rule_with_remote_baseline(
            request.rule_id, workspace, request.base_config_url, resolver, is_optin=is_optin
        )

    base_config = Path(request.base_config_path).expanduser() if request.base_config_path else None
    return await engine.simulate_rule(request.rule_id, workspace, base_config_path=base_config, is_optin=is_optin)


@router.post("/simulations/batch", response_model=BatchSimulationResponse)
async def simulate_rules(
    request: BatchSimulationRequest,
    engine: ImpactSimulationEngine = Depends(get_simulation_engine),
    catalog: RuleCatalogService = Depends(get_rule_catalog),
):
    workspace = _workspace(request.workspace_path)
    optin = [rule_id for rule_id in request.rule_ids if await _is_optin(catalog, rule_id, None)]
    base_config = Path(request.base_config_path).expanduser() if request.base_config_path else None

    batch: BatchSimulationResult = await engine.simulate_rules(
        request.rule_ids, workspace, base_config_path=base_config, optin_rule_ids=optin
    )
    return BatchSimulationResponse(
        results=batch.results,
        failures=batch.failures,
        safe_rules=[r.rule_id for r in batch.safe_rules],
        total_duration=batch.total_duration,
    )
