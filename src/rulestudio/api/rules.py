from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from rulestudio.api.dependencies import get_rule_catalog
from rulestudio.rules.catalog import RuleCatalogService
from rulestudio.rules.models import Rule

router = APIRouter()


class RuleListResponse(BaseModel):
    count: int
    rules: list[Rule]


@router.get("/rules", response_model=RuleListResponse)
async def list_rules(catalog: RuleCatalogService = Depends(get_rule_catalog)):
    # Live fetch first, cached snapshot when the lint tool is unavailable
    rules = await catalog.load_rules()
    return RuleListResponse(count=len(rules), rules=rules)


@router.get("/rules/{rule_id}", response_model=Rule)
async def get_rule(rule_id: str, catalog: RuleCatalogService = Depends(get_rule_catalog)):
    if not catalog.rules:
        await catalog.load_rules()
    rule = catalog.get_rule(rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Rule '{rule_id}' not found.")
    return rule
