"""Tax rule API endpoints."""

from fastapi import APIRouter, status

from payroll_core.api.dependencies import DbSession, Payroll
from payroll_core.api.schemas import (
    ErrorResponse,
    TaxRuleCreate,
    TaxRuleResponse,
    TaxRuleValidationResponse,
)

router = APIRouter(prefix="/tax-rules", tags=["tax-rules"])


@router.get("", response_model=list[TaxRuleResponse])
async def list_tax_rules(
    service: Payroll,
    include_inactive: bool = False,
) -> list[TaxRuleResponse]:
    """List tax brackets, lowest threshold first."""
    rows = await service.list_tax_rules(include_inactive=include_inactive)
    return [TaxRuleResponse.model_validate(r) for r in rows]


@router.post(
    "",
    response_model=TaxRuleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_tax_rule(
    db: DbSession,
    service: Payroll,
    payload: TaxRuleCreate,
) -> TaxRuleResponse:
    """Add a tax bracket."""
    row = await service.create_tax_rule(
        name=payload.name,
        rate=payload.rate,
        threshold_min=payload.threshold_min,
        threshold_max=payload.threshold_max,
        is_active=payload.is_active,
    )
    await db.commit()
    await db.refresh(row)
    return TaxRuleResponse.model_validate(row)


@router.get("/validation", response_model=TaxRuleValidationResponse)
async def validate_tax_rules(service: Payroll) -> TaxRuleValidationResponse:
    """Report gaps, overlaps and malformed brackets in the active rule set."""
    issues = await service.validate_active_rules()
    return TaxRuleValidationResponse(valid=not issues, issues=issues)
