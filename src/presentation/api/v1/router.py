from fastapi import APIRouter, Depends

from src.core.security import get_current_identity

from .clients import client_router
from .credit_accounts import credit_account_router
from .credit_requests import credit_request_router
from .establishments import establishment_router
from .late_fee_rules import installment_router, late_fee_rule_router

router = APIRouter(dependencies=[Depends(get_current_identity)])

router.include_router(credit_account_router, tags=["Credit Accounts"])
router.include_router(client_router, tags=["Credit Accounts"])
router.include_router(establishment_router, tags=["Establishments"])
router.include_router(credit_request_router, tags=["Credit Requests"])
router.include_router(late_fee_rule_router, tags=["Late-Fee Rules"])
router.include_router(installment_router, tags=["Installments"])
