from fastapi import APIRouter

from .history import history_router
from .trust import trust_router

router = APIRouter()

router.include_router(trust_router, tags=["Trust Scores"])
router.include_router(history_router, tags=["History"])
