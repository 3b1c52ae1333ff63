from staycount.schemas.auth import Token, UserCreate, UserLogin, UserResponse
from staycount.schemas.stay import StayCreate, StayImportResult, StayRecord, StayResponse, StayUpdate
from staycount.schemas.compliance import (
    ComplianceSummary,
    DashboardResponse,
    OverstayCheckRequest,
    OverstayCheckResult,
    OverstayDaysResponse,
    ZoneResponse,
)
