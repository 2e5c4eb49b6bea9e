"""Pydantic schemas package."""
from .base import CamelModel, PartialUpdate, UtcDatetime
from .activity import (
    ActivityFeed,
    ConstructionActivityCreate,
    ConstructionActivityList,
    ConstructionActivityRead,
    ConstructionActivityUpdate,
    ProjectActivityCreate,
    ProjectActivityList,
    ProjectActivityRead,
    ProjectActivityUpdate,
)
from .contractor import (
    ContractAssignmentCreate,
    ContractAssignmentRead,
    ContractAssignmentUpdate,
    ContractorCreate,
    ContractorRead,
    ContractorUpdate,
)
from .funding import FundingCreate, FundingList, FundingRead, FundingUpdate
from .gps_point import BulkImportRequest, BulkImportResult, GpsPointCreate, GpsPointRead
from .hse import HSEIncidentCreate, HSEIncidentList, HSEIncidentRead, HSEIncidentUpdate
from .lookup import LookupItem, LookupValueCreate
from .milestone import MilestoneCreate, MilestoneList, MilestoneRead, MilestoneUpdateIn
from .progress import ProgressReportCreate, ProgressReportList, ProgressReportRead, ProgressReportUpdate
from .project import (
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
    SectionCreate,
    SectionRead,
    SectionUpdate,
)
from .province import ProvinceList, ProvinceRead
from .quality import QualityReportCreate, QualityReportList, QualityReportRead, QualityReportUpdate
from .report import ReportEnvelope
from .user import (
    AdminCreate,
    LoginRequest,
    LoginResponse,
    ProjectAccessGrant,
    ProjectAccessRead,
    SetupStatus,
    UserCreate,
    UserRead,
    UserUpdate,
)

__all__ = [
    "ActivityFeed",
    "AdminCreate",
    "BulkImportRequest",
    "BulkImportResult",
    "CamelModel",
    "PartialUpdate",
    "ConstructionActivityCreate",
    "ConstructionActivityList",
    "ConstructionActivityRead",
    "ConstructionActivityUpdate",
    "ContractAssignmentCreate",
    "ContractAssignmentRead",
    "ContractAssignmentUpdate",
    "ContractorCreate",
    "ContractorRead",
    "ContractorUpdate",
    "FundingCreate",
    "FundingList",
    "FundingRead",
    "FundingUpdate",
    "GpsPointCreate",
    "GpsPointRead",
    "HSEIncidentCreate",
    "HSEIncidentList",
    "HSEIncidentRead",
    "HSEIncidentUpdate",
    "LoginRequest",
    "LoginResponse",
    "LookupItem",
    "LookupValueCreate",
    "MilestoneCreate",
    "MilestoneList",
    "MilestoneRead",
    "MilestoneUpdateIn",
    "ProgressReportCreate",
    "ProgressReportList",
    "ProgressReportRead",
    "ProgressReportUpdate",
    "ProjectAccessGrant",
    "ProjectAccessRead",
    "ProjectActivityCreate",
    "ProjectActivityList",
    "ProjectActivityRead",
    "ProjectActivityUpdate",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectRead",
    "ProjectStats",
    "ProjectUpdate",
    "ProvinceList",
    "ProvinceRead",
    "QualityReportCreate",
    "QualityReportList",
    "QualityReportRead",
    "QualityReportUpdate",
    "ReportEnvelope",
    "SectionCreate",
    "SectionRead",
    "SectionUpdate",
    "SetupStatus",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "UtcDatetime",
]
