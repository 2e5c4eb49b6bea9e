"""ORM models package."""
from .activity import ActivityPriority, ActivityStatus, ConstructionActivity, ProjectActivity
from .audit import AuditLog
from .base import Base
from .contractor import ContractStatus, Contractor, ContractorProject
from .funding import FundingStatus, FundingTransaction, ProjectFunding
from .gps_point import ConstructionPhase, GpsPoint, PointStatus, RoadSide
from .hse import HSEIncident, IncidentSeverity, IncidentStatus
from .lookup import LookupValue
from .milestone import Milestone, MilestoneStatus, MilestoneUpdate
from .progress import ProgressReport, ScheduleStatus
from .project import Project, ProjectSection, ProjectStatus, Province, SectionStatus
from .quality import ComplianceStatus, QaQcStatus, QualityReport
from .user import User, UserProjectAccess, UserRole

__all__ = [
    "ActivityPriority",
    "ActivityStatus",
    "AuditLog",
    "Base",
    "ComplianceStatus",
    "ConstructionActivity",
    "ConstructionPhase",
    "ContractStatus",
    "Contractor",
    "ContractorProject",
    "FundingStatus",
    "FundingTransaction",
    "GpsPoint",
    "HSEIncident",
    "IncidentSeverity",
    "IncidentStatus",
    "LookupValue",
    "Milestone",
    "MilestoneStatus",
    "MilestoneUpdate",
    "PointStatus",
    "ProgressReport",
    "Project",
    "ProjectActivity",
    "ProjectFunding",
    "ProjectSection",
    "ProjectStatus",
    "Province",
    "QaQcStatus",
    "QualityReport",
    "RoadSide",
    "ScheduleStatus",
    "SectionStatus",
    "User",
    "UserProjectAccess",
    "UserRole",
]
