"""Seed PNG provinces and reference lookup values."""
from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import select

from roadtrack.config import get_settings
from roadtrack.db import init_engine, session_scope
from roadtrack.models import ConstructionActivity, LookupValue, Province

PNG_PROVINCES = [
    {"name": "Central Province", "code": "CPV", "region": "Papua", "capital": "Port Moresby", "population": 269000},
    {"name": "Western Province", "code": "WPV", "region": "Papua", "capital": "Daru", "population": 201000},
    {"name": "Gulf Province", "code": "GPV", "region": "Papua", "capital": "Kerema", "population": 106000},
    {"name": "Milne Bay Province", "code": "MBP", "region": "Papua", "capital": "Alotau", "population": 276000},
    {"name": "Northern Province", "code": "NPV", "region": "Papua", "capital": "Popondetta", "population": 186000},
    {"name": "Southern Highlands", "code": "SHP", "region": "Highlands", "capital": "Mendi", "population": 510000},
    {"name": "Western Highlands", "code": "WHP", "region": "Highlands", "capital": "Mount Hagen", "population": 362000},
    {"name": "Eastern Highlands", "code": "EHP", "region": "Highlands", "capital": "Goroka", "population": 579000},
    {"name": "Simbu Province", "code": "SIM", "region": "Highlands", "capital": "Kundiawa", "population": 259000},
    {"name": "Enga Province", "code": "ENG", "region": "Highlands", "capital": "Wabag", "population": 432000},
    {"name": "Morobe Province", "code": "MOR", "region": "Momase", "capital": "Lae", "population": 674000},
    {"name": "Madang Province", "code": "MAD", "region": "Momase", "capital": "Madang", "population": 493000},
    {"name": "East Sepik Province", "code": "ESP", "region": "Momase", "capital": "Wewak", "population": 433000},
    {"name": "West Sepik Province", "code": "WSP", "region": "Momase", "capital": "Vanimo", "population": 248000},
    {"name": "Manus Province", "code": "MAN", "region": "Islands", "capital": "Lorengau", "population": 60000},
    {"name": "New Ireland Province", "code": "NIP", "region": "Islands", "capital": "Kavieng", "population": 194000},
    {"name": "East New Britain", "code": "ENB", "region": "Islands", "capital": "Kokopo", "population": 328000},
    {"name": "West New Britain", "code": "WNB", "region": "Islands", "capital": "Kimbe", "population": 264000},
    {"name": "Bougainville", "code": "ARB", "region": "Islands", "capital": "Buka", "population": 300000},
    {"name": "Hela Province", "code": "HLA", "region": "Highlands", "capital": "Tari", "population": 249000},
    {"name": "Jiwaka Province", "code": "JWK", "region": "Highlands", "capital": "Kurumul", "population": 343000},
    {"name": "National Capital District", "code": "NCD", "region": "Papua", "capital": "Port Moresby", "population": 364000},
]

LOOKUP_VALUES: dict[str, list[tuple[str, str]]] = {
    "funding_source": [
        ("GOVERNMENT", "Government Funding"),
        ("CORPORATE_1", "Corporate Partner 1"),
        ("CORPORATE_2", "Corporate Partner 2"),
        ("DEV_BANK", "Development Bank"),
        ("INTL_BANK", "International Bank"),
        ("INTL_AGENCY", "International Agency"),
        ("BILATERAL", "Bilateral Aid"),
        ("OTHER", "Other Sources"),
    ],
    "report_type": [
        ("DAILY", "Daily Report"),
        ("WEEKLY", "Weekly Report"),
        ("MONTHLY", "Monthly Report"),
        ("QUARTERLY", "Quarterly Report"),
        ("AD_HOC", "Ad-hoc Report"),
    ],
    "milestone_category": [
        ("DESIGN_COMPLETION", "Design Completion"),
        ("MOBILIZATION", "Mobilization"),
        ("CONSTRUCTION_START", "Construction Start"),
        ("SECTIONAL_COMPLETION", "Sectional Completion"),
        ("PRACTICAL_COMPLETION", "Practical Completion"),
        ("HANDOVER", "Handover"),
        ("QUALITY_INSPECTION", "Quality Inspection"),
        ("ENVIRONMENTAL_CLEARANCE", "Environmental Clearance"),
    ],
    "region": [
        ("PAPUA", "Papua"),
        ("HIGHLANDS", "Highlands"),
        ("MOMASE", "Momase"),
        ("ISLANDS", "Islands"),
    ],
    "incident_type": [
        ("INJURY", "Injury"),
        ("NEAR_MISS", "Near Miss"),
        ("ENVIRONMENTAL", "Environmental"),
        ("SECURITY", "Security"),
        ("EQUIPMENT_DAMAGE", "Equipment Damage"),
        ("PROPERTY_DAMAGE", "Property Damage"),
    ],
}

# name, description, colour
CONSTRUCTION_ACTIVITIES = [
    ("Line Drain Construction", "Installation of drainage systems", "#3b82f6"),
    ("Bridge Construction", "Building bridges and crossings", "#10b981"),
    ("Road Sealing", "Final road surface sealing", "#ef4444"),
]


def main() -> None:
    settings = get_settings()
    print(f"Using database: {settings.database_url}")

    init_engine()
    with session_scope() as session:
        existing = set(session.scalars(select(Province.code)).all())
        new_provinces = [Province(**data) for data in PNG_PROVINCES if data["code"] not in existing]
        session.add_all(new_provinces)

        present = {(row.category, row.code) for row in session.scalars(select(LookupValue)).all()}
        new_values = [
            LookupValue(category=category, code=code, label=label, sort_order=sort_order)
            for category, values in LOOKUP_VALUES.items()
            for sort_order, (code, label) in enumerate(values, start=1)
            if (category, code) not in present
        ]
        session.add_all(new_values)

        named = {name.lower() for name in session.scalars(select(ConstructionActivity.name)).all()}
        new_activities = [
            ConstructionActivity(name=name, description=description, color=color)
            for name, description, color in CONSTRUCTION_ACTIVITIES
            if name.lower() not in named
        ]
        session.add_all(new_activities)
    print(
        f"Seed data inserted: {len(new_provinces)} provinces, {len(new_values)} lookup values, "
        f"{len(new_activities)} construction activities."
    )


if __name__ == "__main__":
    main()
