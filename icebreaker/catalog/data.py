"""Data categories that can be found on terminals."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DataCategory(str, Enum):
    """Kinds of data a terminal may hold."""

    CREDITS = "Credits"
    TRANSFERS = "Transfers"
    PERSONAL_RECORDS = "PersonalRecords"
    EMAILS = "Emails"
    FINANCIAL_RECORDS = "FinancialRecords"
    CORPORATE_SECRETS = "CorporateSecrets"
    RESEARCH_DATA = "ResearchData"
    MEDICAL_RECORDS = "MedicalRecords"
    POLICE_RECORDS = "PoliceRecords"
    SECURITY_CODES = "SecurityCodes"
    MILITARY_INTEL = "MilitaryIntel"
    BLUEPRINTS = "Blueprints"


# Categories paid out as credits instead of data records
CURRENCY_CATEGORIES: frozenset[DataCategory] = frozenset(
    {DataCategory.CREDITS, DataCategory.TRANSFERS}
)


@dataclass(frozen=True)
class DataCategoryDef:
    """Static description of one data category."""

    category: DataCategory
    description: str
    base_value: int
    illegal: bool


DATA_TABLE: dict[DataCategory, DataCategoryDef] = {
    DataCategory.CREDITS: DataCategoryDef(
        DataCategory.CREDITS, "Liquid account balance", 0, True
    ),
    DataCategory.TRANSFERS: DataCategoryDef(
        DataCategory.TRANSFERS, "Pending wire transfers", 0, True
    ),
    DataCategory.PERSONAL_RECORDS: DataCategoryDef(
        DataCategory.PERSONAL_RECORDS, "Names, addresses and ID numbers", 40, True
    ),
    DataCategory.EMAILS: DataCategoryDef(
        DataCategory.EMAILS, "Mailbox archive", 15, False
    ),
    DataCategory.FINANCIAL_RECORDS: DataCategoryDef(
        DataCategory.FINANCIAL_RECORDS, "Ledgers and account statements", 80, True
    ),
    DataCategory.CORPORATE_SECRETS: DataCategoryDef(
        DataCategory.CORPORATE_SECRETS, "Internal strategy documents", 150, True
    ),
    DataCategory.RESEARCH_DATA: DataCategoryDef(
        DataCategory.RESEARCH_DATA, "Unpublished research results", 200, False
    ),
    DataCategory.MEDICAL_RECORDS: DataCategoryDef(
        DataCategory.MEDICAL_RECORDS, "Patient histories", 60, True
    ),
    DataCategory.POLICE_RECORDS: DataCategoryDef(
        DataCategory.POLICE_RECORDS, "Case files and warrants", 120, True
    ),
    DataCategory.SECURITY_CODES: DataCategoryDef(
        DataCategory.SECURITY_CODES, "Door and alarm access codes", 100, True
    ),
    DataCategory.MILITARY_INTEL: DataCategoryDef(
        DataCategory.MILITARY_INTEL, "Troop movements and deployment plans", 300, True
    ),
    DataCategory.BLUEPRINTS: DataCategoryDef(
        DataCategory.BLUEPRINTS, "Building and device schematics", 90, False
    ),
}


def get_data_category(category: DataCategory | str) -> DataCategoryDef:
    """Look up a data category definition by enum member or name."""
    return DATA_TABLE[DataCategory(category)]


def is_currency(category: DataCategory | str) -> bool:
    return DataCategory(category) in CURRENCY_CATEGORIES
