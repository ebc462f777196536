"""
Closed vocabularies shared by the normalizer, chunker and database layer.

Dependencies: enum (stdlib)
System role: Document and chunk classification enums
"""

import enum


class DocType(str, enum.Enum):
    """Legal document classification."""

    LAW = "law"
    CODE = "code"
    COURT_DECISION = "court_decision"
    CASSATION_RULING = "cassation_ruling"
    APPEAL_RULING = "appeal_ruling"
    FIRST_INSTANCE_RULING = "first_instance_ruling"
    CONSTITUTIONAL_COURT = "constitutional_court"
    GOVERNMENT_DECREE = "government_decree"
    PM_DECISION = "pm_decision"
    REGULATION = "regulation"
    INTERNATIONAL_TREATY = "international_treaty"
    ECHR_JUDGMENT = "echr_judgment"
    LEGAL_COMMENTARY = "legal_commentary"
    OTHER = "other"


COURT_DOC_TYPES = frozenset({
    DocType.COURT_DECISION,
    DocType.CASSATION_RULING,
    DocType.APPEAL_RULING,
    DocType.FIRST_INSTANCE_RULING,
    DocType.CONSTITUTIONAL_COURT,
    DocType.ECHR_JUDGMENT,
})


class Branch(str, enum.Enum):
    """Branch of law."""

    CRIMINAL = "criminal"
    CIVIL = "civil"
    ADMINISTRATIVE = "administrative"
    CONSTITUTIONAL = "constitutional"
    LABOR = "labor"
    FAMILY = "family"
    TAX = "tax"
    CUSTOMS = "customs"
    ELECTORAL = "electoral"
    LAND = "land"
    ENVIRONMENTAL = "environmental"
    INTERNATIONAL = "international"
    ECHR = "echr"
    OTHER = "other"


class CourtType(str, enum.Enum):
    """Court level of a ruling."""

    FIRST_INSTANCE = "first_instance"
    APPEAL = "appeal"
    CASSATION = "cassation"
    CONSTITUTIONAL = "constitutional"
    ECHR = "echr"


class Outcome(str, enum.Enum):
    """Disposition detected at the end of a ruling."""

    GRANTED = "granted"
    REJECTED = "rejected"
    PARTIAL = "partial"
    REMANDED = "remanded"
    DISCONTINUED = "discontinued"


class ChunkType(str, enum.Enum):
    """Structural role of a chunk."""

    HEADER = "header"
    PREAMBLE = "preamble"
    ARTICLE = "article"
    TREATY_ARTICLE = "treaty_article"
    FACTS = "facts"
    REASONING = "reasoning"
    OPERATIVE = "operative"
    RESOLUTION = "resolution"
    DISSENT = "dissent"
    PROCEDURAL_HISTORY = "procedural_history"
    APPELLANT_ARGUMENTS = "appellant_arguments"
    RESPONDENT_ARGUMENTS = "respondent_arguments"
    NORM_INTERPRETATION = "norm_interpretation"
    PROCEDURE = "procedure"
    LAW = "law"
    ASSESSMENT = "assessment"
    JUST_SATISFACTION = "just_satisfaction"
    CONCLUSION = "conclusion"
    TABLE = "table"
    REFERENCE_LIST = "reference_list"
    FULL_TEXT = "full_text"
    OTHER = "other"
