"""
Compiled classification and extraction patterns for Armenian legal text.

Armenian is the primary language; Russian and English equivalents cover
bilingual documents and translated material. All patterns compile once at
import.

Dependencies: re (stdlib)
System role: Keyword vocabulary for the document normalizer
"""

import re

# ─── Dates ──────────────────────────────────────────────────────────

MONTHS: dict[str, int] = {
    # Armenian
    "հունվար": 1,
    "փետրվար": 2,
    "մարտ": 3,
    "ապրիլ": 4,
    "մայիս": 5,
    "հունիս": 6,
    "հուլիս": 7,
    "օգոստոս": 8,
    "սեպտեմբեր": 9,
    "հոկտեմբեր": 10,
    "նոյեմբեր": 11,
    "դեկտեմբեր": 12,
    # Russian, genitive
    "января": 1,
    "февраля": 2,
    "марта": 3,
    "апреля": 4,
    "мая": 5,
    "июня": 6,
    "июля": 7,
    "августа": 8,
    "сентября": 9,
    "октября": 10,
    "ноября": 11,
    "декабря": 12,
    # English
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

_MONTH_ALTS = "|".join(sorted(MONTHS, key=len, reverse=True))

# "5 մարտի 2020 թ." / "5 марта 2020" / "5 March 2020"
MONTH_NAME_DATE_RE = re.compile(
    r"\b(\d{1,2})\s+(" + _MONTH_ALTS + r")ի?\s+(\d{4})",
    re.I,
)
# "March 5, 2020"
MONTH_FIRST_DATE_RE = re.compile(
    r"\b(" + _MONTH_ALTS + r")\s+(\d{1,2}),?\s+(\d{4})",
    re.I,
)
ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})[./](\d{1,2})[./](\d{4})\b")
ISO_DATE_SHAPE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# ─── Identifiers ────────────────────────────────────────────────────

# Armenian act numbers such as "ՀՕ-123-Ն"
ACT_NUMBER_RE = re.compile(r"[Ա-֏]{1,4}-\d{1,6}-[Ա-֏]")
# "No. 123-N" / "№ 123"
ACT_NUMBER_LATIN_RE = re.compile(r"(?:\bNo\.?|№)\s*(\d{1,6}(?:-[A-ZА-ЯԱ-Ֆ]{1,3})?)\b")

CASE_NUMBER_PATTERNS: tuple[re.Pattern, ...] = (
    # Armenian "գործ թիվ" (case number) followed by the number
    re.compile(
        r"գործ\s+թիվ[.:]?\s*([A-ZԱ-Ֆ]{1,5}[\-/]\d[\d\-/]+)",
        re.I,
    ),
    # Standalone formatted numbers: ԵԴ/1234/02/24, ՀՀ-123-2024
    re.compile(r"\b([A-ZԱ-Ֆ]{2,5}[\-/]\d{1,6}[\-/]\d{2,4}(?:[\-/]\d{2,4})?)\b"),
    # Russian "дело №"
    re.compile(
        r"дел[оу]\s*(?:№|N|No\.?)\s*([A-ZА-Я\d][\d\-/A-ZА-Я]+)",
        re.I,
    ),
    # English "Case No."
    re.compile(r"\bcase\s+no\.?\s*([A-Z\d][\w\-/]*\d[\w\-/]*)", re.I),
)

ECHR_APPLICATION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\bapplications?\s+no[s]?\.?\s*(\d{1,6}/\d{2})", re.I),
    # Russian "жалоба №"
    re.compile(r"жалоб[аы]\s*№\s*(\d{1,6}/\d{2})", re.I),
    # Armenian "գանգատ թիվ" (application no.)
    re.compile(r"գանգատ\s+թիվ\s*(\d{1,6}/\d{2})", re.I),
)

TREATY_SERIES_RE = re.compile(r"\b(?:CETS|ETS|UNTS)\s*No\.?\s*(\d{1,5})\b", re.I)

# ─── Courts ─────────────────────────────────────────────────────────

# ՄԻԵԴ (ECHR abbreviation)
ECHR_RE = re.compile(
    r"ՄԻԵԴ|European\s+Court\s+of\s+Human\s+Rights|"
    r"Европейский\s+суд\s+по\s+правам\s+человека|ЕСПЧ",
    re.I,
)
# սահմանադրական (constitutional)
CONSTITUTIONAL_RE = re.compile(
    r"սահմանադրական|\bconstitutional\s+court\b|конституционн\w*\s+суд",
    re.I,
)
# վճռաբեկ (cassation)
CASSATION_RE = re.compile(
    r"վճռաբեկ|\bcourt\s+of\s+cassation\b|\bcassation\b|кассационн",
    re.I,
)
# վերաքննիչ (appeal court)
APPEAL_RE = re.compile(
    r"վերաքննիչ|\bcourt\s+of\s+appeals?\b|апелляционн",
    re.I,
)
# առաջին ատյանի (first instance)
FIRST_INSTANCE_RE = re.compile(
    r"առաջին\s+ատյանի|\bfirst\s+instance\b|первой\s+инстанции",
    re.I,
)
# դատարան (court)
COURT_WORD_RE = re.compile(r"դատարան|\bcourt\b|\bсуд", re.I)

# ─── Acts ───────────────────────────────────────────────────────────

# միջազգային պայմանագիր (international treaty)
TREATY_RE = re.compile(
    r"միջազգային\s+պայմանագիր|\bhigh\s+contracting\s+parties\b|"
    r"Договаривающиеся\s+Стороны",
    re.I,
)
TREATY_TITLE_RE = re.compile(
    r"^\s*(?:convention|treaty|agreement|protocol|конвенция|договор|соглашение)\b",
    re.I,
)
# կառավարություն (government)
GOVERNMENT_RE = re.compile(
    r"կառավարություն|\bgovernment\s+(?:of\s+the\s+republic|decree|decision)\b|правительств",
    re.I,
)
# վարչապետ (prime minister)
PM_RE = re.compile(
    r"վարչապետ|\bprime\s+minister\b|премьер-министр",
    re.I,
)
# կանոնակարգ (regulation)
REGULATION_RE = re.compile(
    r"կանոնակարգ|\bregulations?\b|положение",
    re.I,
)
# մեկնաբանություն (commentary)
COMMENTARY_RE = re.compile(
    r"մեկնաբանություն|\bcommentary\b|комментарий",
    re.I,
)
# օրենսգիրք (code)
CODE_RE = re.compile(r"օրենսգիրք|\bcode\b|кодекс", re.I)
# օրենք (law)
LAW_RE = re.compile(r"օրենք|\blaw\b|закон", re.I)

# ─── Branches ───────────────────────────────────────────────────────

BRANCH_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    # քրեական (criminal)
    ("criminal", re.compile(r"քրեական|\bcriminal\b|уголовн", re.I)),
    # քաղաքացիական (civil)
    ("civil", re.compile(r"քաղաքացիական|\bcivil\b|гражданск", re.I)),
    # վարչական (administrative)
    ("administrative", re.compile(r"վարչական|\badministrative\b|административн", re.I)),
    # աշխատանքային (labor)
    ("labor", re.compile(r"աշխատանքային|\blabou?r\b|трудов", re.I)),
    # ընտանեկան (family)
    ("family", re.compile(r"ընտանեկան|\bfamily\b|семейн", re.I)),
    # հարկային (tax)
    ("tax", re.compile(r"հարկային|\btax(?:ation)?\b|налог", re.I)),
    # մաքսային (customs)
    ("customs", re.compile(r"մաքսային|\bcustoms\b|таможен", re.I)),
    # ընտրական (electoral)
    ("electoral", re.compile(r"ընտրական|\belectoral\b|избирательн", re.I)),
    # հողային (land)
    ("land", re.compile(r"հողային|\bland\s+code\b|земельн", re.I)),
    # բնապահպանական (environmental)
    ("environmental", re.compile(r"բնապահպանական|\benvironmental\b|экологическ", re.I)),
)

# ─── Outcomes (checked against the tail of a ruling) ───────────────

OUTCOME_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    (
        "partial",
        re.compile(
            r"Մասնակիորեն|բավարարվել\s+մասնակի|"
            r"\bpartially\s+(?:granted|upheld|allowed|satisfied)\b|частично",
            re.I,
        ),
    ),
    (
        "granted",
        re.compile(
            r"Բավարարել|\b(?:granted|upheld|allowed)\b|(?<!без )удовлетвор",
            re.I,
        ),
    ),
    (
        "rejected",
        re.compile(
            r"Մերժել|\b(?:dismiss(?:ed)?|reject(?:ed)?)\b|отказать|без\s+удовлетворения",
            re.I,
        ),
    ),
    (
        "remanded",
        re.compile(
            r"Վերադարձնել|\b(?:remanded|remitted)\b|направить\s+на\s+новое",
            re.I,
        ),
    ),
    (
        "discontinued",
        re.compile(
            r"Կարճել|\b(?:discontinued|struck\s+out)\b|прекратить",
            re.I,
        ),
    ),
)

# ─── Sources ────────────────────────────────────────────────────────

SOURCE_HOSTS: tuple[tuple[str, str], ...] = (
    ("arlis.am", "arlis.am"),
    ("datalex.am", "datalex.am"),
    ("hudoc.echr.coe.int", "hudoc"),
    ("echr.coe.int", "echr.coe.int"),
    ("concourt.am", "concourt.am"),
)
