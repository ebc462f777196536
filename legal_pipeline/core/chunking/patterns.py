"""
Structural markers recognised by the chunking strategies.

Compiled once at import. Section patterns are matched anywhere and then
filtered to line starts by the section scanner, so they carry no anchors.

Dependencies: re (stdlib)
System role: Structural vocabulary for legislation, rulings, ECHR and treaties
"""

from dataclasses import dataclass
import re

from legal_pipeline.models.enums import ChunkType

# "Article 12." / "Статья 12." / "Հոդված 12." / "Հոդված\n12։" / "Article 345.2."
ARTICLE_HEADER_RE = re.compile(
    r"^[ \t]*(?:Article|Art\.|Статья|Հոդված)\s+"
    r"(?P<number>\d+(?:[.-]\d+)*)\s*[.։](?!\d)",
    re.MULTILINE | re.IGNORECASE,
)

# Treaty headings need no terminator: "Article 5", "ARTICLE V", "Article 5 - Right to liberty"
TREATY_ARTICLE_RE = re.compile(
    r"^[ \t]*(?:Article|Статья|Հոդված)\s+"
    r"(?P<number>\d+[A-Za-z]?|[IVXLC]+)\b[^\n]{0,120}$",
    re.MULTILINE | re.IGNORECASE,
)

PART_RE = re.compile(r"^[ \t]*(\d+)\s*[.)]\s+", re.MULTILINE)

# What may precede a section heading on its line: nothing, or a numeral like "III.", "2)", "(b)"
LINE_PREFIX_RE = re.compile(
    r"^\s*(?:\(?(?:[IVXLC]+|\d{1,3}|[A-Za-z])[.)]\s*)?$",
    re.IGNORECASE,
)

TABLE_MIN_LINES = 3
TABLE_LINE_RATIO = 0.6

# Table regions embedded in structured text
TABLE_MIN_ROWS = 2
PIPE_ROW_RE = re.compile(r"^[ \t]*\|.+\|[ \t]*$")
TAB_ROW_RE = re.compile(r"\t.*\t")


@dataclass(frozen=True)
class SectionPattern:
    """A heading pattern and the chunk type it opens."""

    regex: re.Pattern
    chunk_type: ChunkType
    label: str
    # True when group 1 captures an article number that keys the section
    keyed_by_article: bool = False


def _section(pattern: str, chunk_type: ChunkType, label: str, keyed: bool = False) -> SectionPattern:
    return SectionPattern(re.compile(pattern, re.IGNORECASE), chunk_type, label, keyed)


COURT_SECTION_PATTERNS: tuple[SectionPattern, ...] = (
    # պատճառական մաս (reasoning part)
    _section(r"պատճառական\s+մաս", ChunkType.REASONING, "Reasoning"),
    # նկարագրական մաս (descriptive part)
    _section(r"նկարագրական\s+մաս", ChunkType.FACTS, "Facts"),
    # պահանջատվական (operative)
    _section(r"պահանջատվական", ChunkType.RESOLUTION, "Resolution"),
    # եզրակացություն (conclusion)
    _section(r"եզրակացություն", ChunkType.RESOLUTION, "Resolution"),
    # հատուկ կարծիք (dissenting opinion)
    _section(r"հատուկ\s+կարծիք", ChunkType.DISSENT, "Dissenting opinion"),
    # գործի դատավարական նախապատմություն (procedural background)
    _section(
        r"դատավարական\s+նախապատմություն",
        ChunkType.PROCEDURAL_HISTORY,
        "Procedural history",
    ),
    # գործի հանգամանքներ (circumstances of the case)
    _section(r"գործի\s+հանգամանք", ChunkType.FACTS, "Facts"),
    # բողոքի հիմքերը (grounds of the appeal)
    _section(
        r"բողոքի\s+հիմքեր",
        ChunkType.APPELLANT_ARGUMENTS,
        "Appellant arguments",
    ),
    # բողոքի պատասխան (response to the appeal)
    _section(
        r"բողոքի\s+պատասխան",
        ChunkType.RESPONDENT_ARGUMENTS,
        "Respondent arguments",
    ),
    # նորմի մեկնաբանություն (interpretation of the norm)
    _section(
        r"նորմի\s+մեկնաբանություն",
        ChunkType.NORM_INTERPRETATION,
        "Norm interpretation",
    ),
    # վճիռեց (decided)
    _section(r"վճիռեց", ChunkType.RESOLUTION, "Resolution"),
    # Russian: фактические обстоятельства
    _section(r"фактически[ея]?\s+обстоятельств", ChunkType.FACTS, "Facts"),
    # мотивировочная часть
    _section(r"мотивировочная\s+часть", ChunkType.REASONING, "Reasoning"),
    # резолютивная часть
    _section(r"резолютивная\s+часть", ChunkType.RESOLUTION, "Resolution"),
    # ход рассмотрения дела / процессуальная история
    _section(
        r"ход\s+рассмотрения\s+дела|процессуальная\s+история",
        ChunkType.PROCEDURAL_HISTORY,
        "Procedural history",
    ),
    # доводы жалобы
    _section(
        r"доводы\s+(?:\w+\s+)?жалобы|доводы\s+заявителя",
        ChunkType.APPELLANT_ARGUMENTS,
        "Appellant arguments",
    ),
    # возражения на жалобу / отзыв на жалобу
    _section(
        r"возражения\s+на\s+жалобу|отзыв\s+на\s+(?:\w+\s+)?жалобу",
        ChunkType.RESPONDENT_ARGUMENTS,
        "Respondent arguments",
    ),
    # толкование нормы
    _section(r"толкование\s+норм", ChunkType.NORM_INTERPRETATION, "Norm interpretation"),
    # постановил / решил
    _section(r"постановил", ChunkType.RESOLUTION, "Resolution"),
    _section(r"решил", ChunkType.RESOLUTION, "Resolution"),
    # особое мнение
    _section(r"особое\s+мнение", ChunkType.DISSENT, "Dissenting opinion"),
    # English
    _section(
        r"procedural\s+(?:history|background)|course\s+of\s+(?:the\s+)?proceedings",
        ChunkType.PROCEDURAL_HISTORY,
        "Procedural history",
    ),
    _section(
        r"(?:the\s+)?facts\b|circumstances\s+of\s+the\s+case|factual\s+background",
        ChunkType.FACTS,
        "Facts",
    ),
    _section(
        r"(?:arguments|submissions)\s+of\s+the\s+appellant|appellant'?s\s+(?:arguments|submissions)|grounds\s+of\s+appeal",
        ChunkType.APPELLANT_ARGUMENTS,
        "Appellant arguments",
    ),
    _section(
        r"(?:arguments|submissions)\s+of\s+the\s+respondent|respondent'?s\s+(?:arguments|submissions|reply)",
        ChunkType.RESPONDENT_ARGUMENTS,
        "Respondent arguments",
    ),
    _section(
        r"interpretation\s+of\s+the\s+(?:norm|provision|law)",
        ChunkType.NORM_INTERPRETATION,
        "Norm interpretation",
    ),
    _section(
        r"reasoning\b|reasons\s+for\s+the\s+(?:decision|judgment)|the\s+court'?s\s+(?:assessment|findings)",
        ChunkType.REASONING,
        "Reasoning",
    ),
    _section(r"operative\s+part", ChunkType.OPERATIVE, "Operative part"),
    _section(
        r"(?:the\s+court\s+)?(?:hereby\s+)?(?:decides|decided|rules|ruled|orders|ordered|holds)\s*:",
        ChunkType.RESOLUTION,
        "Resolution",
    ),
    _section(
        r"(?:partly\s+)?(?:dissenting|separate|concurring)\s+opinion",
        ChunkType.DISSENT,
        "Dissenting opinion",
    ),
)

ECHR_SECTION_PATTERNS: tuple[SectionPattern, ...] = (
    # ԸՆԹԱՑԱԿԱՐԳ / ПРОЦЕДУРА
    _section(r"procedure\b|процедура\b|ընթացակարգ", ChunkType.PROCEDURE, "Procedure"),
    _section(
        r"alleged\s+violations?\s+of\s+articles?\s+(\d+)|"
        r"предполагаемое\s+нарушение\s+стать[иь]\s+(\d+)",
        ChunkType.LAW,
        "Alleged violation",
        keyed=True,
    ),
    # ՓԱՍՏԵՐ / ФАКТЫ / գործի հանգամանքներ
    _section(
        r"the\s+facts\b|circumstances\s+of\s+the\s+case|"
        r"факты\b|обстоятельства\s+дела|"
        r"փաստեր|գործի\s+հանգամանք",
        ChunkType.FACTS,
        "Facts",
    ),
    # ԻՐԱՎՈՒՆՔ / ПРАВО
    _section(
        r"the\s+law\b|relevant\s+(?:domestic\s+)?(?:legal\s+framework|law)\b|"
        r"право\b|իրավունք\b",
        ChunkType.LAW,
        "Law",
    ),
    _section(
        r"(?:the\s+)?court'?s\s+assessment|assessment\s+of\s+the\s+court|оценка\s+суда",
        ChunkType.ASSESSMENT,
        "Assessment",
    ),
    _section(
        r"application\s+of\s+article\s+41|just\s+satisfaction|применение\s+статьи\s+41",
        ChunkType.JUST_SATISFACTION,
        "Just satisfaction",
    ),
    _section(
        r"for\s+these\s+reasons|по\s+этим\s+основаниям",
        ChunkType.CONCLUSION,
        "Conclusion",
    ),
    _section(
        r"(?:partly\s+)?(?:dissenting|separate|concurring)\s+opinion|особое\s+мнение",
        ChunkType.DISSENT,
        "Dissenting opinion",
    ),
)
