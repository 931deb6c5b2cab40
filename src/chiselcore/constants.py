"""
Tag catalogs and numeric thresholds shared by the cleaning and extraction stages.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List

# Elements removed outright, content and all.
MANUALLY_CLEANED: List[str] = [
    # important
    "aside",
    "embed",
    "footer",
    "form",
    "head",
    "iframe",
    "menu",
    "object",
    "script",
    # other content
    "applet",
    "audio",
    "canvas",
    "figure",
    "map",
    "picture",
    "svg",
    "video",
    # secondary
    "area",
    "blink",
    "button",
    "datalist",
    "dialog",
    "frame",
    "frameset",
    "fieldset",
    "link",
    "input",
    "ins",
    "label",
    "legend",
    "marquee",
    "math",
    "menuitem",
    "nav",
    "noindex",
    "noscript",
    "optgroup",
    "option",
    "output",
    "param",
    "progress",
    "rp",
    "rt",
    "rtc",
    "select",
    "source",
    "style",
    "track",
    "textarea",
    "time",
    "use",
]

# Wrapper tags whose content is hoisted into the parent.
MANUALLY_STRIPPED: List[str] = [
    "abbr",
    "acronym",
    "address",
    "bdi",
    "bdo",
    "big",
    "cite",
    "data",
    "dfn",
    "font",
    "hgroup",
    "img",
    "ins",
    "mark",
    "meta",
    "ruby",
    "small",
    "tbody",
    "template",
    "tfoot",
    "thead",
]

TABLE_CLEANING: List[str] = ["table", "td", "th", "tr"]

PRESERVE_IMG_CLEANING: FrozenSet[str] = frozenset({"figure", "picture", "source"})

# Wrappers deleted when they hold no node at all.
CUT_EMPTY_ELEMS: FrozenSet[str] = frozenset(
    {
        "article",
        "b",
        "blockquote",
        "dd",
        "div",
        "dt",
        "em",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "i",
        "li",
        "main",
        "p",
        "pre",
        "q",
        "section",
        "span",
        "strong",
    }
)

TAG_CATALOG: FrozenSet[str] = frozenset({"blockquote", "code", "del", "head", "hi", "lb", "list", "p", "pre", "quote"})

TABLE_TAGS: FrozenSet[str] = frozenset({"table", "td", "th", "tr"})
TABLE_ELEMS: FrozenSet[str] = frozenset({"td", "th"})
TABLE_ALL: FrozenSet[str] = frozenset({"td", "th", "hi"})

FORMATTING: FrozenSet[str] = frozenset({"hi", "ref", "span"})
P_FORMATTING: FrozenSet[str] = frozenset({"hi", "ref"})
NOT_AT_THE_END: FrozenSet[str] = frozenset({"head", "ref"})

# Parents under which an inline element may stay unwrapped.
FORMATTING_PROTECTED: FrozenSet[str] = frozenset(
    {"cell", "code", "head", "hi", "item", "list", "p", "quote", "ref", "td"}
)

# The only tags allowed in a finished output tree.
OUTPUT_TAGS: FrozenSet[str] = frozenset(
    {
        "body",
        "head",
        "p",
        "list",
        "item",
        "quote",
        "code",
        "table",
        "row",
        "cell",
        "graphic",
        "hi",
        "ref",
        "lb",
        "del",
    }
)

REND_TAG_MAPPING: Dict[str, str] = {
    "em": "#i",
    "i": "#i",
    "b": "#b",
    "strong": "#b",
    "u": "#u",
    "kbd": "#t",
    "samp": "#t",
    "tt": "#t",
    "var": "#t",
    "sub": "#sub",
    "sup": "#sup",
}

CODE_INDICATORS: List[str] = ["{", '("', "('", "\n    "]

# Size thresholds, in characters.
MIN_EXTRACTED_SIZE = 200
MIN_EXTRACTED_COMM_SIZE = 10
MIN_OUTPUT_SIZE = 1
MAX_IMAGE_SRC_LENGTH = 8192

DEDUP_CAPACITY = 1000
DEDUP_MIN_LENGTH = 10

# Baseline fallback thresholds.
BASELINE_MIN_PARAGRAPH = 50
BASELINE_MIN_ITEM = 30
BASELINE_MIN_QUOTE = 40
BASELINE_MIN_CODE = 20
BASELINE_MIN_DIV = 50
BASELINE_DIV_TRIGGER = 200
SMART_BASELINE_ACCEPT = 200

# Attributes kept on output elements.
OUTPUT_ATTRIBUTES: FrozenSet[str] = frozenset({"alt", "lang", "rend", "role", "span", "src", "target", "title"})
