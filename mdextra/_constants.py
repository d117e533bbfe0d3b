"""Common literal values used across mdextra.

These constants keep CSS class names and diagnostic wording centralized so the
formatter stages, the CLI, and tests can import the same values without
drifting. Intended for internal use within the mdextra package.

Examples
--------
>>> from mdextra import _constants
>>> _constants.UNDEFINED_FOOTNOTE_WARNING.format(id="note")
'undefined footnote id - note'
>>> _constants.FOOTNOTE_HREF_TEMPLATE.format(id="note")
'#footnote:note'
"""

TOC_CLASS = "toc"
HIGHLIGHT_CLASS = "syntaxhl"
MACRO_ERROR_CLASS = "flash error"

FOOTNOTE_ID_TEMPLATE = "footnote:{id}"
FOOTNOTE_HREF_TEMPLATE = "#footnote:{id}"
FOOTNOTE_REF_ID_TEMPLATE = "footnote-ref:{id}"
MISSING_FOOTNOTE_LABEL = "[?]"

ILLEGAL_TOC_PARAMETER_WARNING = (
    "illegal TOC parameter - {param} (valid example: 'h2..h4')"
)
ILLEGAL_HEADING_STRUCTURE_WARNING = (
    "illegal structure of headings - h{start} should be set before h{first}"
)
UNDEFINED_FOOTNOTE_WARNING = "undefined footnote id - {id}"
LINK_ID_NOT_FOUND_WARNING = "link-id not found - {id}"
MACRO_FAILED_WARNING = "macro failed - {name}: {error}"

FALLBACK_TEMPLATE = (
    "<pre>problem parsing wiki text: {message}\noriginal text: \n{text}</pre>"
)
