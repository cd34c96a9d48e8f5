"""Constants for TOON encoding, decoding and extraction."""

# List markers
LIST_ITEM_MARKER = "-"
LIST_ITEM_PREFIX = "- "

# Structural characters; array headers may declare TAB or PIPE, the encoder writes COMMA
COMMA = ","
COLON = ":"
PIPE = "|"
TAB = "\t"
COMMENT_PREFIX = "#"

# Literals
NULL_LITERAL = "null"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

DOUBLE_QUOTE = '"'
BACKSLASH = "\\"

DEFAULT_INDENT = 2

# Upper bound on extract-convert-splice passes over one text
MAX_EXTRACTION_PASSES = 100

# Largest integer a float can hold exactly
MAX_SAFE_INTEGER = 2**53
