"""Keyword patterns and diagnostic message templates used by the content specification parser."""
import re

# Topic ID shapes
NEW_TOPIC_ID = r"N\d*"
CLONED_TOPIC_ID = r"C\d+"
DUPLICATE_TOPIC_ID = r"X\d+"
CLONED_DUPLICATE_TOPIC_ID = r"XC\d+"
EXISTING_TOPIC_ID = r"\d+"
TARGET_ID = r"T(?:\d+|-[ ]*[A-Za-z][A-Za-z\d\-_]*)"

NEW_TOPIC_ID_REGEX = re.compile(rf"^{NEW_TOPIC_ID}$")
CLONED_TOPIC_ID_REGEX = re.compile(rf"^{CLONED_TOPIC_ID}$")
DUPLICATE_TOPIC_ID_REGEX = re.compile(rf"^{DUPLICATE_TOPIC_ID}$")
CLONED_DUPLICATE_TOPIC_ID_REGEX = re.compile(rf"^{CLONED_DUPLICATE_TOPIC_ID}$")
EXISTING_TOPIC_ID_REGEX = re.compile(rf"^{EXISTING_TOPIC_ID}$")
UNIQUE_NEW_TOPIC_ID_REGEX = re.compile(r"^N\d+$")
ALL_TOPIC_ID_REGEX = re.compile(
    rf"^(?:{NEW_TOPIC_ID}|{CLONED_TOPIC_ID}|{CLONED_DUPLICATE_TOPIC_ID}|{DUPLICATE_TOPIC_ID}|{EXISTING_TOPIC_ID})$"
)
TARGET_REGEX = re.compile(rf"^{TARGET_ID}$")
RELATION_ID = rf"(?:{TARGET_ID}|{NEW_TOPIC_ID}|{CLONED_DUPLICATE_TOPIC_ID}|{CLONED_TOPIC_ID}|{DUPLICATE_TOPIC_ID}|\d+)"
RELATION_ID_REGEX = re.compile(rf"^{RELATION_ID}$")
RELATION_ID_LONG_REGEX = re.compile(rf"^(?P<title>.*?)[ ]*\[[ ]*(?P<id>{RELATION_ID})[ ]*\]$", re.DOTALL)
RELATION_ID_ANYWHERE_REGEX = re.compile(rf"(?<![\w-]){RELATION_ID}(?![\w-])")

# Lines
BLANK_LINE_REGEX = re.compile(r"^\s*$")
COMMENT_REGEX = re.compile(r"^\s*#")
METADATA_LINE_REGEX = re.compile(r"^\w[\w.\s-]+=.*$", re.DOTALL)
COMMON_CONTENT_REGEX = re.compile(r"^.*\[\s*Common\s+Content.*$", re.IGNORECASE | re.DOTALL)
INITIAL_CONTENT_REGEX = re.compile(r"^INITIAL[ ]+TEXT[ ]*(?:(?::.*)|$)", re.DOTALL)
LEVEL_REGEX = re.compile(r"^(?:CHAPTER|SECTION|APPENDIX|PART|PREFACE|PROCESS)[ ]*(?:(?::.*)|$)", re.DOTALL)
PREFIXED_TOPIC_REGEX = re.compile(
    rf"^(?P<id>{CLONED_DUPLICATE_TOPIC_ID}|{NEW_TOPIC_ID}|{CLONED_TOPIC_ID}|{DUPLICATE_TOPIC_ID}|{EXISTING_TOPIC_ID})"
    r"[ ]*:(?P<rest>.*)$",
    re.DOTALL,
)
BARE_TOPIC_ID_REGEX = re.compile(
    rf"^(?P<id>{CLONED_DUPLICATE_TOPIC_ID}|{CLONED_TOPIC_ID}|{DUPLICATE_TOPIC_ID}|{EXISTING_TOPIC_ID})"
    r"[ ]*(?:#(?P<comment>.*))?$"
)
CONTINUATION_SET_REGEX = re.compile(
    r"^\[[ ]*(?:(?:R|RELATED-TO|REFER-TO|P|PREREQUISITE|L|LINK-LIST|NEXT|PREV)[ ]*:|T(?:\d|-))"
)

# Classifier, applied in this order to upper-cased attribute list content
RELATED_REGEX = re.compile(r"^(?:R|RELATED-TO|REFER-TO)[ ]*:", re.DOTALL)
PREREQUISITE_REGEX = re.compile(r"^(?:P|PREREQUISITE)[ ]*:", re.DOTALL)
LINK_LIST_REGEX = re.compile(r"^(?:L|LINK-LIST)[ ]*:", re.DOTALL)
NEXT_REGEX = re.compile(r"^NEXT[ ]*:", re.DOTALL)
PREV_REGEX = re.compile(r"^PREV[ ]*:", re.DOTALL)
EXTERNAL_TARGET_REGEX = re.compile(r"^ET(?:\d+|-[ ]*[A-Z][A-Z\d\-_]*)$")
EXTERNAL_CSP_REGEX = re.compile(r"^CS\d+[ ]*(?::[ ]*\d+)?$")

# Options
CLONED_ID_ATTRIBUTE_REGEX = re.compile(r"^C:[ ]*(\d+)$")
REVISION_ATTRIBUTE_REGEX = re.compile(r"^rev[ ]*:(.*)$", re.IGNORECASE)
FILE_ID_REGEX = re.compile(r"^\d+$")
FILE_ID_LONG_REGEX = re.compile(
    r"^(?P<title>[^\[\]]*?)[ ]*\[[ ]*(?P<id>\d+)[ ]*(?:,[ ]*rev:[ ]*(?P<rev>\d+))?[ ]*\]$", re.IGNORECASE
)

# Metadata keys
SPACES_KEY = "Spaces"
DEBUG_KEY = "Debug"
INLINE_INJECTION_KEY = "Inline Injection"
FILES_KEYS = ("Additional Files", "Files")
CHECKSUM_KEY = "CHECKSUM"
ID_KEY = "ID"
TITLE_KEY = "Title"
ABSTRACT_KEYS = ("Abstract", "Description")
SPEC_TOPIC_KEYS = ("Legal Notice", "Revision History", "Author Group", "Feedback")
MULTILINE_KEY_REGEX = re.compile(r"^(?:(?:[\w\-]+-)?publican\.cfg|Entities)$", re.IGNORECASE)

COMMON_CONTENT_UNIQUE_ID = "L{line}-CommonContent"
DUMMY_UNIQUE_ID = "-1"

# Messages
LINE = "Line {line}: "
CS_LINE_MSG = "\n       -> {text}"
INVALID_CS = "Invalid Content Specification!"
INVALID_TOPIC = "Invalid Topic!"
INVALID_METADATA = "Invalid metadata!"
GENERIC_INVALID_LEVEL = "Invalid Chapter/Section/Appendix/Part/Preface/Process!"

ERROR_INCORRECT_INDENTATION_MSG = INVALID_CS + " Indentation is invalid."
ERROR_INCORRECT_EDITED_MODE_MSG = INVALID_CS + " The first line must be CHECKSUM or ID when editing a specification."
ERROR_INCORRECT_NEW_MODE_MSG = INVALID_CS + " The first line must be the Title when creating a specification."

ERROR_DUPLICATED_RELATIONSHIP_TYPE_MSG = "Duplicated bracket types found."
ERROR_MISSING_OPENING_BRACKET_MSG = "Missing opening bracket ([) detected."
ERROR_MISSING_ENDING_BRACKET_MSG = "Missing ending bracket (]) detected."
ERROR_MISSING_BRACKETS_MSG = "Missing brackets [] detected."
ERROR_MISSING_ATTRIBUTES_MSG = "Missing attribute detected."
ERROR_MISSING_SEPARATOR_MSG = "Missing separator ({separator}) detected."
ERROR_EMPTY_BRACKETS_MSG = "Empty brackets found."

ERROR_DUPLICATE_METADATA_MSG = INVALID_METADATA + ' "{key}" has already been defined.'
ERROR_INVALID_METADATA_FORMAT_MSG = INVALID_METADATA + " Incorrect metadata format."
ERROR_INVALID_MULTILINE_METADATA_MSG = INVALID_METADATA + " Incorrect multiple line metadata format."
ERROR_INVALID_NUMBER_MSG = INVALID_METADATA + ' The value for "{key}" must be a valid number.'
ERROR_INVALID_INJECTION_MSG = INVALID_METADATA + ' The value for "Inline Injection" must be "on" or "off".'
ERROR_INVALID_FILE_MSG = "Invalid Additional File! Incorrect file format."
WARN_DEBUG_IGNORE_MSG = 'Invalid debug setting "{value}". Debug must be 0, 1 or 2. The setting has been ignored.'

ERROR_INVALID_TOPIC_FORMAT_MSG = INVALID_TOPIC + " Incorrect topic format."
ERROR_INVALID_TITLE_ID_MSG = INVALID_TOPIC + " Title and ID must be specified."
ERROR_INVALID_TITLE_ID_TYPE_MSG = INVALID_TOPIC + " Title, Type and ID must be specified."
ERROR_INVALID_TOPIC_ID_MSG = INVALID_TOPIC + " The Topic ID specified is not a valid ID."
ERROR_DUPLICATE_ID_MSG = INVALID_TOPIC + " Duplicate topic ID ( {id} )."
ERROR_TOPIC_NEXT_PREV_MSG = INVALID_TOPIC + " Next and Previous relationships can't be used directly on topics."
ERROR_TOPIC_EXTERNAL_TARGET_MSG = INVALID_TOPIC + " Unable to use external targets on topics."
ERROR_TOPIC_EXTERNAL_CSP_MSG = INVALID_TOPIC + " Unable to use external content specs on topics."
ERROR_INVALID_REVISION_MSG = INVALID_TOPIC + " Revision attribute must be a valid number."
ERROR_TOPIC_ID_IN_OPTIONS_MSG = INVALID_TOPIC + " Topic ID specified in the wrong location."
WARN_IGNORE_DUP_INFO_MSG = (
    "All types, descriptions, fixed urls, source urls and writers will be ignored for existing Topics."
)

ERROR_DUPLICATE_TARGET_ID_MSG = "Target ID is duplicated. Target ID's must be unique."
ERROR_INVALID_RELATIONSHIP_FORMAT_MSG = "Invalid {kind} Relationship format."
ERROR_LEVEL_RELATIONSHIP_MSG = "Invalid {level}! Relationships can't be used for a {level} without front matter."
ERROR_LEVEL_FRONT_MATTER_RELATIONSHIP_MSG = (
    "Invalid {level}! Relationships can only be used when a {level} has exactly one front matter topic."
)
ERROR_LEVEL_EXTERNAL_CSP_MSG = "Invalid {level}! An external content spec can only be defined once."
ERROR_RELATIONSHIP_BASE_LEVEL_MSG = INVALID_CS + " Relationships can't be at the base level."
ERROR_COMMON_CONTENT_RELATIONSHIP_MSG = "Invalid Common Content! Relationships can't be used for Common Content."
WARN_COMMON_CONTENT_ATTRIBUTES_MSG = "Common Content only supports a title. All other attributes have been ignored."

ERROR_INVALID_ATTRIBUTE_MSG = 'Invalid attribute! "{key}" is not a valid attribute.'
ERROR_DUPLICATE_ATTRIBUTE_MSG = 'Invalid attribute, "{key}" has already been defined.'
ERROR_INVALID_CONDITION_MSG = 'Invalid condition! "{value}" is not a valid regular expression.'
ERROR_INVALID_TAG_FORMAT_MSG = "Incorrect tag attribute format."
ERROR_DUPLICATE_TAG_MSG = 'Tag is duplicated. "{tag}" has already been used.'

