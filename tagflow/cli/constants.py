# Exit code used for every handled TagFlow error
CLI_ERROR_EXIT_CODE = 2

# Colors used by the show tables
TABLE_HEADER_COLOR = "blue"
TABLE_KEY_COLOR = "cyan"
TABLE_VALUE_COLOR = "yellow"
BANNER_COLOR = "magenta"

MASKED_VALUE = "********"
