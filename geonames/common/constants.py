"""Application constants."""

USER_AGENT = "geonames-client/0.1 (+https://www.geonames.org)"

DUMP_BASE_URL = "https://download.geonames.org/export/dump"
WEBSERVICE_BASE_URL = "https://secure.geonames.org"
DUMP_TIMEOUT_SECONDS = 600.0
WEBSERVICE_TIMEOUT_SECONDS = 5.0

COLUMN_SEPARATOR = "\t"
COMMENT_PREFIX = "#"
MAX_LINE_BYTES = 1024 * 1024
DOWNLOAD_CHUNK_BYTES = 1024 * 128

# Population thresholds of the published cities<N>.zip dumps.
CITIES_SIZES = (500, 1000, 5000, 15000)

CONTINENT_AFRICA = "AF"
CONTINENT_ASIA = "AS"
CONTINENT_EUROPE = "EU"
CONTINENT_NORTH_AMERICA = "NA"
CONTINENT_OCEANIA = "OC"
CONTINENT_SOUTH_AMERICA = "SA"
CONTINENT_ANTARCTICA = "AN"

ORDER_BY_POPULATION = "population"
ORDER_BY_ELEVATION = "elevation"
ORDER_BY_RELEVANCE = "relevance"

HIERARCHY_TOURISM = "tourism"
HIERARCHY_GEOGRAPHY = "geography"
HIERARCHY_DEPENDENCY = "dependency"

OPERATOR_AND = "AND"
OPERATOR_OR = "OR"

ERR_CODE_AUTHORIZATION = 10
ERR_CODE_RECORD_NOT_EXIST = 11
ERR_CODE_OTHER = 12
ERR_CODE_DATABASE_TIMEOUT = 13
ERR_CODE_INVALID_PARAMETER = 14
ERR_CODE_NO_RESULT_FOUND = 15
ERR_CODE_DUPLICATE = 16
ERR_CODE_POSTAL_CODE_NOT_FOUND = 17
ERR_CODE_DAILY_LIMIT_EXCEEDED = 18
ERR_CODE_HOURLY_LIMIT_EXCEEDED = 19
ERR_CODE_WEEKLY_LIMIT_EXCEEDED = 20
ERR_CODE_INVALID_INPUT = 21
ERR_CODE_SERVER_OVERLOADED = 22
ERR_CODE_SERVICE_NOT_IMPLEMENTED = 23
ERR_CODE_RADIUS_TOO_LARGE = 24
ERR_CODE_MAX_ROWS_TOO_LARGE = 27

EXIT_SUCCESS = 0
EXIT_SERVICE_ERROR = 10
EXIT_HARD_FAIL = 20

JSON_LOG_FIELDS = (
    "timestamp",
    "client",
    "operation",
    "file",
    "line",
    "event",
    "status",
    "rows",
    "error_code",
    "message",
)
