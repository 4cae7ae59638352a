"""Application constants."""

USER_AGENT = "pactometro-updater/1.0 (+results feed sync)"
COMMANDS = ("resolve", "decode", "update")
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20

RECORD_TYPE_REGION = "CM"
RECORD_TYPE_PROVINCE = "PR"
EMPTY_CANDIDACY_CODE = "0000"

DEFAULT_ELECTION_CODE = "510"
DEFAULT_REGION_TABLE = "pactometro_results"
DEFAULT_PROVINCE_TABLE = "pactometro_province_results"
REGION_CONFLICT_KEY = "party_id"
PROVINCE_CONFLICT_KEY = "province_id,party_id"
DEFAULT_DISPLAY_NAME_OVERRIDES = {
    "PODEMOS-IU-AV": "Unidas por Extremadura",
}

ENV_FEED_HOST = "JE_HOST"
ENV_FEED_USER = "JE_USER"
ENV_FEED_PASS = "JE_PASS"
ENV_STORE_URL = "SUPABASE_URL"
ENV_STORE_KEY = "SUPABASE_SERVICE_ROLE_KEY"

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "snapshot_id",
    "province",
    "event",
    "status",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
