# Four tides a day for the longest forecast the API offers (7 days)
MAX_EVENTS = 28
MAX_DAYS = 7

# Deepest container nesting the tokenizer accepts
MAX_DEPTH = 16

EVENT_TYPE_KEY = "EventType"
DATE_TIME_KEY = "DateTime"
HEIGHT_KEY = "Height"
HIGH_WATER = "HighWater"

ADMIRALTY_API_URL = "https://admiraltyapi.azure-api.net/uktidalapi/api/V1"
SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"

OPENAPI_TAGS = [
    {
        "name": "Tide Events",
        "description": "Get high and low water events for a given station",
    },
]

ISO8601_TIME_EXAMPLES = {
    "datetime": {
        "summary": "Date and time (October 17, 2018 08:00 UTC)",
        "value": "2018-10-17T08:00:00Z",
    },
}
