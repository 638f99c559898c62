import base64, json, requests
from logging import getLogger
from requests import Response
from requests.exceptions import RequestException

from inventory.src.constants import (
    OPENOBSERVE_HOST,
    OPENOBSERVE_ORG,
    OPENOBSERVE_PASSWORD,
    OPENOBSERVE_PORT,
    OPENOBSERVE_PROTOCOL,
    OPENOBSERVE_STREAM,
    OPENOBSERVE_TIMEOUT,
    OPENOBSERVE_USERNAME,
)

logger = getLogger("uvicorn.error")

# Prepare Basic Auth credentials
credentials = base64.b64encode(
    bytes(OPENOBSERVE_USERNAME + ":" + OPENOBSERVE_PASSWORD, "utf-8")
).decode("utf-8")

# Default headers for all requests
headers = {"Content-type": "application/json", "Authorization": "Basic " + credentials}

# Construct OpenObserve endpoint URL
openobserveHost = f"{OPENOBSERVE_PROTOCOL}://{OPENOBSERVE_HOST}:{OPENOBSERVE_PORT}"
openobserveURL = f"{openobserveHost}/api/{OPENOBSERVE_ORG}/{OPENOBSERVE_STREAM}/_json"


def logEvent(eventData: dict) -> Response | None:
    """
    Ship an audit event to the configured OpenObserve stream.

    The event is serialized as JSON and posted with Basic authentication.
    Audit shipping never fails the request that produced the event: a
    transport error is reported on the uvicorn error log and None is returned.

    Args:
        eventData (dict): The event to ship.
            Example:
                {
                    "_method": "PUT",
                    "_path": "/executive/inventory/bus/diagram/seat",
                    "_app_id": 1,
                    "_executive_id": 1,
                    "seats_created": 2
                }

    Returns:
        requests.Response | None: The HTTP response of the OpenObserve API.
    """
    try:
        return requests.post(
            openobserveURL,
            headers=headers,
            data=json.dumps(eventData, default=str),
            timeout=OPENOBSERVE_TIMEOUT,
        )
    except RequestException as e:
        logger.warning(f"Unable to ship audit event to OpenObserve: {e}")
        return None
