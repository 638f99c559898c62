from inventory.src.db import ExecutiveToken
from inventory.src import openobserve
from inventory.src.schemas import RequestInfo
from inventory.src.enums import AppID


def logEvent(
    token: ExecutiveToken | None,
    requestInfo: RequestInfo,
    data: dict,
) -> None:
    """
    Log an event to OpenObserve with request and user context.

    Args:
        token (ExecutiveToken | None): Authenticated executive token, None for public requests.
        requestInfo (RequestInfo): Metadata about the current request.
        data (dict): Additional event-specific details to include in the log.

    Notes:
        - Automatically attaches `_app_id`, `_method`, `_path`.
        - `_executive_id` is attached for requests served by the executive app.
    """
    logDetails = {
        "_method": requestInfo.method,
        "_path": requestInfo.path,
        "_app_id": requestInfo.app_id,
    }

    if requestInfo.app_id == AppID.EXECUTIVE and isinstance(token, ExecutiveToken):
        logDetails["_executive_id"] = token.executive_id

    logDetails.update(data)
    openobserve.logEvent(logDetails)
