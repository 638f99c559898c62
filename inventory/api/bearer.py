from fastapi.security import HTTPBearer

# HTTP Bearer authentication scheme of the operations team
bearer_executive = HTTPBearer(scheme_name="Executive HTTPBearer")
