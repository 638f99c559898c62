from fastapi import FastAPI
from inventory.api import (
    executive_token,
    bus_diagram_model,
    bus_diagram_model_zone,
    bus_seat_model,
    amenity,
)
from inventory.src.enums import AppID


# ------------------------------------------------------
# Create separate FastAPI apps for each user domain
# ------------------------------------------------------
app_executive = FastAPI(title="Executive APP")
app_public = FastAPI(title="Public APP")

# Tag each app with its AppID
app_executive.state.id = AppID.EXECUTIVE
app_public.state.id = AppID.PUBLIC


# ------------------------------------------------------
# Executive routers
# ------------------------------------------------------
app_executive.include_router(executive_token.route_executive)

# Fleet inventory routers
app_executive.include_router(bus_diagram_model.route_executive)
app_executive.include_router(bus_diagram_model_zone.route_executive)
app_executive.include_router(bus_seat_model.route_executive)
app_executive.include_router(amenity.route_executive)


# ------------------------------------------------------
# Public routers
# ------------------------------------------------------
app_public.include_router(bus_diagram_model.route_public)
app_public.include_router(bus_seat_model.route_public)
app_public.include_router(amenity.route_public)
